"""
Error types.

These are raised at the edges (feed transport, event parsing, export
preconditions) and converted to session or result state by the ingestion
controller and the export service. They never escape those two.
"""


class StoreHarvestError(Exception):
    """Base class for all storeharvest errors."""


class StreamConnectionError(StoreHarvestError):
    """The event stream could not be opened or dropped mid-stream."""


class StreamPartialFailure(StoreHarvestError):
    """The event stream dropped after at least one batch was collected."""


class MalformedEventPayload(StoreHarvestError):
    """A stream message could not be decoded into an event."""


class ExportEmptySetError(StoreHarvestError):
    """Export was requested for an empty set of products."""

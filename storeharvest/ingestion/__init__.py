"""
Scrape stream ingestion.

Modules:
    events      - Stream message decoding
    feed        - Server-Sent Events transport
    controller  - Session state machine and working set
    collections - Collection/category lookup
"""

from .collections import CollectionLookup, normalize_collections
from .controller import CONNECTION_ERROR_MESSAGE, IngestionController
from .events import EventStatus, StreamEvent, parse_event
from .feed import EventStreamFeed, feed_for_store, iter_sse_messages

__all__ = [
    'CollectionLookup',
    'normalize_collections',
    'CONNECTION_ERROR_MESSAGE',
    'IngestionController',
    'EventStatus',
    'StreamEvent',
    'parse_event',
    'EventStreamFeed',
    'feed_for_store',
    'iter_sse_messages',
]

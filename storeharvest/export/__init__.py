"""
Export of canonical products.

Modules:
    policy  - Free-tier product cap
    service - Format dispatch, artifacts and status messages
"""

from .policy import DEFAULT_FREE_TIER_LIMIT, ExportPolicyGate, GateResult
from .service import (
    CatalogExporter,
    ExportArtifact,
    ExportFormat,
    ExportResult,
    ExportStatus,
    JSON_MIME_TYPE,
)

__all__ = [
    'DEFAULT_FREE_TIER_LIMIT',
    'ExportPolicyGate',
    'GateResult',
    'CatalogExporter',
    'ExportArtifact',
    'ExportFormat',
    'ExportResult',
    'ExportStatus',
    'JSON_MIME_TYPE',
]

"""
Scrape stream events.

Each stream message is a JSON object such as::

    {"status": "batch", "count": 250, "products": [...]}
    {"status": "error", "message": "Store not reachable"}
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import MalformedEventPayload

logger = logging.getLogger(__name__)


class EventStatus(str, Enum):
    STARTING = "starting"
    PAGINATING = "paginating"
    PROCESSING = "processing"
    FETCHING = "fetching"
    RATE_LIMITED = "rate_limited"
    BATCH = "batch"
    COMPLETE = "complete"
    DONE = "done"
    ERROR = "error"


# Statuses that only report progress
PROGRESS_STATUSES = frozenset({
    EventStatus.STARTING,
    EventStatus.PAGINATING,
    EventStatus.PROCESSING,
    EventStatus.FETCHING,
    EventStatus.RATE_LIMITED,
})

COMPLETION_STATUSES = frozenset({EventStatus.COMPLETE, EventStatus.DONE})


@dataclass
class StreamEvent:
    """One decoded stream message."""
    status: EventStatus
    count: Optional[int] = None
    products: List[Dict[str, Any]] = field(default_factory=list)
    message: str = ""
    total: Optional[int] = None  # results.total on completion events


def _as_count(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def parse_event(text: str) -> StreamEvent:
    """
    Decode one stream message.

    Args:
        text: Message data (JSON object)

    Returns:
        StreamEvent

    Raises:
        MalformedEventPayload: If the text is not a JSON object with a known status
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedEventPayload(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedEventPayload(f"Expected an object, got {type(data).__name__}")

    try:
        status = EventStatus(data.get('status'))
    except ValueError as e:
        raise MalformedEventPayload(f"Unknown status: {data.get('status')!r}") from e

    products = data.get('products') or []
    if not isinstance(products, list):
        logger.warning("Ignoring non-list products field in %s event", status.value)
        products = []
    dropped = sum(1 for p in products if not isinstance(p, dict))
    if dropped:
        logger.warning("Dropped %d non-object products from batch", dropped)

    results = data.get('results')
    total = _as_count(results.get('total')) if isinstance(results, dict) else None

    return StreamEvent(
        status=status,
        count=_as_count(data.get('count')),
        products=[p for p in products if isinstance(p, dict)],
        message=str(data.get('message') or data.get('error') or ''),
        total=total,
    )

"""
Scrape session state.

Owned and mutated only by the IngestionController.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .raw import RawProduct


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETING = "completing"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({SessionState.DONE, SessionState.ERROR, SessionState.CANCELLED})
ACTIVE_STATES = frozenset({SessionState.CONNECTING, SessionState.STREAMING, SessionState.COMPLETING})


@dataclass
class ScrapeSession:
    """
    One scrape of one store.

    The working set maps product id to RawProduct in display order (newest
    batch first). It is replaced, never mutated in place, so a snapshot
    taken by a reader stays consistent while batches keep arriving.
    """

    store_url: str = ""
    state: SessionState = SessionState.IDLE
    working_set: Dict[str, RawProduct] = field(default_factory=dict)
    cumulative_count: int = 0
    error_message: str = ""
    success_message: str = ""
    progress_percent: Optional[int] = None  # None while indeterminate
    partial: bool = False                   # Stream dropped after data arrived

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_STATES

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def products(self) -> List[RawProduct]:
        return list(self.working_set.values())

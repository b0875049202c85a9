"""
Export policy gate.

Caps the number of products a free-tier account may export. Runs on
products, before any variant expansion into rows.
"""

import logging
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_FREE_TIER_LIMIT = 50

T = TypeVar('T')


@dataclass
class GateResult(Generic[T]):
    """Products allowed through the gate."""
    products: List[T]
    total: int      # Candidates before capping
    dropped: int    # Candidates cut by the cap
    limit: int

    @property
    def truncated(self) -> bool:
        return self.dropped > 0


class ExportPolicyGate:
    """
    Usage:
        gate = ExportPolicyGate(free_tier_limit=50)
        result = gate.apply(products, paid=False)
    """

    def __init__(self, free_tier_limit: int = DEFAULT_FREE_TIER_LIMIT):
        if free_tier_limit < 1:
            raise ValueError(f"free_tier_limit must be positive, got {free_tier_limit}")
        self.free_tier_limit = free_tier_limit

    def apply(self, products: Sequence[T], paid: bool) -> GateResult[T]:
        """
        Cap the candidate products for the account tier.

        Args:
            products: Candidates in current sort/filter order
            paid: Whether the account is on a paid plan

        Returns:
            GateResult keeping the first N candidates on the free tier,
            all of them on a paid one
        """
        total = len(products)
        if paid or total <= self.free_tier_limit:
            return GateResult(list(products), total, 0, self.free_tier_limit)

        kept = list(products[:self.free_tier_limit])
        logger.info("Free tier: exporting %d of %d products", len(kept), total)
        return GateResult(kept, total, total - len(kept), self.free_tier_limit)

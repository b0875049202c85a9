"""
Pagination and checkbox selection for the product table.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Generic, Iterable, List, Optional, Sequence, Set, TypeVar

from ..common.config_loader import load_catalog_settings
from ..models import CanonicalProduct

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 25
MAX_VISIBLE_PAGES = 5

T = TypeVar('T')


@dataclass
class Page(Generic[T]):
    """One page of a filtered view."""
    number: int
    size: int
    total_items: int
    items: List[T] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.size) if self.size else 0

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def configured_page_size(catalog_settings: Optional[Dict[str, Any]] = None) -> int:
    """
    Page size from the 'catalog' settings section.

    Args:
        catalog_settings: Loaded section (read from settings.yaml if None)

    Returns:
        Positive page size; DEFAULT_PAGE_SIZE when unset or invalid
    """
    if catalog_settings is None:
        catalog_settings = load_catalog_settings()
    try:
        size = int(catalog_settings.get('page_size', DEFAULT_PAGE_SIZE))
    except (TypeError, ValueError):
        logger.warning("Invalid catalog.page_size %r, using %d",
                       catalog_settings.get('page_size'), DEFAULT_PAGE_SIZE)
        return DEFAULT_PAGE_SIZE
    if size < 1:
        logger.warning("catalog.page_size must be positive, got %d; using %d", size, DEFAULT_PAGE_SIZE)
        return DEFAULT_PAGE_SIZE
    return size


def paginate(items: Sequence[T], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """
    Slice a view into a 1-based page.

    The requested page is clamped into range, so a page number left over
    from a larger view never yields an empty slice while items exist.

    Args:
        items: Filtered view
        page: Requested page number
        page_size: Items per page

    Returns:
        Page with its slice of items
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")

    total_pages = max(1, math.ceil(len(items) / page_size))
    number = min(max(1, page), total_pages)
    start = (number - 1) * page_size
    return Page(
        number=number,
        size=page_size,
        total_items=len(items),
        items=list(items[start:start + page_size]),
    )


def page_window(current: int, total_pages: int, max_visible: int = MAX_VISIBLE_PAGES) -> List[int]:
    """
    Page numbers to offer around the current page.

    Example:
        >>> page_window(1, 10)
        [1, 2, 3, 4, 5]
        >>> page_window(10, 10)
        [6, 7, 8, 9, 10]
    """
    if total_pages <= 1:
        return []
    start = max(1, current - max_visible // 2)
    end = min(total_pages, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


class Selection:
    """
    Checked product ids, independent of filtering.

    Usage:
        selection = Selection()
        selection.select_page(page.items)
        selection.toggle("123", checked=False)
        chosen = selection.pick(view)
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: Set[str] = set(ids)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> FrozenSet[str]:
        return frozenset(self._ids)

    def toggle(self, product_id: str, checked: bool) -> None:
        if checked:
            self._ids.add(product_id)
        else:
            self._ids.discard(product_id)

    def select_page(self, page_items: Iterable[CanonicalProduct], checked: bool = True) -> None:
        """Check or uncheck exactly the products on the current page."""
        page_ids = {p.id for p in page_items}
        if checked:
            self._ids |= page_ids
        else:
            self._ids -= page_ids

    def is_page_selected(self, page_items: Iterable[CanonicalProduct]) -> bool:
        page_ids = {p.id for p in page_items}
        return bool(page_ids) and page_ids <= self._ids

    def toggle_all(self, view: Sequence[CanonicalProduct]) -> None:
        """Select the whole view, or clear if everything is already selected."""
        if len(self._ids) == len(view):
            self._ids.clear()
        else:
            self._ids = {p.id for p in view}

    def clear(self) -> None:
        self._ids.clear()

    def pick(self, products: Iterable[CanonicalProduct]) -> List[CanonicalProduct]:
        """Selected products, in the order of the given view."""
        return [p for p in products if p.id in self._ids]

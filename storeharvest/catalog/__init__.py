"""
Catalog view modules.

Modules:
    filters   - Search and structured filters over canonical products
    selection - Pagination and checkbox selection
"""

from .filters import CatalogFilters, apply_filters, derive_view, filter_collections, matches
from .selection import (
    DEFAULT_PAGE_SIZE,
    Page,
    Selection,
    configured_page_size,
    page_window,
    paginate,
)

__all__ = [
    'CatalogFilters',
    'apply_filters',
    'derive_view',
    'filter_collections',
    'matches',
    'DEFAULT_PAGE_SIZE',
    'configured_page_size',
    'Page',
    'Selection',
    'page_window',
    'paginate',
]

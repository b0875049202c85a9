"""
Catalog Filters

Pure filtering over a snapshot of canonical products. Nothing here mutates
its input; a view is re-derived whenever the working set, the search query
or the filters change.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..common.numbers import parse_number
from ..models import CanonicalProduct, Collection, RawProduct
from ..normalize import build_catalog


@dataclass
class CatalogFilters:
    """
    Search query plus structured filters, all ANDed together.

    Empty values disable their filter. Prices are kept as entered and
    parsed on use; unparsable bounds are ignored.
    """
    query: str = ""            # Title or any variant SKU
    vendor: str = ""           # Substring
    product_type: str = ""     # Substring
    tags: str = ""             # Comma-separated, any tag matches
    min_price: str = ""        # Inclusive
    max_price: str = ""        # Inclusive
    collections: List[str] = field(default_factory=list)  # Any handle matches

    def is_empty(self) -> bool:
        return not (
            self.query or self.vendor or self.product_type or self.tags
            or self.min_price or self.max_price or self.collections
        )

    def tag_terms(self) -> List[str]:
        return [t.strip().lower() for t in self.tags.split(',') if t.strip()]


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or '').lower()


def matches_query(product: CanonicalProduct, query: str) -> bool:
    """Case-insensitive substring match on title or any variant SKU."""
    if not query:
        return True
    if _contains(product.title, query):
        return True
    return any(_contains(v.sku, query) for v in product.variants)


def _price_of(product: CanonicalProduct) -> float:
    price = parse_number(product.price)
    return price if price is not None else 0.0


def matches(product: CanonicalProduct, filters: CatalogFilters) -> bool:
    """
    Check one product against every active filter.

    Args:
        product: Product to check
        filters: Active query and filters

    Returns:
        True if the product passes all of them
    """
    if not matches_query(product, filters.query):
        return False

    if filters.vendor and not _contains(product.vendor, filters.vendor):
        return False

    if filters.product_type and not _contains(product.product_type, filters.product_type):
        return False

    terms = filters.tag_terms()
    if terms:
        tags = [tag.lower() for tag in product.tags]
        if not any(term in tag for tag in tags for term in terms):
            return False

    min_price: Optional[float] = parse_number(filters.min_price) if filters.min_price else None
    if min_price is not None and _price_of(product) < min_price:
        return False

    max_price: Optional[float] = parse_number(filters.max_price) if filters.max_price else None
    if max_price is not None and _price_of(product) > max_price:
        return False

    if filters.collections and not set(filters.collections) & set(product.collections):
        return False

    return True


def apply_filters(
    products: Iterable[CanonicalProduct],
    filters: CatalogFilters,
) -> List[CanonicalProduct]:
    """Return the products that pass the filters, in their original order."""
    return [p for p in products if matches(p, filters)]


def derive_view(
    raw_products: Iterable[RawProduct],
    filters: CatalogFilters,
) -> List[CanonicalProduct]:
    """
    Derive the filtered canonical view of a raw working set.

    Args:
        raw_products: Working set snapshot in display order
        filters: Active query and filters

    Returns:
        Canonical products passing the filters
    """
    return apply_filters(build_catalog(raw_products), filters)


def filter_collections(collections: Iterable[Collection], query: str) -> List[Collection]:
    """Collections whose title contains the query (case-insensitive)."""
    return [c for c in collections if _contains(c.title, query or '')]

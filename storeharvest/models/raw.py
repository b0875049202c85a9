"""
Raw scraped product models.

A scraped payload is tagged with its origin platform once, when it enters
the working set. Downstream code dispatches on the tag instead of probing
platform-specific fields again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..common.text_utils import generate_handle


class SourcePlatform(str, Enum):
    SHOPIFY = "shopify"
    WOOCOMMERCE = "woocommerce"


# Keys only WooCommerce (REST or Store API) product payloads carry
WOOCOMMERCE_MARKERS = frozenset({
    'regular_price', 'sale_price', 'stock_status', 'stock_quantity',
    'short_description', 'permalink', 'categories', 'prices', 'variations',
})

# Keys only Shopify products.json payloads carry
SHOPIFY_MARKERS = frozenset({'body_html', 'product_type', 'options', 'published_at'})


def detect_platform(payload: Dict[str, Any]) -> SourcePlatform:
    """
    Guess the origin platform of a product payload from its shape.

    Args:
        payload: Scraped product dictionary

    Returns:
        SHOPIFY unless WooCommerce-only keys are present
    """
    keys = set(payload)
    if keys & SHOPIFY_MARKERS:
        return SourcePlatform.SHOPIFY
    if keys & WOOCOMMERCE_MARKERS:
        return SourcePlatform.WOOCOMMERCE
    if 'name' in payload and 'title' not in payload:
        return SourcePlatform.WOOCOMMERCE
    if isinstance(payload.get('attributes'), (list, dict)):
        return SourcePlatform.WOOCOMMERCE
    return SourcePlatform.SHOPIFY


def payload_id(payload: Dict[str, Any]) -> str:
    """Resolve a stable product id: id, then handle/slug/SKU, then title slug."""
    for key in ('id', 'handle', 'slug', 'sku'):
        value = payload.get(key)
        if value not in (None, ''):
            return str(value)
    title = payload.get('title') or payload.get('name') or ''
    return generate_handle(str(title))


@dataclass
class RawProduct:
    """Scraped product payload tagged with its origin platform."""
    platform: SourcePlatform
    id: str
    payload: Dict[str, Any]

    @classmethod
    def from_payload(
        cls,
        payload: Dict[str, Any],
        platform: Optional[SourcePlatform] = None,
    ) -> "RawProduct":
        """
        Tag a payload with its platform and resolved id.

        Args:
            payload: Scraped product dictionary
            platform: Known origin platform (detected from shape if None)

        Returns:
            RawProduct

        Raises:
            ValueError: If the payload is not a dict or no id can be resolved
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Product payload must be an object, got {type(payload).__name__}")

        product_id = payload_id(payload)
        if not product_id:
            raise ValueError("Product payload has no id, handle, SKU or title")

        return cls(
            platform=platform or detect_platform(payload),
            id=product_id,
            payload=payload,
        )

"""
Canonical product data models.

Pure data classes for the platform-independent product representation
consumed by the filter engine and both CSV exporters.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_VARIANT_TITLE = "Default Title"


@dataclass
class ProductImage:
    """Product image with metadata."""
    src: str
    position: int
    alt: str = ""


@dataclass
class ProductVariant:
    """A purchasable option combination under a product."""
    id: str = ""
    title: str = DEFAULT_VARIANT_TITLE
    option1: str = ""
    option2: str = ""
    option3: str = ""
    option1_name: str = ""
    option2_name: str = ""
    option3_name: str = ""
    sku: str = ""
    price: str = ""
    compare_at_price: str = ""
    available: bool = True
    inventory_quantity: Optional[int] = None
    weight: Optional[float] = None
    weight_unit: str = ""          # kg, g, lb, oz ('' means grams)
    grams: Optional[float] = None  # Precomputed grams, wins over weight
    image: str = ""
    barcode: str = ""

    @property
    def options(self) -> List[str]:
        return [self.option1, self.option2, self.option3]

    @property
    def option_names(self) -> List[str]:
        return [self.option1_name, self.option2_name, self.option3_name]

    @property
    def is_default(self) -> bool:
        """True for the placeholder variant of a product without options."""
        return self.title == DEFAULT_VARIANT_TITLE and not any(self.options)


def default_variant(
    product_id: str = "",
    price: str = "",
    sku: str = "",
    available: bool = True,
    inventory_quantity: Optional[int] = None,
    **weight,
) -> ProductVariant:
    """
    Build the single placeholder variant of a product with no options.

    Args:
        product_id: Owning product id (reused as the variant id)
        price: Product-level price
        sku: Product-level SKU
        available: Product-level stock flag
        inventory_quantity: Product-level stock quantity
        **weight: Optional weight, weight_unit and grams

    Returns:
        ProductVariant titled "Default Title" with empty options
    """
    return ProductVariant(
        id=product_id,
        title=DEFAULT_VARIANT_TITLE,
        sku=sku,
        price=price,
        available=available,
        inventory_quantity=inventory_quantity,
        **weight,
    )


@dataclass
class CanonicalProduct:
    """
    Platform-independent product.

    Derived from a RawProduct on demand and never stored. The variant list
    is never empty: a product built without variants receives a default
    variant from its own price, SKU and stock.

    Field Groups:
    - Core fields: id, handle, title, vendor, type, tags, description
    - Pricing: product-level price and compare-at price
    - Media: ordered product images
    - Variants: option combinations with their own pricing and stock
    - Source: collection membership, storefront URL, origin platform
    """

    id: str
    title: str = ""
    handle: str = ""
    vendor: str = ""
    product_type: str = ""
    tags: List[str] = field(default_factory=list)
    description_html: str = ""

    price: str = ""
    compare_at_price: str = ""
    sku: str = ""

    images: List[ProductImage] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)

    collections: List[str] = field(default_factory=list)  # Collection handles / category slugs
    url: str = ""
    platform: str = ""

    # Payload the product was built from, used by the JSON pass-through export
    source: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.id:
            raise ValueError("Product id is required")
        if not self.variants:
            self.variants = [default_variant(self.id, price=self.price, sku=self.sku)]

    @property
    def has_real_variants(self) -> bool:
        """True when the product has option variants beyond a placeholder."""
        if len(self.variants) > 1:
            return True
        only = self.variants[0]
        return only.title != DEFAULT_VARIANT_TITLE and any(only.options)


@dataclass
class Collection:
    """Storefront collection (Shopify) or category (WooCommerce)."""
    id: str
    title: str
    handle: str = ""

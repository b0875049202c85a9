"""Shared test fixtures."""

import pytest

from storeharvest.models import (
    CanonicalProduct,
    ProductImage,
    ProductVariant,
    RawProduct,
    SourcePlatform,
)


@pytest.fixture
def tee_payload():
    """Shopify-shaped product with two colour variants."""
    return {
        "title": "Tee",
        "price": "19.99",
        "variants": [{"option1": "Red"}, {"option1": "Blue"}],
        "options": [{"name": "Color"}],
    }


@pytest.fixture
def shopify_payload():
    """Fully populated Shopify products.json entry."""
    return {
        "id": 1001,
        "title": "Organic Cotton Hoodie",
        "handle": "organic-cotton-hoodie",
        "body_html": "<p>Soft &amp; warm</p>",
        "vendor": "Acme",
        "product_type": "Hoodies",
        "tags": ["organic", "winter"],
        "options": [{"name": "Size", "values": ["S", "M"]}],
        "images": [
            {"src": "https://cdn.example.com/h1.jpg", "position": 1, "alt": "Front"},
            {"src": "https://cdn.example.com/h2.jpg", "position": 2},
        ],
        "variants": [
            {
                "id": 11, "title": "S", "option1": "S", "sku": "HOOD-S",
                "price": "49.00", "compare_at_price": "59.00",
                "available": True, "grams": 450,
            },
            {
                "id": 12, "title": "M", "option1": "M", "sku": "HOOD-M",
                "price": "49.00", "available": False,
                "weight": 1.1, "weight_unit": "lb",
            },
        ],
    }


@pytest.fixture
def woo_attribute_payload():
    """WooCommerce-shaped product with attributes but no variations."""
    return {
        "id": 77,
        "name": "Linen Shirt",
        "price": "30",
        "attributes": {"Size": ["S", "M"], "Color": ["Red"]},
    }


@pytest.fixture
def woo_simple_payload():
    return {
        "id": 88,
        "name": "Canvas Tote",
        "sku": "TOTE-1",
        "regular_price": "25",
        "sale_price": "20",
        "price": "20",
        "stock_status": "instock",
        "stock_quantity": 7,
        "description": "<p>Sturdy&nbsp;canvas</p>",
        "categories": [{"name": "Bags", "slug": "bags"}],
        "tags": [{"name": "eco"}],
        "images": [{"src": "https://cdn.example.com/tote.jpg"}],
        "weight": "500",
    }


def make_product(index: int, **overrides) -> CanonicalProduct:
    """Canonical product with predictable values."""
    fields = {
        "id": f"p{index}",
        "title": f"Product {index}",
        "handle": f"product-{index}",
        "vendor": "Acme",
        "product_type": "Widgets",
        "price": "10",
        "sku": f"SKU-{index}",
    }
    fields.update(overrides)
    return CanonicalProduct(**fields)


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def sized_product():
    """Canonical product with two real variants."""
    return CanonicalProduct(
        id="shirt",
        title="Shirt",
        handle="shirt",
        price="20",
        sku="SHIRT",
        images=[ProductImage(src="https://cdn.example.com/shirt.jpg", position=1, alt="Shirt")],
        variants=[
            ProductVariant(id="v1", title="S", option1="S", option1_name="Size", sku="SHIRT-S", price="20"),
            ProductVariant(id="v2", title="M", option1="M", option1_name="Size", sku="SHIRT-M", price="22"),
        ],
    )


@pytest.fixture
def raw_factory():
    def make(product_id, title="Item", platform=SourcePlatform.SHOPIFY, **extra):
        payload = {"id": product_id, "title": title, **extra}
        return RawProduct.from_payload(payload, platform=platform)
    return make

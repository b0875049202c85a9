"""
Canonical Product Model Builder

Maps raw scraped payloads (Shopify products.json or WooCommerce REST /
Store API shapes) onto CanonicalProduct.

Variant resolution order:
    1. explicit variants, with option names bound once per product
    2. product-level attributes, expanded by the combinator
    3. a single default variant built from product-level fields
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..common.numbers import format_number, parse_int, parse_number
from ..models import (
    DEFAULT_VARIANT_TITLE,
    CanonicalProduct,
    ProductImage,
    ProductVariant,
    RawProduct,
    SourcePlatform,
    default_variant,
)
from .combinator import MAX_OPTION_SLOTS, attribute_definitions, combine_attributes

logger = logging.getLogger(__name__)


# ── Field helpers ─────────────────────────────────────────────────────────────

def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ''
    return str(value).strip()


def _image_src(value: Any) -> str:
    if isinstance(value, dict):
        return _text(value.get('src') or value.get('url'))
    return _text(value)


def _images(raw_images: Any) -> List[ProductImage]:
    images = []
    if not isinstance(raw_images, list):
        return images
    for index, item in enumerate(raw_images, 1):
        src = _image_src(item)
        if not src:
            continue
        alt = ''
        position = index
        if isinstance(item, dict):
            alt = _text(item.get('alt'))
            position = parse_int(item.get('position')) or index
        images.append(ProductImage(src=src, position=position, alt=alt))
    return images


def _names(value: Any) -> List[str]:
    """Names from a comma string or a list of strings / {name|slug} objects."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(',') if part.strip()]
    names = []
    if isinstance(value, list):
        for item in value:
            name = _text(item.get('name') or item.get('slug')) if isinstance(item, dict) else _text(item)
            if name:
                names.append(name)
    return names


def _collections(payload: Dict[str, Any]) -> List[str]:
    handles = []
    for key in ('collections', 'categories'):
        items = payload.get(key)
        if not isinstance(items, list):
            continue
        for item in items:
            if isinstance(item, dict):
                handle = _text(item.get('handle') or item.get('slug'))
            else:
                handle = _text(item)
            if handle and handle not in handles:
                handles.append(handle)
    extra = _text(payload.get('collection_handle'))
    if extra and extra not in handles:
        handles.append(extra)
    return handles


def _availability(payload: Dict[str, Any], default: bool = True) -> bool:
    if payload.get('available') is not None:
        return bool(payload['available'])
    if payload.get('stock_status'):
        return payload['stock_status'] != 'outofstock'
    if payload.get('is_in_stock') is not None:
        return bool(payload['is_in_stock'])
    if 'in_stock' in payload:
        return payload['in_stock'] is not False
    return default


def _weight(payload: Dict[str, Any]) -> Dict[str, Any]:
    grams = payload.get('grams')
    return {
        'weight': parse_number(payload.get('weight')),
        'weight_unit': _text(payload.get('weight_unit')),
        'grams': parse_number(grams) if grams not in (None, '') else None,
    }


def _compare_at(price: str, candidate: str) -> str:
    """Keep a compare-at price only when it is above the selling price."""
    price_value = parse_number(price)
    candidate_value = parse_number(candidate)
    if candidate_value is None:
        return ''
    if price_value is not None and candidate_value <= price_value:
        return ''
    return candidate


def _woocommerce_prices(payload: Dict[str, Any]) -> Tuple[str, str]:
    """Selling price and regular price, from REST fields or Store API 'prices'."""
    prices = payload.get('prices')
    if isinstance(prices, dict):
        minor_unit = parse_int(prices.get('currency_minor_unit')) or 0

        def to_major(value):
            number = parse_number(value)
            return format_number(number / 10 ** minor_unit) if number is not None else ''

        price = to_major(prices.get('price')) or to_major(prices.get('sale_price'))
        return price, to_major(prices.get('regular_price'))

    regular = _text(payload.get('regular_price'))
    price = _text(payload.get('price')) or _text(payload.get('sale_price')) or regular
    return price, regular


# ── Option name binding ───────────────────────────────────────────────────────

def _bind_option_names(variants: List[ProductVariant], level_names: List[str]) -> None:
    """
    Resolve option names once per product and apply them to every variant.

    A slot takes the first variant-level name, then the product-level name
    at the same index, then "Option N". Slots without any value stay blank.
    """
    names = []
    for slot in range(MAX_OPTION_SLOTS):
        if not any(v.options[slot] for v in variants):
            names.append('')
            continue
        name = next((v.option_names[slot] for v in variants if v.option_names[slot]), '')
        if not name and slot < len(level_names):
            name = level_names[slot]
        names.append(name or f"Option {slot + 1}")

    for variant in variants:
        variant.option1_name, variant.option2_name, variant.option3_name = names


def _level_names(options: Any) -> List[str]:
    """Option names by slot from product-level options/attributes."""
    if isinstance(options, dict):
        return [str(name) for name in options]
    names = []
    if isinstance(options, list):
        for option in options:
            if isinstance(option, dict):
                if option.get('variation') is False:
                    continue
                names.append(_text(option.get('name') or option.get('label')))
            else:
                names.append(_text(option))
    return names


def _variant_title(data: Dict[str, Any], options: List[str]) -> str:
    title = _text(data.get('title') or data.get('name'))
    if title:
        return title
    present = [value for value in options if value]
    return ' / '.join(present) if present else DEFAULT_VARIANT_TITLE


# ── Shopify ───────────────────────────────────────────────────────────────────

def _shopify_variant(data: Dict[str, Any], index: int, product: Dict[str, str]) -> ProductVariant:
    options = [_text(data.get(f'option{slot}')) for slot in range(1, MAX_OPTION_SLOTS + 1)]
    return ProductVariant(
        id=_text(data.get('id')) or f"{product['id']}-{index}",
        title=_variant_title(data, options),
        option1=options[0],
        option2=options[1],
        option3=options[2],
        option1_name=_text(data.get('option1_name')),
        option2_name=_text(data.get('option2_name')),
        option3_name=_text(data.get('option3_name')),
        sku=_text(data.get('sku')),
        price=_text(data.get('price')) or product['price'],
        compare_at_price=_text(data.get('compare_at_price')) or product['compare_at_price'],
        available=_availability(data),
        inventory_quantity=parse_int(data.get('inventory_quantity')),
        image=_image_src(data.get('featured_image') or data.get('image')),
        barcode=_text(data.get('barcode')),
        **_weight(data),
    )


def _build_shopify(raw: RawProduct) -> CanonicalProduct:
    payload = raw.payload
    raw_variants = [v for v in payload.get('variants') or [] if isinstance(v, dict)]

    price = _text(payload.get('price'))
    compare_at = _text(payload.get('compare_at_price'))
    if raw_variants:
        price = price or _text(raw_variants[0].get('price'))
        compare_at = compare_at or _text(raw_variants[0].get('compare_at_price'))

    fields = {'id': raw.id, 'price': price, 'compare_at_price': compare_at}
    variants = [_shopify_variant(data, index, fields) for index, data in enumerate(raw_variants)]

    options = payload.get('options')
    return _assemble(
        raw,
        title=_text(payload.get('title')),
        handle=_text(payload.get('handle')),
        vendor=_text(payload.get('vendor')),
        product_type=_text(payload.get('product_type')),
        description_html=_text(payload.get('body_html') or payload.get('description')),
        price=price,
        compare_at_price=compare_at,
        sku=_text(payload.get('sku')),
        variants=variants,
        level_names=_level_names(options),
        attributes=payload.get('attributes') or options,
    )


# ── WooCommerce ───────────────────────────────────────────────────────────────

def _woocommerce_variant_options(data: Dict[str, Any]) -> Tuple[List[str], List[str]]:
    """Option values and variant-level names from a variation payload."""
    values, names = [], []
    attributes = data.get('attributes')
    if isinstance(attributes, list) and attributes:
        for attr in attributes:
            if isinstance(attr, dict):
                values.append(_text(attr.get('option') or attr.get('value') or attr.get('value_text')))
                names.append(_text(attr.get('name') or attr.get('label')))
            else:
                values.append(_text(attr))
                names.append('')
    elif isinstance(attributes, dict) and attributes:
        for name, value in attributes.items():
            values.append(_text(value))
            names.append(str(name).replace('attribute_pa_', '').replace('attribute_', ''))
    elif any(data.get(f'option{slot}') for slot in range(1, MAX_OPTION_SLOTS + 1)):
        values = [_text(data.get(f'option{slot}')) for slot in range(1, MAX_OPTION_SLOTS + 1)]
        names = [_text(data.get(f'option{slot}_name')) for slot in range(1, MAX_OPTION_SLOTS + 1)]
    elif data.get('size') or data.get('color'):
        values = [_text(data.get('size')), _text(data.get('color'))]
        names = ['Size' if data.get('size') else '', 'Color' if data.get('color') else '']

    values = (values + [''] * MAX_OPTION_SLOTS)[:MAX_OPTION_SLOTS]
    names = (names + [''] * MAX_OPTION_SLOTS)[:MAX_OPTION_SLOTS]
    return values, names


def _woocommerce_variant(data: Dict[str, Any], index: int, product: Dict[str, str]) -> ProductVariant:
    options, names = _woocommerce_variant_options(data)
    price, regular = _woocommerce_prices(data)
    price = price or product['price'] or '0'

    sku = _text(data.get('sku'))
    if not sku and product['sku']:
        sku = f"{product['sku']}-{index}"

    return ProductVariant(
        id=_text(data.get('id')) or f"{product['id']}-{index}",
        title=_variant_title(data, options),
        option1=options[0],
        option2=options[1],
        option3=options[2],
        option1_name=names[0],
        option2_name=names[1],
        option3_name=names[2],
        sku=sku,
        price=price,
        compare_at_price=_compare_at(price, regular),
        available=_availability(data),
        inventory_quantity=parse_int(data.get('stock_quantity')),
        image=_image_src(data.get('image')),
        barcode=_text(data.get('barcode') or data.get('gtin')),
        **_weight(data),
    )


def _build_woocommerce(raw: RawProduct) -> CanonicalProduct:
    payload = raw.payload
    price, regular = _woocommerce_prices(payload)
    compare_at = _text(payload.get('compare_at_price')) or _compare_at(price, regular)
    sku = _text(payload.get('sku'))

    fields = {'id': raw.id, 'price': price, 'sku': sku}
    raw_variants = payload.get('variations') or payload.get('variants') or []
    variants = [
        _woocommerce_variant(data, index, fields)
        for index, data in enumerate(v for v in raw_variants if isinstance(v, dict))
    ]

    categories = _names(payload.get('categories'))
    brands = _names(payload.get('brands'))
    attributes = payload.get('attributes')

    return _assemble(
        raw,
        title=_text(payload.get('title') or payload.get('name')),
        handle=_text(payload.get('handle') or payload.get('slug')),
        vendor=_text(payload.get('vendor')) or (brands[0] if brands else ''),
        product_type=_text(payload.get('product_type')) or (categories[0] if categories else ''),
        description_html=_text(payload.get('description') or payload.get('short_description')),
        price=price,
        compare_at_price=compare_at,
        sku=sku,
        variants=variants,
        level_names=_level_names(attributes),
        attributes=attributes,
    )


# ── Assembly ──────────────────────────────────────────────────────────────────

def _assemble(
    raw: RawProduct,
    *,
    variants: List[ProductVariant],
    level_names: List[str],
    attributes: Any,
    **fields: str,
) -> CanonicalProduct:
    payload = raw.payload
    available = _availability(payload)
    inventory = parse_int(payload.get('stock_quantity', payload.get('inventory_quantity')))

    if not variants:
        definitions = attribute_definitions(attributes)
        variants = combine_attributes(
            definitions,
            parent_id=raw.id,
            parent_sku=fields['sku'],
            price=fields['price'],
            available=available,
            inventory_quantity=inventory,
        )
        if variants:
            logger.debug("Synthesized %d variants for %s from %d attributes",
                         len(variants), raw.id, len(definitions))

    if not variants:
        variants = [default_variant(
            raw.id,
            price=fields['price'],
            sku=fields['sku'],
            available=available,
            inventory_quantity=inventory,
            **_weight(payload),
        )]
    else:
        _bind_option_names(variants, level_names)

    return CanonicalProduct(
        id=raw.id,
        tags=_names(payload.get('tags')),
        images=_images(payload.get('images')),
        variants=variants,
        collections=_collections(payload),
        url=_text(payload.get('url') or payload.get('permalink')),
        platform=raw.platform.value,
        source=payload,
        **fields,
    )


_BUILDERS: Dict[SourcePlatform, Callable[[RawProduct], CanonicalProduct]] = {
    SourcePlatform.SHOPIFY: _build_shopify,
    SourcePlatform.WOOCOMMERCE: _build_woocommerce,
}


def build_canonical(raw: RawProduct) -> CanonicalProduct:
    """
    Map one raw product onto the canonical model.

    Args:
        raw: Platform-tagged scraped product

    Returns:
        CanonicalProduct with at least one variant
    """
    return _BUILDERS[raw.platform](raw)


def build_catalog(raws: Iterable[RawProduct]) -> List[CanonicalProduct]:
    """Build canonical products for a working set, keeping its order."""
    return [build_canonical(raw) for raw in raws]


def build_from_payloads(
    payloads: Iterable[Dict[str, Any]],
    platform: Optional[SourcePlatform] = None,
) -> List[CanonicalProduct]:
    """
    Tag and build plain payload dictionaries (e.g. a saved JSON dump).

    Payloads without a resolvable id are skipped with a warning.
    """
    products = []
    for payload in payloads:
        try:
            raw = RawProduct.from_payload(payload, platform=platform)
        except ValueError as e:
            logger.warning("Skipping product: %s", e)
            continue
        products.append(build_canonical(raw))
    return products

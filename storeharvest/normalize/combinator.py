"""
Variant/Attribute Combinator

Synthesizes variants for products that only expose product-level
attributes (e.g. Size: S, M and Color: Red) by taking the Cartesian
product of all attribute values.
"""

import itertools
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from ..models import ProductVariant

logger = logging.getLogger(__name__)

MAX_OPTION_SLOTS = 3

_VALUE_DELIMITERS = re.compile(r'[,|]')


@dataclass
class AttributeDefinition:
    """A named customization dimension with its allowed values."""
    name: str
    values: List[str]


def normalize_attribute_values(raw: Any) -> List[str]:
    """
    Normalize an attribute's value set to a list of strings.

    Accepts a delimited string ("S, M | L"), a scalar, a list of scalars
    or value objects, or an object with 'options' / 'values'.
    Blank entries and repeats are dropped, order is kept.

    Example:
        >>> normalize_attribute_values("S, M, L")
        ['S', 'M', 'L']
        >>> normalize_attribute_values({'options': ['Red', 'Blue']})
        ['Red', 'Blue']
    """
    if raw is None or isinstance(raw, bool):
        return []

    if isinstance(raw, dict):
        for key in ('options', 'values', 'terms'):
            if key in raw:
                return normalize_attribute_values(raw[key])
        for key in ('name', 'value', 'option'):
            if key in raw:
                return normalize_attribute_values(raw[key])
        return []

    if isinstance(raw, str):
        candidates = _VALUE_DELIMITERS.split(raw)
    elif isinstance(raw, (list, tuple)):
        candidates = []
        for item in raw:
            if isinstance(item, dict):
                candidates.extend(normalize_attribute_values(item))
            elif item is not None and not isinstance(item, bool):
                candidates.append(str(item))
    else:
        candidates = [str(raw)]

    values = []
    for candidate in candidates:
        value = candidate.strip()
        if value and value not in values:
            values.append(value)
    return values


def attribute_definitions(attributes: Any) -> List[AttributeDefinition]:
    """
    Read ordered attribute definitions from a product payload.

    Supports a mapping {name: values} and a list of attribute objects
    ({name|label, options|values}). Attributes flagged
    ``variation: false`` describe the product rather than its variants and
    are left out, as are attributes with no usable values.

    Args:
        attributes: The payload's attributes (or options) field

    Returns:
        Definitions in payload order
    """
    if isinstance(attributes, dict):
        entries = [(str(name), values) for name, values in attributes.items()]
    elif isinstance(attributes, list):
        entries = []
        for index, attr in enumerate(attributes):
            if not isinstance(attr, dict):
                continue
            if attr.get('variation') is False:
                continue
            name = attr.get('name') or attr.get('label') or f"Option {index + 1}"
            for key in ('options', 'values', 'terms'):
                if key in attr:
                    entries.append((str(name), attr[key]))
                    break
    else:
        return []

    definitions = []
    for name, raw_values in entries:
        values = normalize_attribute_values(raw_values)
        if not values:
            logger.debug("Skipping attribute %r with no values", name)
            continue
        definitions.append(AttributeDefinition(name=name, values=values))
    return definitions


def combine_attributes(
    definitions: List[AttributeDefinition],
    parent_id: str = "",
    parent_sku: str = "",
    price: str = "",
    available: bool = True,
    inventory_quantity: Optional[int] = None,
) -> List[ProductVariant]:
    """
    Build one variant per combination of attribute values.

    Combinations follow nested-loop order: the first attribute varies
    slowest. Option slots hold the first three attribute values; every
    value appears in the variant title.

    Args:
        definitions: Ordered attribute definitions
        parent_id: Product id, prefix of variant ids
        parent_sku: Product SKU, prefix of variant SKUs
        price: Price inherited by every variant
        available: Stock flag inherited by every variant
        inventory_quantity: Stock quantity inherited by every variant

    Returns:
        Variants, or an empty list when there are no attributes
    """
    if not definitions:
        return []

    names = [d.name for d in definitions[:MAX_OPTION_SLOTS]]
    names += [''] * (MAX_OPTION_SLOTS - len(names))

    variants = []
    for index, combo in enumerate(itertools.product(*(d.values for d in definitions))):
        slots = list(combo[:MAX_OPTION_SLOTS]) + [''] * (MAX_OPTION_SLOTS - len(combo))
        variants.append(ProductVariant(
            id=f"{parent_id}-{index}",
            title=' / '.join(combo),
            option1=slots[0],
            option2=slots[1],
            option3=slots[2],
            option1_name=names[0],
            option2_name=names[1],
            option3_name=names[2],
            sku=f"{parent_sku}-{index}" if parent_sku else '',
            price=price,
            available=available,
            inventory_quantity=inventory_quantity,
        ))
    return variants

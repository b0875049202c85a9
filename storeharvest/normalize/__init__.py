"""
Normalization of scraped payloads into canonical products.

Modules:
    combinator - Cartesian-product variant synthesis from attributes
    builder    - Raw payload -> CanonicalProduct
"""

from .builder import build_canonical, build_catalog, build_from_payloads
from .combinator import (
    AttributeDefinition,
    attribute_definitions,
    combine_attributes,
    normalize_attribute_values,
)

__all__ = [
    'build_canonical',
    'build_catalog',
    'build_from_payloads',
    'AttributeDefinition',
    'attribute_definitions',
    'combine_attributes',
    'normalize_attribute_values',
]

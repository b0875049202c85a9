"""
Weight Unit Normalization

Converts variant weights to the units each export format expects.
Grams are the canonical unit. A precomputed grams value always wins over
weight + unit arithmetic.

Shopify wants integer grams and writes "0" for a missing weight; the
WooCommerce template wants fractional kilograms and leaves a missing
weight empty. Both defaults come from the platforms' own import
templates.
"""

import logging
from typing import Optional

from .numbers import format_number, parse_number, round_half_up

logger = logging.getLogger(__name__)

# Multipliers from a weight unit to grams ('' = grams)
GRAMS_PER_UNIT = {
    'kg': 1000.0,
    'g': 1.0,
    '': 1.0,
    'lb': 453.592,
    'lbs': 453.592,
    'oz': 28.3495,
}

# Multipliers from a weight unit to kilograms
KILOGRAMS_PER_UNIT = {
    'kg': 1.0,
    'lb': 0.453592,
    'lbs': 0.453592,
    'oz': 0.0283495,
}


def _normalize_unit(unit: Optional[str]) -> str:
    return (unit or '').strip().lower()


def to_grams(weight, unit: str = '', grams=None) -> Optional[float]:
    """
    Convert a weight to grams.

    Args:
        weight: Weight value (number or numeric string)
        unit: Weight unit (kg, g, lb, lbs, oz; '' means grams)
        grams: Precomputed grams, used as-is when present

    Returns:
        Weight in grams, or None if no non-zero weight is known
    """
    if grams not in (None, ''):
        explicit = parse_number(grams)
        if explicit is not None:
            return explicit

    value = parse_number(weight)
    if not value:
        return None

    key = _normalize_unit(unit)
    factor = GRAMS_PER_UNIT.get(key)
    if factor is None:
        logger.debug("Unrecognized weight unit %r, treating %s as grams", unit, value)
        factor = 1.0
    return value * factor


def to_kilograms(weight, unit: str = '', grams=None) -> Optional[float]:
    """
    Convert a weight to kilograms at full precision.

    Args:
        weight: Weight value (number or numeric string)
        unit: Weight unit (kg, g, lb, lbs, oz; '' means grams)
        grams: Precomputed grams, used as-is when present

    Returns:
        Weight in kilograms, or None if no non-zero weight is known
    """
    if grams not in (None, ''):
        explicit = parse_number(grams)
        if explicit is not None:
            return explicit / 1000

    value = parse_number(weight)
    if not value:
        return None

    key = _normalize_unit(unit)
    if key in KILOGRAMS_PER_UNIT:
        return value * KILOGRAMS_PER_UNIT[key]
    if key not in GRAMS_PER_UNIT:
        logger.debug("Unrecognized weight unit %r, treating %s as grams", unit, value)
    return value / 1000


def shopify_grams(variant) -> str:
    """
    Variant weight for the Shopify "Variant Grams" column.

    Returns:
        Integer grams as text; "0" when the weight is missing or zero
    """
    grams = to_grams(variant.weight, variant.weight_unit, variant.grams)
    if not grams:
        return '0'
    return str(round_half_up(grams))


def woocommerce_kilograms(variant) -> str:
    """
    Variant weight for the WooCommerce "Weight (kg)" column.

    Returns:
        Unrounded kilograms as text; '' when the weight is missing
    """
    kilograms = to_kilograms(variant.weight, variant.weight_unit, variant.grams)
    if kilograms is None:
        return ''
    return format_number(kilograms)

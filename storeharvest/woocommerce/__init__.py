"""
WooCommerce integration modules.

Modules:
    csv_exporter - Product export to WooCommerce CSV format
"""

from .csv_exporter import (
    WooCommerceCSVExporter,
    WOOCOMMERCE_FIELDNAMES,
    WOOCOMMERCE_MIME_TYPE,
    split_prices,
)

__all__ = [
    'WooCommerceCSVExporter',
    'WOOCOMMERCE_FIELDNAMES',
    'WOOCOMMERCE_MIME_TYPE',
    'split_prices',
]

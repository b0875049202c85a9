"""
Shopify integration modules.

Modules:
    csv_exporter - Product export to Shopify CSV format
"""

from .csv_exporter import (
    ShopifyCSVExporter,
    SHOPIFY_FIELDNAMES,
    SHOPIFY_MIME_TYPE,
)

__all__ = [
    'ShopifyCSVExporter',
    'SHOPIFY_FIELDNAMES',
    'SHOPIFY_MIME_TYPE',
]

"""
Shopify CSV Exporter

Exports canonical products to the Shopify product import CSV format.
Handles all 45 columns of the import template.

Layout:
- One row per variant
- Shared product fields and option names only on a product's first row;
  later variant rows leave them blank and Shopify inherits them from the
  row above
"""

import logging
import os
from typing import Dict, List

from ..common.csv_utils import configure_csv, render_csv
from ..common.units import shopify_grams
from ..models import CanonicalProduct, ProductVariant

logger = logging.getLogger(__name__)

# Configure CSV for large fields
configure_csv()

# Shopify product import columns (template order)
SHOPIFY_FIELDNAMES = [
    'Handle', 'Title', 'Body (HTML)', 'Vendor', 'Type', 'Tags', 'Published',
    'Option1 Name', 'Option1 Value', 'Option2 Name', 'Option2 Value',
    'Option3 Name', 'Option3 Value',
    'Variant SKU', 'Variant Grams', 'Variant Inventory Tracker', 'Variant Inventory Policy',
    'Variant Fulfillment Service', 'Variant Price', 'Variant Compare At Price',
    'Variant Requires Shipping', 'Variant Taxable', 'Variant Barcode',
    'Image Src', 'Image Position', 'Image Alt Text', 'Gift Card',
    'SEO Title', 'SEO Description',
    'Google Shopping / Google Product Category', 'Google Shopping / Gender',
    'Google Shopping / Age Group', 'Google Shopping / MPN',
    'Google Shopping / AdWords Grouping', 'Google Shopping / AdWords Labels',
    'Google Shopping / Condition', 'Google Shopping / Custom Product',
    'Google Shopping / Custom Label 0', 'Google Shopping / Custom Label 1',
    'Google Shopping / Custom Label 2', 'Google Shopping / Custom Label 3',
    'Google Shopping / Custom Label 4',
    'Variant Image', 'Variant Weight Unit', 'Status',
]

SHOPIFY_MIME_TYPE = 'text/csv;charset=utf-8'


class ShopifyCSVExporter:
    """
    Exports canonical products to Shopify-compatible CSV.

    Usage:
        exporter = ShopifyCSVExporter()
        text = exporter.render(products)
        exporter.export(products, "output/shop-shopify.csv")
    """

    def __init__(self):
        self.fieldnames = SHOPIFY_FIELDNAMES

    def _blank_row(self) -> Dict[str, str]:
        return {field: '' for field in self.fieldnames}

    def variant_to_row(
        self,
        product: CanonicalProduct,
        variant: ProductVariant,
        first: bool,
    ) -> Dict[str, str]:
        """
        Convert one variant to a CSV row.

        Args:
            product: Owning product
            variant: Variant to convert
            first: Whether this is the product's first row

        Returns:
            Dictionary of field values
        """
        grams = shopify_grams(variant)
        row = self._blank_row()
        row.update({
            'Handle': product.handle or product.id,
            'Variant SKU': variant.sku,
            'Variant Grams': grams,
            'Variant Inventory Tracker': '',
            'Variant Inventory Policy': 'deny',
            'Variant Fulfillment Service': 'manual',
            'Variant Price': variant.price or product.price or '0',
            'Variant Compare At Price': variant.compare_at_price or product.compare_at_price,
            'Variant Requires Shipping': 'TRUE',
            'Variant Taxable': 'TRUE',
            'Variant Barcode': variant.barcode,
            'Gift Card': 'FALSE',
            'Variant Weight Unit': 'g' if grams != '0' else '',
            'Status': 'active',
        })

        # Option values
        if variant.is_default:
            row['Option1 Value'] = variant.title
        else:
            row['Option1 Value'] = variant.option1 or variant.title
            row['Option2 Value'] = variant.option2
            row['Option3 Value'] = variant.option3

        # Variant image (default variants show the product's first image)
        if variant.image:
            row['Variant Image'] = variant.image
        elif variant.is_default and product.images:
            row['Variant Image'] = product.images[0].src

        if first:
            row.update(self._shared_fields(product, variant))

        return row

    def _shared_fields(self, product: CanonicalProduct, variant: ProductVariant) -> Dict[str, str]:
        """Fields carried only by a product's first row."""
        first_image = product.images[0] if product.images else None
        shared = {
            'Title': product.title,
            'Body (HTML)': product.description_html,
            'Vendor': product.vendor,
            'Type': product.product_type,
            'Tags': ','.join(product.tags),
            'Published': 'TRUE',
            'Image Src': first_image.src if first_image else '',
            'Image Position': '1' if first_image else '',
            'Image Alt Text': first_image.alt if first_image else '',
        }

        if variant.is_default:
            shared['Option1 Name'] = 'Title'
            return shared

        for slot, (name, value) in enumerate(zip(variant.option_names, variant.options), start=1):
            if value:
                shared[f'Option{slot} Name'] = name or f'Option {slot}'
        return shared

    def product_to_rows(self, product: CanonicalProduct) -> List[Dict[str, str]]:
        """
        Convert product to all CSV rows (one per variant).

        Args:
            product: Product to convert

        Returns:
            List of row dictionaries
        """
        return [
            self.variant_to_row(product, variant, first=(index == 0))
            for index, variant in enumerate(product.variants)
        ]

    def rows(self, products: List[CanonicalProduct]) -> List[List[str]]:
        """Positional rows for all products, in schema order."""
        positional = []
        for product in products:
            for row in self.product_to_rows(product):
                positional.append([row[field] for field in self.fieldnames])
        return positional

    def render(self, products: List[CanonicalProduct]) -> str:
        """
        Render products as Shopify CSV text.

        Args:
            products: Products to export

        Returns:
            CSV document with header
        """
        return render_csv(self.fieldnames, self.rows(products))

    def export(self, products: List[CanonicalProduct], output_path: str) -> int:
        """
        Export products to a CSV file.

        Args:
            products: Products to export
            output_path: Output CSV file path

        Returns:
            Number of rows written
        """
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)

        rows = self.rows(products)
        with open(output_path, 'w', newline='', encoding='utf-8') as csvfile:
            csvfile.write(render_csv(self.fieldnames, rows))

        logger.info("Wrote %d Shopify rows for %d products to %s",
                    len(rows), len(products), output_path)
        return len(rows)

"""
WooCommerce CSV Exporter

Exports canonical products to the WooCommerce product CSV importer format
(39 columns).

Layout:
- Products with real variants: one 'variable' parent row followed by one
  'variation' row per variant, linked through the parent SKU in 'Parent'
- Everything else: a single 'simple' row
"""

import logging
import os
from typing import Dict, List, Optional, Tuple

from ..common.csv_utils import configure_csv, render_csv
from ..common.numbers import parse_number, to_number_string
from ..common.text_utils import slugify_token, strip_html
from ..common.units import woocommerce_kilograms
from ..models import CanonicalProduct, ProductVariant

logger = logging.getLogger(__name__)

configure_csv()

WOOCOMMERCE_FIELDNAMES = [
    'ID', 'Type', 'SKU', 'Name', 'Published', 'Is featured?', 'Visibility in catalog',
    'Short description', 'Description',
    'Tax status', 'Tax class', 'In stock?', 'Stock', 'Backorders allowed?', 'Sold individually?',
    'Weight (kg)', 'Length (cm)', 'Width (cm)', 'Height (cm)', 'Allow customer reviews?',
    'Sale price', 'Regular price', 'Categories', 'Tags', 'Shipping class', 'Images',
    'Attribute 1 name', 'Attribute 1 value(s)', 'Attribute 1 visible', 'Attribute 1 global',
    'Attribute 2 name', 'Attribute 2 value(s)', 'Attribute 2 visible', 'Attribute 2 global',
    'Attribute 3 name', 'Attribute 3 value(s)', 'Attribute 3 visible', 'Attribute 3 global',
    'Parent',
]

WOOCOMMERCE_MIME_TYPE = 'text/csv;charset=utf-8'

ATTRIBUTE_VALUE_SEPARATOR = ' | '


def split_prices(product: CanonicalProduct, variant: ProductVariant) -> Tuple[str, str]:
    """
    Resolve (regular, sale) prices for a row.

    A compare-at price above the current price means the item is on sale:
    the compare-at becomes the regular price and the current price the sale
    price. Otherwise there is no sale price.

    Returns:
        Tuple of (regular price, sale price) as text
    """
    current = to_number_string(variant.price or product.price or '0')
    compare_at = parse_number(variant.compare_at_price or product.compare_at_price)
    if compare_at is not None and compare_at > float(current):
        return to_number_string(compare_at), current
    return current, ''


class WooCommerceCSVExporter:
    """
    Exports canonical products to WooCommerce-compatible CSV.

    Usage:
        exporter = WooCommerceCSVExporter()
        text = exporter.render(products)
        exporter.export(products, "output/shop-woocommerce.csv")
    """

    def __init__(self):
        self.fieldnames = WOOCOMMERCE_FIELDNAMES

    def _base_row(self) -> Dict[str, str]:
        row = {field: '' for field in self.fieldnames}
        row.update({
            'Published': '1',
            'Is featured?': '0',
            'Visibility in catalog': 'visible',
            'Tax status': 'taxable',
            'Backorders allowed?': '0',
            'Sold individually?': '0',
            'Allow customer reviews?': '1',
        })
        return row

    def _product_fields(self, product: CanonicalProduct) -> Dict[str, str]:
        return {
            'ID': product.id,
            'Name': product.title,
            'Description': strip_html(product.description_html),
            'Categories': product.product_type,
            'Tags': ', '.join(product.tags),
            'Images': ','.join(image.src for image in product.images),
        }

    @staticmethod
    def parent_sku(product: CanonicalProduct) -> str:
        return product.sku or product.handle or product.id

    @staticmethod
    def attribute_columns(product: CanonicalProduct) -> List[Tuple[int, str, List[str]]]:
        """
        Attribute columns shared by the parent row and its variations.

        An option slot gets a column when any variant has a value in it.
        Columns are numbered in slot order, skipping empty slots.

        Returns:
            Up to three (option slot, name, values) tuples; values are the
            union observed across variants
        """
        columns = []
        for slot in range(3):
            values: List[str] = []
            for variant in product.variants:
                value = variant.options[slot]
                if value and value not in values:
                    values.append(value)
            if not values:
                continue
            name = product.variants[0].option_names[slot] or f'Option {slot + 1}'
            columns.append((slot, name, values))
        return columns

    def simple_row(self, product: CanonicalProduct) -> Dict[str, str]:
        """Single row for a product without real variants."""
        variant = product.variants[0]
        regular, sale = split_prices(product, variant)
        row = self._base_row()
        row.update(self._product_fields(product))
        row.update({
            'Type': 'simple',
            'SKU': variant.sku or product.sku,
            'In stock?': '0' if variant.available is False else '1',
            'Stock': '' if variant.inventory_quantity is None else str(variant.inventory_quantity),
            'Weight (kg)': woocommerce_kilograms(variant),
            'Sale price': sale,
            'Regular price': regular,
        })
        return row

    def parent_row(self, product: CanonicalProduct) -> Dict[str, str]:
        """'variable' row carrying the product fields and attribute value sets."""
        row = self._base_row()
        row.update(self._product_fields(product))
        row.update({
            'Type': 'variable',
            'SKU': self.parent_sku(product),
            'In stock?': '1',
        })
        for column, (_, name, values) in enumerate(self.attribute_columns(product), start=1):
            row[f'Attribute {column} name'] = name
            row[f'Attribute {column} value(s)'] = ATTRIBUTE_VALUE_SEPARATOR.join(values)
            row[f'Attribute {column} visible'] = '1'
            row[f'Attribute {column} global'] = '0'
        return row

    def variation_row(
        self,
        product: CanonicalProduct,
        variant: ProductVariant,
        index: int,
        columns: Optional[List[Tuple[int, str, List[str]]]] = None,
    ) -> Dict[str, str]:
        """
        'variation' row for one variant.

        Attribute values land in the parent row's attribute columns; a
        variant without a value for an attribute (WooCommerce "any")
        leaves that value blank.

        Args:
            product: Parent product
            variant: Variant to convert
            index: Zero-based position of the variant
            columns: Parent attribute columns (computed if omitted)

        Returns:
            Dictionary of field values
        """
        if columns is None:
            columns = self.attribute_columns(product)
        parent_sku = self.parent_sku(product)
        regular, sale = split_prices(product, variant)
        suffix = slugify_token(variant.option1 or variant.title or '').strip('-') or f'v{index + 1}'
        image = variant.image or (product.images[0].src if product.images else '')

        row = self._base_row()
        row.update({
            'Type': 'variation',
            'SKU': variant.sku or f'{parent_sku}-{suffix}',
            'In stock?': '0' if variant.available is False else '1',
            'Stock': '' if variant.inventory_quantity is None else str(variant.inventory_quantity),
            'Weight (kg)': woocommerce_kilograms(variant),
            'Sale price': sale,
            'Regular price': regular,
            'Images': image,
            'Parent': parent_sku,
        })
        for column, (slot, name, _) in enumerate(columns, start=1):
            row[f'Attribute {column} name'] = name
            row[f'Attribute {column} value(s)'] = variant.options[slot]
        return row

    def product_to_rows(self, product: CanonicalProduct) -> List[Dict[str, str]]:
        """
        Convert product to all CSV rows.

        Args:
            product: Product to convert

        Returns:
            List of row dictionaries
        """
        if not product.has_real_variants:
            return [self.simple_row(product)]

        columns = self.attribute_columns(product)
        rows = [self.parent_row(product)]
        for index, variant in enumerate(product.variants):
            rows.append(self.variation_row(product, variant, index, columns))
        return rows

    def rows(self, products: List[CanonicalProduct]) -> List[List[str]]:
        """Positional rows for all products, in schema order."""
        positional = []
        for product in products:
            for row in self.product_to_rows(product):
                positional.append([row[field] for field in self.fieldnames])
        return positional

    def render(self, products: List[CanonicalProduct]) -> str:
        """
        Render products as WooCommerce CSV text.

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

        logger.info("Wrote %d WooCommerce rows for %d products to %s",
                    len(rows), len(products), output_path)
        return len(rows)

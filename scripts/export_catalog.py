#!/usr/bin/env python3
"""
Export a Saved Catalog

Exports a JSON product dump (e.g. a previous `--format json` export) to
Shopify or WooCommerce CSV, with the same filters as the product table.

Usage:
    python3 scripts/export_catalog.py output/shop.example.com-products.json
    python3 scripts/export_catalog.py dump.json --format woocommerce --vendor Acme
    python3 scripts/export_catalog.py dump.json --tags "sale, new" --max-price 50
    python3 scripts/export_catalog.py dump.json --select 123,456 --paid
    python3 scripts/export_catalog.py dump.json --vendor Acme --page 2
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from storeharvest.catalog import (
    CatalogFilters,
    Selection,
    apply_filters,
    configured_page_size,
    page_window,
    paginate,
)
from storeharvest.common.config_loader import load_catalog_settings, load_export_settings
from storeharvest.common.log_config import setup_logging
from storeharvest.export import CatalogExporter, ExportFormat
from storeharvest.models import SourcePlatform
from storeharvest.normalize import build_from_payloads

load_dotenv()

logger = logging.getLogger(__name__)


def load_payloads(path: str) -> list:
    """Read product payloads from a JSON list or a {"products": [...]} object."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("products") or []
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a product list")
    return data


def print_page(view: list, page_number: int, page_size: int) -> None:
    """Print one page of products with the page links around it."""
    page = paginate(view, page_number, page_size)
    print(f"\nPage {page.number} of {max(page.total_pages, 1)} ({page.total_items} products)")
    print("-" * 60)
    for product in page.items:
        print(f"  {product.id:<14} {product.title[:40]:<40} {product.price}")
    window = page_window(page.number, page.total_pages)
    if window:
        print("Pages: " + " ".join(f"[{n}]" if n == page.number else str(n) for n in window))


def main():
    parser = argparse.ArgumentParser(
        description="Export a saved product dump to Shopify or WooCommerce CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="JSON product dump")
    parser.add_argument(
        "--store-url",
        default="",
        help="Store URL for the output file name (default: input file name)",
    )
    parser.add_argument(
        "--platform",
        choices=[p.value for p in SourcePlatform],
        help="Source platform of the dump (default: detected per product)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=[f.value for f in ExportFormat],
        help="Export format (default: export.default_format from settings)",
    )
    parser.add_argument("--output", "-o", default="output", metavar="DIR")
    parser.add_argument("--query", "-q", default="", help="Search title or variant SKU")
    parser.add_argument("--vendor", default="")
    parser.add_argument("--type", dest="product_type", default="")
    parser.add_argument("--tags", default="", help="Comma-separated tags (any match)")
    parser.add_argument("--min-price", default="")
    parser.add_argument("--max-price", default="")
    parser.add_argument(
        "--collection", "-c",
        action="append",
        default=[],
        metavar="HANDLE",
        help="Collection handle or category slug (repeatable)",
    )
    parser.add_argument(
        "--page",
        type=int,
        metavar="N",
        help="List page N of the filtered products instead of exporting",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        help="Products per page (default: catalog.page_size from settings)",
    )
    parser.add_argument("--select", default="", help="Comma-separated product ids to export")
    parser.add_argument("--paid", action="store_true", help="Paid plan: no export cap")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        payloads = load_payloads(args.input)
    except (OSError, ValueError) as e:
        print(f"ERROR: Could not read {args.input}: {e}")
        sys.exit(1)

    export_settings = load_export_settings()
    platform = SourcePlatform(args.platform) if args.platform else None
    fmt = ExportFormat(args.format or export_settings['default_format'])

    products = build_from_payloads(payloads, platform=platform)
    filters = CatalogFilters(
        query=args.query,
        vendor=args.vendor,
        product_type=args.product_type,
        tags=args.tags,
        min_price=args.min_price,
        max_price=args.max_price,
        collections=args.collection,
    )
    view = apply_filters(products, filters)

    print(f"Loaded {len(products)} products, {len(view)} match the filters")

    if args.page is not None:
        page_size = args.page_size or configured_page_size(load_catalog_settings())
        print_page(view, args.page, page_size)
        return

    exporter = CatalogExporter(
        args.store_url or Path(args.input).stem.replace("-products", ""),
        paid=args.paid,
        free_tier_limit=export_settings['free_tier_limit'],
    )

    if args.select:
        selection = Selection(i.strip() for i in args.select.split(",") if i.strip())
        result = exporter.export_selected(view, products, selection, fmt)
    elif filters.is_empty():
        result = exporter.export_all(products, products, fmt)
    elif not view:
        print("No products match the filters")
        sys.exit(1)
    else:
        result = exporter.export_all(view, products, fmt)

    print(result.message)
    if not result.ok:
        sys.exit(1)

    path = result.artifact.write(args.output)
    print(f"Saved: {path}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Scrape a Store

Streams a storefront's catalog through the scraper backend and exports the
collected products. Press Ctrl+C to stop early: products collected so far
are still exported.

Usage:
    python3 scripts/scrape_store.py https://shop.example.com
    python3 scripts/scrape_store.py https://shop.example.com --format woocommerce
    python3 scripts/scrape_store.py https://wp.example.com --platform woocommerce --paid
    python3 scripts/scrape_store.py https://shop.example.com --collection sale --collection new

Backend (in order of precedence):
    1. --api-url / --token flags
    2. STOREHARVEST_API_URL / STOREHARVEST_TOKEN environment variables (.env)
    3. feed.api_url in config/settings.yaml
"""

import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from storeharvest.common.config_loader import load_settings
from storeharvest.common.log_config import setup_logging
from storeharvest.export import CatalogExporter, ExportFormat
from storeharvest.ingestion import CollectionLookup, IngestionController, feed_for_store
from storeharvest.models import SessionState, SourcePlatform

load_dotenv()

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Stream-scrape a storefront and export its catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("store_url", help="Storefront URL")
    parser.add_argument(
        "--platform",
        choices=[p.value for p in SourcePlatform],
        default=SourcePlatform.SHOPIFY.value,
        help="Storefront platform (default: shopify)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=[f.value for f in ExportFormat],
        help="Export format (default: export.default_format from settings)",
    )
    parser.add_argument(
        "--output", "-o",
        default="output",
        metavar="DIR",
        help="Directory for the export file (default: output/)",
    )
    parser.add_argument(
        "--collection", "-c",
        action="append",
        default=[],
        metavar="HANDLE",
        help="Only scrape this collection (repeatable)",
    )
    parser.add_argument("--paid", action="store_true", help="Paid plan: no export cap")
    parser.add_argument("--api-url", help="Scraper backend URL")
    parser.add_argument("--token", help="Scraper backend access token")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )
    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    feed_settings = settings['feed']
    export_settings = settings['export']

    api_url = args.api_url or os.environ.get("STOREHARVEST_API_URL") or feed_settings['api_url']
    token = args.token or os.environ.get("STOREHARVEST_TOKEN", "")
    platform = SourcePlatform(args.platform)
    fmt = ExportFormat(args.format or export_settings['default_format'])

    lookup = CollectionLookup(api_url, settings=feed_settings)

    def show_collections(store_url: str) -> None:
        collections = lookup.fetch(store_url, platform)
        if collections:
            print(f"  Collections:  {', '.join(c.handle or c.title for c in collections[:10])}"
                  + (" ..." if len(collections) > 10 else ""))

    controller = IngestionController(on_started=show_collections)
    feed = feed_for_store(
        args.store_url,
        api_url,
        token=token,
        platform=platform,
        collection_handles=args.collection,
        settings=feed_settings,
    )

    print("=" * 60)
    print("Store Scrape")
    print("=" * 60)
    print(f"  Store:        {args.store_url}")
    print(f"  Platform:     {platform.value}")
    print(f"  Backend:      {api_url}")
    print(f"  Format:       {fmt.value}")
    print()

    try:
        session = controller.scrape(args.store_url, feed, platform=platform)
    except KeyboardInterrupt:
        controller.stop()
        session = controller.snapshot()
        print("\nStopped. Exporting products collected so far.")

    if session.state == SessionState.ERROR:
        print(f"ERROR: {session.error_message}")
        if not session.working_set:
            sys.exit(1)

    if session.success_message:
        print(session.success_message)
    elif session.partial:
        print(f"Stream ended early with {len(session.working_set)} products")

    products = controller.canonical_products()
    exporter = CatalogExporter(
        args.store_url,
        paid=args.paid,
        free_tier_limit=export_settings['free_tier_limit'],
    )
    result = exporter.export_all(products, products, fmt)
    print(result.message)
    if not result.ok:
        sys.exit(1)

    path = result.artifact.write(args.output)
    print(f"  Saved:        {path}")


if __name__ == "__main__":
    main()

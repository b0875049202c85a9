"""
Storefront Catalog Harvester

Streams a storefront's product catalog and exports it as Shopify or
WooCommerce import CSV.

Modules:
    models      - Data models (RawProduct, CanonicalProduct, ScrapeSession)
    common      - Shared utilities (config loader, units, CSV quoting, logging)
    normalize   - Raw payload -> canonical product mapping, variant synthesis
    ingestion   - Event stream feed, ingestion controller, collection lookup
    catalog     - Filtering, pagination and selection over the working set
    export      - Tier gate and export service producing download artifacts
    shopify     - Shopify CSV export
    woocommerce - WooCommerce CSV export
"""

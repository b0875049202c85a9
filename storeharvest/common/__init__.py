# Common utilities
from .config_loader import (
    load_catalog_settings,
    load_config,
    load_export_settings,
    load_feed_settings,
    load_settings,
)
from .csv_utils import format_row, parse_csv, quote_field, render_csv
from .log_config import setup_logging
from .numbers import format_number, parse_number, to_number_string
from .text_utils import export_basename, generate_handle, strip_html
from .units import shopify_grams, to_grams, to_kilograms, woocommerce_kilograms

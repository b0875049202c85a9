"""
Configuration Loader

Loads YAML configuration for export limits, catalog paging and the
scrape feed endpoints.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

SETTINGS_FILE = 'settings.yaml'

# Used for any key missing from settings.yaml
DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    'export': {
        'free_tier_limit': 50,
        'default_format': 'shopify',
    },
    'catalog': {
        'page_size': 25,
    },
    'feed': {
        'api_url': 'http://localhost:5000',
        'stream_path': '/api/scraper/scrape-stream',
        'woocommerce_stream_path': '/api/scraper/woocommerce-stream',
        'collections_path': '/api/scraper/collections/{domain}',
        'woocommerce_categories_path': '/api/scraper/woocommerce-categories/{domain}',
        'connect_timeout': 30,
    },
}


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'settings.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def merge_settings(overrides: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Overlay loaded settings on the defaults, one section at a time.

    Args:
        overrides: Parsed settings (may omit sections or keys)

    Returns:
        Complete settings dictionary
    """
    merged = {section: dict(values) for section, values in DEFAULT_SETTINGS.items()}
    for section, values in (overrides or {}).items():
        if isinstance(values, dict):
            merged.setdefault(section, {}).update(values)
    return merged


def load_settings() -> Dict[str, Dict[str, Any]]:
    """
    Load settings.yaml merged over the built-in defaults.

    Returns:
        Settings dictionary with 'export', 'catalog' and 'feed' sections
    """
    return merge_settings(load_config(SETTINGS_FILE))


def load_export_settings() -> Dict[str, Any]:
    """
    Load export settings.

    Returns:
        Dictionary with 'free_tier_limit' and 'default_format'
    """
    return load_settings()['export']


def load_catalog_settings() -> Dict[str, Any]:
    """
    Load product table settings.

    Returns:
        Dictionary with 'page_size'
    """
    return load_settings()['catalog']


def load_feed_settings() -> Dict[str, Any]:
    """
    Load scrape feed endpoint settings.

    Returns:
        Dictionary with 'api_url', stream and lookup paths, 'connect_timeout'
    """
    return load_settings()['feed']

"""
Collection / category lookup.

Fetches the store's collections (Shopify) or categories (WooCommerce) to
populate the collection filter. The lookup is optional: any failure yields
an empty list.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlparse

import requests

from ..models import Collection, SourcePlatform

logger = logging.getLogger(__name__)


def _unwrap(payload: Any) -> List[Any]:
    """Find the collection list in any of the backend's response envelopes."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    data = payload.get('data')
    if isinstance(data, dict):
        for key in ('collections', 'categories'):
            if isinstance(data.get(key), list):
                return data[key]
    for key in ('collections', 'categories'):
        if isinstance(payload.get(key), list):
            return payload[key]
    if isinstance(data, list):
        return data
    return []


def normalize_collections(payload: Any) -> List[Collection]:
    """
    Normalize a lookup response to Collection objects.

    Args:
        payload: Decoded JSON response

    Returns:
        Collections with id, title and handle filled in
    """
    collections = []
    for index, item in enumerate(_unwrap(payload)):
        if not isinstance(item, dict):
            continue
        url = item.get('url') or ''
        handle = item.get('handle') or item.get('slug') or (url.rstrip('/').split('/')[-1] if url else '')
        collections.append(Collection(
            id=str(item.get('id') or handle or f"col-{index}"),
            title=str(item.get('title') or item.get('name') or handle or f"Collection {index + 1}"),
            handle=str(handle),
        ))
    return collections


class CollectionLookup:
    """
    Client for the backend's collection/category endpoints.

    Usage:
        lookup = CollectionLookup(api_url="http://localhost:5000")
        collections = lookup.fetch("https://shop.example.com")
    """

    def __init__(
        self,
        api_url: str,
        settings: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        self.api_url = api_url.rstrip('/')
        self.settings = settings or {}
        self.session = session or requests.Session()
        self.timeout = timeout

    def _endpoint(self, domain: str, platform: SourcePlatform) -> str:
        if platform == SourcePlatform.WOOCOMMERCE:
            path = self.settings.get(
                'woocommerce_categories_path', '/api/scraper/woocommerce-categories/{domain}')
        else:
            path = self.settings.get('collections_path', '/api/scraper/collections/{domain}')
        return self.api_url + path.format(domain=quote(domain, safe=''))

    def fetch(
        self,
        store_url: str,
        platform: SourcePlatform = SourcePlatform.SHOPIFY,
    ) -> List[Collection]:
        """
        Fetch the store's collections.

        Args:
            store_url: Absolute storefront URL
            platform: Storefront platform

        Returns:
            Collections, or an empty list if unavailable
        """
        url = (store_url or '').strip()
        if not url.startswith('http'):
            return []
        domain = urlparse(url).hostname
        if not domain:
            return []

        try:
            response = self.session.get(self._endpoint(domain, platform), timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Collection lookup failed for %s: %s", domain, e)
            return []

        collections = normalize_collections(payload)
        logger.info("Loaded %d collections for %s", len(collections), domain)
        return collections

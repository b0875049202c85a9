"""
Text Utilities

Helper functions for handles, HTML cleanup and export file naming.
"""

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup


def generate_handle(title: str, prefix: str = '') -> str:
    """
    Generate URL-friendly handle from title.

    Args:
        title: Product or collection title
        prefix: Optional prefix (e.g., 'brand-' for brand collections)

    Returns:
        URL-friendly handle

    Example:
        >>> generate_handle("Organic Cotton Tee")
        'organic-cotton-tee'
    """
    text = f"{prefix}{title}" if prefix else title

    result = []
    for char in text.lower():
        if char.isalnum():
            result.append(char)
        elif char in ' -_/':
            result.append('-')

    handle = re.sub(r'-+', '-', ''.join(result))
    return handle.strip('-')


def slugify_token(text: str) -> str:
    """Lowercase and replace every run of non [a-z0-9] characters with '-'."""
    return re.sub(r'[^a-z0-9]+', '-', str(text).lower())


def strip_html(html: str) -> str:
    """
    Reduce an HTML fragment to its plain text.

    Args:
        html: Product description HTML

    Returns:
        Text content with non-breaking spaces turned into spaces
    """
    if not html:
        return ''
    if '<' not in html and '&' not in html:
        return html.strip()

    text = BeautifulSoup(html, 'lxml').get_text()
    return text.replace('\xa0', ' ').strip()


def export_basename(store_url: str) -> str:
    """
    Derive the export file base name from a store URL.

    Absolute URLs yield their hostname. Anything else has its scheme
    stripped and every run of characters outside [a-z0-9.-] replaced
    with a hyphen.

    Args:
        store_url: Store URL as entered by the user

    Returns:
        Hostname-like base name, or 'export' when nothing usable remains

    Example:
        >>> export_basename("https://Shop.Example.com/collections/all")
        'shop.example.com'
        >>> export_basename("my shop!")
        'my-shop'
    """
    text = (store_url or '').strip()

    parsed = urlparse(text)
    if parsed.scheme and parsed.netloc and parsed.hostname:
        return parsed.hostname

    text = re.sub(r'^https?://', '', text, flags=re.IGNORECASE)
    text = re.sub(r'[^a-z0-9.-]+', '-', text, flags=re.IGNORECASE)
    text = re.sub(r'-+', '-', text)
    text = re.sub(r'^-|-$', '', text)
    return text or 'export'

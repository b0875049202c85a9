"""
Data models for catalog ingestion and export.

This module contains pure data classes with no business logic.
"""

from .product import (
    DEFAULT_VARIANT_TITLE,
    CanonicalProduct,
    Collection,
    ProductImage,
    ProductVariant,
    default_variant,
)
from .raw import RawProduct, SourcePlatform, detect_platform
from .session import ScrapeSession, SessionState

__all__ = [
    'DEFAULT_VARIANT_TITLE',
    'ProductImage',
    'ProductVariant',
    'CanonicalProduct',
    'Collection',
    'default_variant',
    'RawProduct',
    'SourcePlatform',
    'detect_platform',
    'ScrapeSession',
    'SessionState',
]

"""
Catalog Source Factory

Returns the Mock or HTTP catalog source based on ENV_MODE.
"""

import logging
from functools import lru_cache

from restaurant_portal.core.config import get_settings
from restaurant_portal.services.catalog.base import (
    BaseCatalogSource,
    CatalogUnavailableError,
)
from restaurant_portal.services.catalog.mock import MockCatalogSource
from restaurant_portal.services.catalog.http import HttpCatalogSource

logger = logging.getLogger(__name__)


@lru_cache()
def get_catalog_source() -> BaseCatalogSource:
    """Get the configured catalog source."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Catalog Source: Using MockCatalogSource (development mode)")
        return MockCatalogSource()
    else:
        logger.info(f"Catalog Source: Using HttpCatalogSource ({settings.env_mode.value} mode)")
        return HttpCatalogSource()


def reset_catalog_source() -> None:
    """Clear the cached catalog source instance."""
    get_catalog_source.cache_clear()


__all__ = [
    "get_catalog_source",
    "reset_catalog_source",
    "BaseCatalogSource",
    "CatalogUnavailableError",
    "MockCatalogSource",
    "HttpCatalogSource",
]

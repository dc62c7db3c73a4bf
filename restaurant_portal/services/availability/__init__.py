"""
Availability Store Factory

Returns the in-memory or HTTP availability store based on ENV_MODE.

Usage:
    from restaurant_portal.services.availability import get_availability_store

    store = get_availability_store()
    result = await store.set_availability("downtown", "Gin", available=False)
"""

import logging
from functools import lru_cache

from restaurant_portal.core.config import get_settings
from restaurant_portal.services.availability.base import (
    BaseAvailabilityStore,
    AvailabilityResult,
)
from restaurant_portal.services.availability.mock import InMemoryAvailabilityStore
from restaurant_portal.services.availability.http import HttpAvailabilityStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_availability_store() -> BaseAvailabilityStore:
    """Get the configured availability store."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Availability Store: Using InMemoryAvailabilityStore (development mode)")
        return InMemoryAvailabilityStore(failure_rate=settings.mock_failure_rate)
    else:
        logger.info(f"Availability Store: Using HttpAvailabilityStore ({settings.env_mode.value} mode)")
        return HttpAvailabilityStore()


def reset_availability_store() -> None:
    """Clear the cached store instance."""
    get_availability_store.cache_clear()


__all__ = [
    "get_availability_store",
    "reset_availability_store",
    "BaseAvailabilityStore",
    "AvailabilityResult",
    "InMemoryAvailabilityStore",
    "HttpAvailabilityStore",
]

"""
Account Registrar Factory

Returns the Mock or HTTP registrar based on ENV_MODE.
"""

import logging
from functools import lru_cache

from restaurant_portal.core.config import get_settings
from restaurant_portal.services.accounts.base import (
    BaseAccountRegistrar,
    RegistrationResult,
    DUPLICATE_ACCOUNT,
)
from restaurant_portal.services.accounts.mock import MockAccountRegistrar
from restaurant_portal.services.accounts.http import HttpAccountRegistrar

logger = logging.getLogger(__name__)


@lru_cache()
def get_account_registrar() -> BaseAccountRegistrar:
    """Get the configured account registrar."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Account Registrar: Using MockAccountRegistrar (development mode)")
        return MockAccountRegistrar(failure_rate=settings.mock_failure_rate)
    else:
        logger.info(f"Account Registrar: Using HttpAccountRegistrar ({settings.env_mode.value} mode)")
        return HttpAccountRegistrar()


def reset_account_registrar() -> None:
    """Clear the cached registrar instance."""
    get_account_registrar.cache_clear()


__all__ = [
    "get_account_registrar",
    "reset_account_registrar",
    "BaseAccountRegistrar",
    "RegistrationResult",
    "DUPLICATE_ACCOUNT",
    "MockAccountRegistrar",
    "HttpAccountRegistrar",
]

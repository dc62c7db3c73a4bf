"""
Tests for settings parsing and the ENV_MODE service factories.
"""

import pytest
from pydantic import ValidationError

from restaurant_portal.core.config import EnvironmentMode, Settings, ToggleFailurePolicy, get_settings
from restaurant_portal.services.accounts import get_account_registrar, reset_account_registrar
from restaurant_portal.services.accounts.http import HttpAccountRegistrar
from restaurant_portal.services.accounts.mock import MockAccountRegistrar
from restaurant_portal.services.availability import get_availability_store, reset_availability_store
from restaurant_portal.services.availability.http import HttpAvailabilityStore
from restaurant_portal.services.availability.mock import InMemoryAvailabilityStore
from restaurant_portal.services.catalog import get_catalog_source, reset_catalog_source
from restaurant_portal.services.catalog.http import HttpCatalogSource
from restaurant_portal.services.catalog.mock import MockCatalogSource


def reset_all() -> None:
    get_settings.cache_clear()
    reset_availability_store()
    reset_account_registrar()
    reset_catalog_source()


@pytest.fixture
def fresh_services():
    reset_all()
    yield
    reset_all()


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.toggle_failure_policy is ToggleFailurePolicy.ROLLBACK
    assert settings.toggle_timeout_seconds == 10.0


def test_settings_parse_case_insensitive_enums():
    settings = Settings(_env_file=None, env_mode="PRODUCTION", toggle_failure_policy="Keep")

    assert settings.env_mode is EnvironmentMode.PRODUCTION
    assert settings.use_real_services
    assert settings.toggle_failure_policy is ToggleFailurePolicy.KEEP


def test_settings_reject_unknown_policy():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, toggle_failure_policy="retry")


def test_base_urls_lose_trailing_slash():
    settings = Settings(_env_file=None, app_base_url="https://portal.example.com/")

    assert settings.app_base_url == "https://portal.example.com"


def test_development_uses_mock_services(fresh_services):
    assert isinstance(get_availability_store(), InMemoryAvailabilityStore)
    assert isinstance(get_account_registrar(), MockAccountRegistrar)
    assert isinstance(get_catalog_source(), MockCatalogSource)
    assert get_availability_store() is get_availability_store()


def test_production_uses_http_services(fresh_services, monkeypatch):
    monkeypatch.setenv("ENV_MODE", "production")
    reset_all()

    assert isinstance(get_availability_store(), HttpAvailabilityStore)
    assert isinstance(get_account_registrar(), HttpAccountRegistrar)
    assert isinstance(get_catalog_source(), HttpCatalogSource)

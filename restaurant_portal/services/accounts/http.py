"""
HTTP Account Registrar

Production implementation posting to the portal API:

    POST {APP_BASE_URL}/api/customerRegister
    {"username": ..., "emailAddress": ..., "password": ...}

A duplicate email is answered with 400 by the portal (409 is accepted
too); every other non-success status is a generic failure.
"""

import logging
from typing import Optional

import httpx

from restaurant_portal.core.config import get_settings
from restaurant_portal.services.accounts.base import (
    BaseAccountRegistrar,
    RegistrationResult,
    DUPLICATE_ACCOUNT,
)

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/customerRegister"
DUPLICATE_ACCOUNT_STATUSES = (400, 409)


class HttpAccountRegistrar(BaseAccountRegistrar):
    """Registrar backed by the portal API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.app_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.registration_timeout_seconds
        self._client = client
        logger.info(f"HttpAccountRegistrar initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        return "http"

    async def _post(self, payload: dict) -> httpx.Response:
        url = f"{self.base_url}{REGISTER_PATH}"
        if self._client is not None:
            return await self._client.post(url, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=payload)

    async def register(
        self,
        username: str,
        email_address: str,
        password: str,
    ) -> RegistrationResult:
        """Register a customer account."""
        payload = {
            "username": username,
            "emailAddress": email_address,
            "password": password,
        }

        try:
            response = await self._post(payload)
        except httpx.TimeoutException:
            logger.error(f"Registration timed out for {email_address}")
            return RegistrationResult(
                success=False,
                error_message="Registration timed out",
                error_code="timeout",
                provider="http",
            )
        except httpx.HTTPError as e:
            logger.error(f"Error registering customer: {e}")
            return RegistrationResult(
                success=False,
                error_message=str(e),
                error_code="transport_error",
                provider="http",
            )

        if response.is_success:
            logger.info(f"Customer registered: {username}")
            return RegistrationResult(
                success=True,
                status_code=response.status_code,
                provider="http",
            )

        if response.status_code in DUPLICATE_ACCOUNT_STATUSES:
            logger.info(f"Registration rejected, email exists: {email_address}")
            return RegistrationResult(
                success=False,
                status_code=response.status_code,
                error_message="Email already exists",
                error_code=DUPLICATE_ACCOUNT,
                provider="http",
            )

        logger.warning(f"Registration failed with status {response.status_code}")
        return RegistrationResult(
            success=False,
            status_code=response.status_code,
            error_message=response.text[:200] or f"HTTP {response.status_code}",
            error_code="http_error",
            provider="http",
        )

    async def health_check(self) -> bool:
        """Ping the portal root (not /health, which calls back into this check)."""
        try:
            if self._client is not None:
                response = await self._client.get(f"{self.base_url}/", timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(f"{self.base_url}/")
            return response.is_success
        except httpx.HTTPError as e:
            logger.error(f"Registrar health check failed - {e}")
            return False

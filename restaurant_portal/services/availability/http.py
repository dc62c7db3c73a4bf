"""
HTTP Availability Store Implementation

Production implementation that posts availability commands to the
portal API. Used when ENV_MODE=production or ENV_MODE=staging.

Endpoint:
    POST {APP_BASE_URL}/api/updateLocationIngredients
    {"ingredientName": ..., "branchId": ..., "method": "ADD" | "REMOVE"}

Any 2xx status means the mutation was applied. No response body is
relied upon.
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from restaurant_portal.core.config import get_settings
from restaurant_portal.schemas import AvailabilityMethod
from restaurant_portal.services.availability.base import (
    BaseAvailabilityStore,
    AvailabilityResult,
)

logger = logging.getLogger(__name__)

UPDATE_PATH = "/api/updateLocationIngredients"


class HttpAvailabilityStore(BaseAvailabilityStore):
    """
    Availability store backed by the portal API.

    Args:
        base_url: Portal base URL (defaults to APP_BASE_URL)
        timeout: Request timeout in seconds (defaults to TOGGLE_TIMEOUT_SECONDS)
        client: Shared httpx.AsyncClient; one is created per call otherwise
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.app_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.toggle_timeout_seconds
        self._client = client

        logger.info(f"HttpAvailabilityStore initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        return "http"

    async def _post(self, payload: dict) -> httpx.Response:
        url = f"{self.base_url}{UPDATE_PATH}"
        if self._client is not None:
            return await self._client.post(url, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=payload)

    async def set_availability(
        self,
        branch_id: str,
        ingredient_name: str,
        available: bool,
    ) -> AvailabilityResult:
        """Send ADD/REMOVE for one ingredient at one branch."""
        start_time = datetime.now()
        method = AvailabilityMethod.for_availability(available)
        payload = {
            "ingredientName": ingredient_name,
            "branchId": branch_id,
            "method": method.value,
        }

        try:
            response = await self._post(payload)
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

            if response.is_success:
                logger.info(f"Availability updated: {method.value} {ingredient_name} @ {branch_id}")
                return AvailabilityResult(
                    success=True,
                    branch_id=branch_id,
                    ingredient_name=ingredient_name,
                    method=method,
                    status_code=response.status_code,
                    response_time_ms=elapsed_ms,
                )

            logger.warning(
                f"Availability update rejected ({response.status_code}): "
                f"{method.value} {ingredient_name} @ {branch_id}"
            )
            return AvailabilityResult(
                success=False,
                branch_id=branch_id,
                ingredient_name=ingredient_name,
                method=method,
                status_code=response.status_code,
                error_message=response.text[:200] or f"HTTP {response.status_code}",
                error_code="http_error",
                response_time_ms=elapsed_ms,
            )

        except httpx.TimeoutException:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.error(f"Availability update timed out: {ingredient_name} @ {branch_id}")
            return AvailabilityResult(
                success=False,
                branch_id=branch_id,
                ingredient_name=ingredient_name,
                method=method,
                error_message="Availability update timed out",
                error_code="timeout",
                response_time_ms=elapsed_ms,
            )

        except httpx.HTTPError as e:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.error(f"Availability update transport error: {e}")
            return AvailabilityResult(
                success=False,
                branch_id=branch_id,
                ingredient_name=ingredient_name,
                method=method,
                error_message="Unable to reach availability service",
                error_code="transport_error",
                response_time_ms=elapsed_ms,
            )

    async def health_check(self) -> bool:
        """
        Ping the portal root.

        Never /health: the portal's own /health calls this check.
        """
        try:
            if self._client is not None:
                response = await self._client.get(f"{self.base_url}/", timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(f"{self.base_url}/")
            return response.is_success
        except httpx.HTTPError as e:
            logger.error(f"Availability store health check failed - {e}")
            return False

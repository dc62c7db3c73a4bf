"""
HTTP Catalog Source

Loads page data from the catalog API:

    GET {API_URL}/ingredients     -> [Ingredient, ...]
    GET {API_URL}/currentBranch   -> [Branch, ...]
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from restaurant_portal.core.config import get_settings
from restaurant_portal.schemas import BranchRecord, Ingredient
from restaurant_portal.services.catalog.base import (
    BaseCatalogSource,
    CatalogUnavailableError,
)

logger = logging.getLogger(__name__)


class HttpCatalogSource(BaseCatalogSource):
    """Catalog source backed by the catalog API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout
        self._client = client
        logger.info(f"HttpCatalogSource initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        return "http"

    async def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.get(url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Catalog request failed: GET {path} - {e}")
            raise CatalogUnavailableError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            logger.error(f"Catalog response is not JSON: GET {path}")
            raise CatalogUnavailableError(f"GET {path} returned invalid JSON") from e

    async def fetch_ingredients(self) -> list[Ingredient]:
        data = await self._get_json("/ingredients")
        try:
            return [Ingredient.model_validate(item) for item in data]
        except (TypeError, ValidationError) as e:
            raise CatalogUnavailableError(f"Malformed ingredient catalog: {e}") from e

    async def fetch_branches(self) -> list[BranchRecord]:
        data = await self._get_json("/currentBranch")
        if isinstance(data, dict):
            data = [data]
        try:
            return [BranchRecord.model_validate(item) for item in data]
        except (TypeError, ValidationError) as e:
            raise CatalogUnavailableError(f"Malformed branch records: {e}") from e

    async def health_check(self) -> bool:
        try:
            await self._get_json("/ingredients")
            return True
        except CatalogUnavailableError:
            return False

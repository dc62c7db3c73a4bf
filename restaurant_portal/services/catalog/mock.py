"""
Mock Catalog Source

Serves the development seed catalog and branch from memory.
"""

import logging
from typing import Optional

from restaurant_portal.schemas import BranchRecord, Ingredient
from restaurant_portal.seed import DEFAULT_INGREDIENTS, default_branch_record
from restaurant_portal.services.catalog.base import BaseCatalogSource

logger = logging.getLogger(__name__)


class MockCatalogSource(BaseCatalogSource):
    """In-memory catalog source, seeded with the development data by default."""

    def __init__(
        self,
        ingredients: Optional[list[dict]] = None,
        branches: Optional[list[dict]] = None,
    ):
        raw_ingredients = DEFAULT_INGREDIENTS if ingredients is None else ingredients
        raw_branches = [default_branch_record()] if branches is None else branches
        self._ingredients = [Ingredient.model_validate(item) for item in raw_ingredients]
        self._branches = [BranchRecord.model_validate(item) for item in raw_branches]
        logger.info(
            f"MockCatalogSource initialized "
            f"({len(self._ingredients)} ingredients, {len(self._branches)} branches)"
        )

    @property
    def provider_name(self) -> str:
        return "mock"

    async def fetch_ingredients(self) -> list[Ingredient]:
        return list(self._ingredients)

    async def fetch_branches(self) -> list[BranchRecord]:
        return [branch.model_copy(deep=True) for branch in self._branches]

    async def health_check(self) -> bool:
        return True

"""
Catalog Source Abstract Base Class

Read-only page-load data: the ingredient catalog and the branch records
with their unavailable ingredients.
"""

from abc import ABC, abstractmethod

from restaurant_portal.schemas import BranchRecord, Ingredient


class CatalogUnavailableError(Exception):
    """Raised when page data cannot be loaded."""
    pass


class BaseCatalogSource(ABC):
    """Abstract base class for catalog sources."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def fetch_ingredients(self) -> list[Ingredient]:
        """
        Load the ingredient catalog.

        Raises:
            CatalogUnavailableError: If the catalog cannot be loaded
        """
        pass

    @abstractmethod
    async def fetch_branches(self) -> list[BranchRecord]:
        """
        Load the current-branch records.

        Raises:
            CatalogUnavailableError: If the branches cannot be loaded
        """
        pass

    async def fetch_current_branch(self) -> BranchRecord:
        """
        The branch the page operates on: the first record returned.

        Raises:
            CatalogUnavailableError: If no branch record is available
        """
        branches = await self.fetch_branches()
        if not branches:
            raise CatalogUnavailableError("No branch record returned")
        return branches[0]

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass

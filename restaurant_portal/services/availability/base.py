"""
Availability Store Abstract Base Class

Defines the interface contract for updating a branch's unavailable
ingredient set. Both InMemoryAvailabilityStore and HttpAvailabilityStore
must implement these methods.

The store is the only way the toggle engine reaches the outside world,
so the engine can be driven without a live network in tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from restaurant_portal.schemas import AvailabilityMethod


@dataclass
class AvailabilityResult:
    """
    Standardized result from an availability update.

    Attributes:
        success: Whether the server applied the mutation
        branch_id: Branch the command targeted
        ingredient_name: Ingredient the command targeted
        method: ADD (mark unavailable) or REMOVE (mark available)
        status_code: HTTP status, when the store speaks HTTP
        error_message: Error description if the update failed
        error_code: Machine-readable error code
        response_time_ms: Round-trip time of the command
    """
    success: bool
    branch_id: str
    ingredient_name: str
    method: AvailabilityMethod
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    response_time_ms: float = 0.0


class BaseAvailabilityStore(ABC):
    """
    Abstract base class for availability stores.

    Example:
        >>> store = get_availability_store()
        >>> result = await store.set_availability("downtown", "Gin", False)
        >>> result.method
        <AvailabilityMethod.ADD: 'ADD'>
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the store provider (e.g. "mock", "http")."""
        pass

    @abstractmethod
    async def set_availability(
        self,
        branch_id: str,
        ingredient_name: str,
        available: bool,
    ) -> AvailabilityResult:
        """
        Mark an ingredient available or unavailable at a branch.

        ``available=True`` sends REMOVE (erase from the unavailable set),
        ``available=False`` sends ADD (insert into the unavailable set).

        Args:
            branch_id: Branch identifier (the branch record's ``_id``)
            ingredient_name: Catalog key of the ingredient
            available: Desired availability

        Returns:
            AvailabilityResult: Outcome of the remote command
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the store.

        Returns:
            bool: True if service is operational
        """
        pass

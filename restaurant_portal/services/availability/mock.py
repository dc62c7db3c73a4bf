"""
Mock Availability Store Implementation

Keeps each branch's unavailable set in memory instead of calling the
portal API. Used in development mode (ENV_MODE=development).

Behavior:
    - Simulates network latency (configurable)
    - Random failure rate for exercising the engine's failure policy
    - ADD/REMOVE are idempotent, like the real endpoint
"""

import asyncio
import random
import logging
from datetime import datetime
from typing import Iterable, Optional

from restaurant_portal.schemas import AvailabilityMethod
from restaurant_portal.services.availability.base import (
    BaseAvailabilityStore,
    AvailabilityResult,
)

logger = logging.getLogger(__name__)


class InMemoryAvailabilityStore(BaseAvailabilityStore):
    """
    Mock implementation of the availability store.

    Attributes:
        failure_rate: Probability of simulated update failure (0.0-1.0)
        min_latency: Minimum response time in seconds
        max_latency: Maximum response time in seconds
        calls: Every command received, in order, as (branch, name, method)

    Example:
        >>> store = InMemoryAvailabilityStore(failure_rate=0.0)
        >>> await store.set_availability("downtown", "Gin", False)
        >>> store.unavailable_names("downtown")
        {'Gin'}
    """

    def __init__(
        self,
        failure_rate: float = 0.05,
        min_latency: float = 0.05,
        max_latency: float = 0.2,
        branches: Optional[dict[str, Iterable[str]]] = None,
    ):
        """
        Initialize the mock store.

        Args:
            failure_rate: Probability of update failure (default: 5%)
            min_latency: Minimum response time in seconds
            max_latency: Maximum response time in seconds
            branches: Initial unavailable names per branch id
        """
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self._unavailable: dict[str, set[str]] = {
            branch_id: set(names) for branch_id, names in (branches or {}).items()
        }
        self.calls: list[tuple[str, str, AvailabilityMethod]] = []

        logger.info(
            f"InMemoryAvailabilityStore initialized "
            f"(failure_rate={failure_rate:.0%}, branches={len(self._unavailable)})"
        )

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> float:
        """Simulate network latency, returning it in milliseconds."""
        latency = random.uniform(self.min_latency, self.max_latency)
        if latency > 0:
            await asyncio.sleep(latency)
        return latency * 1000

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    def unavailable_names(self, branch_id: str) -> set[str]:
        """Copy of the unavailable set currently held for a branch."""
        return set(self._unavailable.get(branch_id, set()))

    async def set_availability(
        self,
        branch_id: str,
        ingredient_name: str,
        available: bool,
    ) -> AvailabilityResult:
        """Apply ADD/REMOVE to the in-memory unavailable set."""
        start_time = datetime.now()
        method = AvailabilityMethod.for_availability(available)
        self.calls.append((branch_id, ingredient_name, method))

        await self._simulate_latency()
        elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

        if self._should_fail():
            logger.warning(
                f"Mock: simulated failure for {method.value} {ingredient_name} @ {branch_id}"
            )
            return AvailabilityResult(
                success=False,
                branch_id=branch_id,
                ingredient_name=ingredient_name,
                method=method,
                status_code=503,
                error_message="Availability service temporarily unavailable",
                error_code="service_unavailable",
                response_time_ms=elapsed_ms,
            )

        unavailable = self._unavailable.setdefault(branch_id, set())
        if method is AvailabilityMethod.ADD:
            unavailable.add(ingredient_name)
        else:
            unavailable.discard(ingredient_name)

        logger.debug(f"Mock: {method.value} {ingredient_name} @ {branch_id}")

        return AvailabilityResult(
            success=True,
            branch_id=branch_id,
            ingredient_name=ingredient_name,
            method=method,
            status_code=200,
            response_time_ms=elapsed_ms,
        )

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True

"""
Mock Account Registrar

Keeps registered accounts in memory for development.
No request leaves the process - accounts are just logged.
"""

import asyncio
import random
import logging

from restaurant_portal.services.accounts.base import (
    BaseAccountRegistrar,
    RegistrationResult,
    DUPLICATE_ACCOUNT,
)

logger = logging.getLogger(__name__)


class MockAccountRegistrar(BaseAccountRegistrar):
    """Mock registrar for development."""

    def __init__(self, failure_rate: float = 0.05, latency: float = 0.1):
        self.failure_rate = failure_rate
        self.latency = latency
        self.accounts: dict[str, str] = {}
        logger.info(f"MockAccountRegistrar initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(random.uniform(0, self.latency))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def register(
        self,
        username: str,
        email_address: str,
        password: str,
    ) -> RegistrationResult:
        """Simulate account creation."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock registration failed (simulated) for {email_address}")
            return RegistrationResult(
                success=False,
                status_code=500,
                error_message="Simulated registration failure",
                error_code="service_unavailable",
                provider="mock",
            )

        key = email_address.lower()
        if key in self.accounts:
            logger.info(f"Mock registration rejected, email exists: {email_address}")
            return RegistrationResult(
                success=False,
                status_code=400,
                error_message="Email already exists",
                error_code=DUPLICATE_ACCOUNT,
                provider="mock",
            )

        self.accounts[key] = username
        logger.info(f"Mock account registered: {username} <{email_address}>")

        return RegistrationResult(success=True, status_code=201, provider="mock")

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True

"""
Account Registrar Abstract Base Class

Defines the interface for creating customer accounts.
Supports both Mock (development) and HTTP (production) implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

DUPLICATE_ACCOUNT = "duplicate_account"


@dataclass
class RegistrationResult:
    """Result from a registration request."""
    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    provider: str = "unknown"

    @property
    def is_duplicate(self) -> bool:
        return self.error_code == DUPLICATE_ACCOUNT


class BaseAccountRegistrar(ABC):
    """Abstract base class for account registrars."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def register(
        self,
        username: str,
        email_address: str,
        password: str,
    ) -> RegistrationResult:
        """Create a customer account."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass

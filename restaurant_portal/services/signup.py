"""
Customer Sign-Up Flow

Validates the submitted credentials locally and, only when they pass,
registers the account through the account registrar. Every outcome
resolves to a user-facing message; nothing is raised to the caller.

Usage:
    from restaurant_portal.services.signup import SignUpService

    service = SignUpService()
    result = await service.submit("jdoe", "you@domain.com", "Abc123!@", "Abc123!@")
    print(result.title, result.description)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from restaurant_portal.services.accounts import get_account_registrar
from restaurant_portal.services.accounts.base import BaseAccountRegistrar
from restaurant_portal.services.credentials import (
    PASSWORD_REQUIREMENTS,
    validate_confirmation,
    validate_password,
)

logger = logging.getLogger(__name__)


class SignUpOutcome(str, Enum):
    SUCCESS = "success"
    POLICY_VIOLATION = "policy_violation"
    CONFIRMATION_MISMATCH = "confirmation_mismatch"
    DUPLICATE_ACCOUNT = "duplicate_account"
    REGISTRATION_FAILURE = "registration_failure"


SIGN_UP_FAILED = "Sign Up failed."

MESSAGES = {
    SignUpOutcome.SUCCESS: ("Sign Up successful.", "Welcome, {username}! You have successfully signed up."),
    SignUpOutcome.POLICY_VIOLATION: (SIGN_UP_FAILED, PASSWORD_REQUIREMENTS),
    SignUpOutcome.CONFIRMATION_MISMATCH: (SIGN_UP_FAILED, "Passwords do not match."),
    SignUpOutcome.DUPLICATE_ACCOUNT: (SIGN_UP_FAILED, "Email already exists."),
    SignUpOutcome.REGISTRATION_FAILURE: (SIGN_UP_FAILED, "Something went wrong. Please try again."),
}


@dataclass
class SignUpResult:
    """What the sign-up page shows after a submission."""
    outcome: SignUpOutcome
    title: str
    description: str
    status_code: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.outcome is SignUpOutcome.SUCCESS

    @property
    def status(self) -> str:
        """Notification level: "success" or "error"."""
        return "success" if self.success else "error"


def build_result(
    outcome: SignUpOutcome,
    username: str = "",
    status_code: Optional[int] = None,
) -> SignUpResult:
    title, description = MESSAGES[outcome]
    return SignUpResult(
        outcome=outcome,
        title=title,
        description=description.format(username=username),
        status_code=status_code,
    )


class SignUpService:
    """Runs one sign-up submission end to end."""

    def __init__(self, registrar: Optional[BaseAccountRegistrar] = None):
        self.registrar = registrar if registrar is not None else get_account_registrar()

    async def submit(
        self,
        username: str,
        email_address: str,
        password: str,
        confirm_password: str,
    ) -> SignUpResult:
        if not validate_password(password):
            logger.info("Sign-up rejected: password policy")
            return build_result(SignUpOutcome.POLICY_VIOLATION, username)

        if not validate_confirmation(password, confirm_password):
            logger.info("Sign-up rejected: passwords do not match")
            return build_result(SignUpOutcome.CONFIRMATION_MISMATCH, username)

        try:
            result = await self.registrar.register(
                username=username,
                email_address=email_address,
                password=password,
            )
        except Exception as e:
            logger.exception(f"Error registering customer: {e}")
            return build_result(SignUpOutcome.REGISTRATION_FAILURE, username)

        if result.success:
            return build_result(SignUpOutcome.SUCCESS, username, result.status_code)
        if result.is_duplicate:
            return build_result(SignUpOutcome.DUPLICATE_ACCOUNT, username, result.status_code)
        return build_result(SignUpOutcome.REGISTRATION_FAILURE, username, result.status_code)

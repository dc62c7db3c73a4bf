"""
Tests for the customer sign-up flow.
"""

import pytest

from restaurant_portal.services.accounts.base import (
    BaseAccountRegistrar,
    RegistrationResult,
    DUPLICATE_ACCOUNT,
)
from restaurant_portal.services.accounts.mock import MockAccountRegistrar
from restaurant_portal.services.credentials import PASSWORD_REQUIREMENTS
from restaurant_portal.services.signup import SignUpOutcome, SignUpService


class StubRegistrar(BaseAccountRegistrar):
    """Registrar returning a canned result and recording calls."""

    def __init__(self, result=None, error=None):
        self.result = result or RegistrationResult(success=True, status_code=201, provider="stub")
        self.error = error
        self.calls = []

    @property
    def provider_name(self) -> str:
        return "stub"

    async def register(self, username, email_address, password):
        self.calls.append((username, email_address, password))
        if self.error is not None:
            raise self.error
        return self.result

    async def health_check(self) -> bool:
        return True


VALID_PASSWORD = "Abc123!@"


class TestLocalValidation:

    async def test_policy_violation_skips_registrar(self):
        registrar = StubRegistrar()
        result = await SignUpService(registrar).submit("jdoe", "j@x.com", "abc12345", "abc12345")

        assert result.outcome is SignUpOutcome.POLICY_VIOLATION
        assert result.title == "Sign Up failed."
        assert result.description == PASSWORD_REQUIREMENTS
        assert result.status == "error"
        assert registrar.calls == []

    async def test_mismatch_skips_registrar(self):
        registrar = StubRegistrar()
        result = await SignUpService(registrar).submit("jdoe", "j@x.com", VALID_PASSWORD, "Abc123!$")

        assert result.outcome is SignUpOutcome.CONFIRMATION_MISMATCH
        assert result.description == "Passwords do not match."
        assert registrar.calls == []

    async def test_policy_is_checked_before_confirmation(self):
        registrar = StubRegistrar()
        result = await SignUpService(registrar).submit("jdoe", "j@x.com", "weak", "different")

        assert result.outcome is SignUpOutcome.POLICY_VIOLATION


class TestRegistration:

    async def test_success(self):
        registrar = StubRegistrar()
        result = await SignUpService(registrar).submit("jdoe", "j@x.com", VALID_PASSWORD, VALID_PASSWORD)

        assert result.success
        assert result.status == "success"
        assert result.title == "Sign Up successful."
        assert result.description == "Welcome, jdoe! You have successfully signed up."
        assert result.status_code == 201
        assert registrar.calls == [("jdoe", "j@x.com", VALID_PASSWORD)]

    async def test_duplicate_account(self):
        registrar = StubRegistrar(
            RegistrationResult(success=False, status_code=400, error_code=DUPLICATE_ACCOUNT)
        )
        result = await SignUpService(registrar).submit("jdoe", "j@x.com", VALID_PASSWORD, VALID_PASSWORD)

        assert result.outcome is SignUpOutcome.DUPLICATE_ACCOUNT
        assert result.description == "Email already exists."
        assert result.status_code == 400

    @pytest.mark.parametrize("status_code,error_code", [(500, "http_error"), (None, "timeout")])
    async def test_other_failures_are_generic(self, status_code, error_code):
        registrar = StubRegistrar(
            RegistrationResult(success=False, status_code=status_code, error_code=error_code)
        )
        result = await SignUpService(registrar).submit("jdoe", "j@x.com", VALID_PASSWORD, VALID_PASSWORD)

        assert result.outcome is SignUpOutcome.REGISTRATION_FAILURE
        assert result.description == "Something went wrong. Please try again."

    async def test_registrar_exception_is_reported_not_raised(self):
        registrar = StubRegistrar(error=RuntimeError("boom"))
        result = await SignUpService(registrar).submit("jdoe", "j@x.com", VALID_PASSWORD, VALID_PASSWORD)

        assert result.outcome is SignUpOutcome.REGISTRATION_FAILURE
        assert len(registrar.calls) == 1


class TestMockRegistrar:

    async def test_duplicate_email_is_case_insensitive(self):
        registrar = MockAccountRegistrar(failure_rate=0.0, latency=0.0)
        service = SignUpService(registrar)

        first = await service.submit("jdoe", "Jane@Example.com", VALID_PASSWORD, VALID_PASSWORD)
        second = await service.submit("jane", "jane@example.com", VALID_PASSWORD, VALID_PASSWORD)

        assert first.success
        assert second.outcome is SignUpOutcome.DUPLICATE_ACCOUNT
        assert registrar.accounts == {"jane@example.com": "jdoe"}

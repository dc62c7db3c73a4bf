"""
Credential Validation

Password policy checks used before a registration request is sent.
Pure functions, no side effects.
"""

import re

SPECIAL_CHARACTERS = "@$!%*?&"
PASSWORD_MIN_LENGTH = 8

PASSWORD_REQUIREMENTS = (
    "Password must be at least 8 characters long and contain at least "
    "one letter, one number, and one special character."
)

# >=8 characters, >=1 letter, >=1 digit, >=1 special, nothing else
_PASSWORD_PATTERN = re.compile(
    r"(?=.*[A-Za-z])(?=.*[0-9])(?=.*[@$!%*?&])[A-Za-z0-9@$!%*?&]{8,}"
)


def validate_password(password: str) -> bool:
    """
    Check a password against the sign-up policy.

    Letters and digits are ASCII only; the special set is ``@$!%*?&``.

    Example:
        >>> validate_password("Abc123!@")
        True
        >>> validate_password("abc12345")
        False
    """
    if not isinstance(password, str):
        return False
    return _PASSWORD_PATTERN.fullmatch(password) is not None


def validate_confirmation(password: str, confirmation: str) -> bool:
    """Exact, case-sensitive equality. Nothing is trimmed."""
    return password == confirmation

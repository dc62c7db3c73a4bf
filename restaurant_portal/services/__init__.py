"""
                        Services Module

Business logic and capability services with the hybrid architecture
pattern. Each capability has Mock (development) and HTTP (production)
implementations.

Services:
    - availability: branch ingredient availability updates
    - accounts: customer account registration
    - catalog: page-load ingredient and branch data
    - toggle_engine: optimistic availability toggling and search
    - credentials / signup: password policy and the sign-up flow
"""

from restaurant_portal.services.toggle_engine import (
    AvailabilityToggleEngine,
    ToggleOutcome,
    ToggleResult,
    derive_view,
    load_ingredients_page,
)
from restaurant_portal.services.signup import SignUpOutcome, SignUpResult, SignUpService

__all__ = [
    "AvailabilityToggleEngine",
    "ToggleOutcome",
    "ToggleResult",
    "derive_view",
    "load_ingredients_page",
    "SignUpOutcome",
    "SignUpResult",
    "SignUpService",
]

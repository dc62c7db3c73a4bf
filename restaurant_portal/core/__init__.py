"""
Core module initialization.
Exports configuration and logging utilities.
"""

from restaurant_portal.core.config import (
    get_settings,
    Settings,
    EnvironmentMode,
    ToggleFailurePolicy,
)

__all__ = ["get_settings", "Settings", "EnvironmentMode", "ToggleFailurePolicy"]

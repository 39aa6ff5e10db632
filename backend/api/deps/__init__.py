"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_scenario_service,
    get_session_service,
    get_settings_dependency,
    require_admin,
)

__all__ = [
    "get_scenario_service",
    "get_session_service",
    "get_settings_dependency",
    "require_admin",
]

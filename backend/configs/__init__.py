"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from backend.configs.settings import Settings, get_settings
from backend.configs.study import (
    IMAGE_CATEGORIES,
    SCENARIO_IDS,
    SCENARIOS,
    ScenarioDefinition,
    StudySettings,
)

__all__ = [
    "Settings",
    "get_settings",
    "IMAGE_CATEGORIES",
    "SCENARIO_IDS",
    "SCENARIOS",
    "ScenarioDefinition",
    "StudySettings",
]

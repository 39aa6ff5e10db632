"""Service orchestrators."""

from .allocation_service import ImagePoolAllocator
from .scenario_service import ScenarioService
from .session_service import SessionService

__all__ = [
    "ImagePoolAllocator",
    "ScenarioService",
    "SessionService",
]

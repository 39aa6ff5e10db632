"""API routers."""

from .admin import router as admin_router
from .health import router as health_router
from .scenarios import router as scenarios_router
from .sessions import router as sessions_router

__all__ = [
    "admin_router",
    "health_router",
    "scenarios_router",
    "sessions_router",
]

"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: backend.configs, backend.application, backend.boundary
System role: DI container for service injection
"""

import logging
import secrets
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services import ScenarioService, SessionService
from backend.boundary.db import get_async_db
from backend.configs import Settings, get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db, settings=settings.study)


def get_scenario_service(db: AsyncSession = Depends(get_async_db)) -> ScenarioService:
    """
    Get scenario service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        ScenarioService: Scenario service instance
    """
    return ScenarioService(db=db)


def require_admin(
    x_admin_id: str | None = Header(default=None),
    x_admin_password: str | None = Header(default=None),
    settings: Settings = Depends(get_settings_dependency),
) -> str:
    """
    Check the admin credential headers.

    Returns:
        str: The authenticated admin id

    Raises:
        HTTPException(401): Missing or wrong credentials, or admin access not configured
    """
    expected_id = settings.study.admin_id
    expected_password = settings.study.admin_password
    if (
        not expected_id
        or not expected_password
        or not x_admin_id
        or not x_admin_password
        or not secrets.compare_digest(x_admin_id, expected_id)
        or not secrets.compare_digest(x_admin_password, expected_password)
    ):
        logger.warning("Rejected admin request", extra={"admin_id": x_admin_id})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return x_admin_id

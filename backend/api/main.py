"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, backend.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from backend.application.services import ScenarioService
from backend.boundary.db import get_async_session_factory
from backend.configs import get_settings
from backend.observability import CorrelationMiddleware, RequestLoggingMiddleware, configure_logging
from .routers import admin_router, health_router, scenarios_router, sessions_router
from .routers.error_handling import validation_exception_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and makes sure the scenario catalog exists before
    the first session is started.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    SessionFactory = get_async_session_factory()
    async with SessionFactory() as db:
        inserted = await ScenarioService(db).sync_catalog()
    logger.info("Study API started", extra={"scenarios_inserted": inserted})

    yield

    logger.info("Study API stopped")


def create_app(with_lifespan: bool = True) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        with_lifespan: Run the startup hooks (disabled in router tests)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Annotation Study API",
        description="Session and balanced image-assignment engine for image annotation studies",
        version="0.1.0",
        lifespan=lifespan if with_lifespan else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(health_router, prefix="/api")
    app.include_router(sessions_router, prefix="/api")
    app.include_router(scenarios_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "backend.api.main:app",
        host="0.0.0.0",
        port=8000,
    )

"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, seeded image pool and scenario catalog,
deterministic random source, mock services
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import random
import uuid
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from backend.configs.study import IMAGE_CATEGORIES, SCENARIOS, StudySettings

IMAGES_PER_CATEGORY = 3


@pytest_asyncio.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from backend.boundary.db import models  # noqa: F401
    from backend.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def _add_images(db, category: str, count: int, start: int = 0, **fields) -> list[str]:
    from backend.boundary.db.models import ImageModel

    ids = [f"{category}_{n}.jpg" for n in range(start, start + count)]
    db.add_all([ImageModel(id=image_id, category=category, **fields) for image_id in ids])
    await db.flush()
    return ids


@pytest.fixture
def add_images():
    """
    Factory inserting ``count`` images named ``<category>_<n>.jpg``.

    Usage:
        ids = await add_images(db, "Health_medical", 2, enabled=False)
    """
    return _add_images


@pytest_asyncio.fixture
async def seeded_db(test_async_db):
    """
    Database with the scenario catalog and IMAGES_PER_CATEGORY images per category.

    Yields:
        AsyncSession: Seeded test database session
    """
    from backend.boundary.db.CRUD.scenario_crud import scenario_crud

    await scenario_crud.sync_catalog(test_async_db, SCENARIOS)
    for category in IMAGE_CATEGORIES:
        await _add_images(test_async_db, category, IMAGES_PER_CATEGORY)
    await test_async_db.commit()
    yield test_async_db


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible draws."""
    return random.Random(20240611)


@pytest.fixture
def study_settings() -> StudySettings:
    """Study settings with test admin credentials."""
    return StudySettings(admin_id="admin", admin_password="secret")


@pytest.fixture
def mock_session_service():
    """
    Create mock SessionService for router tests.

    Returns:
        AsyncMock: Mocked SessionService with async methods
    """
    service = AsyncMock()
    service.resume = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_scenario_service():
    """
    Create mock ScenarioService for router tests.

    Returns:
        AsyncMock: Mocked ScenarioService with async methods
    """
    return AsyncMock()


@pytest.fixture
def session_id():
    """Generate a test session ID."""
    return uuid.uuid4()

"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_engine(), get_session_factory(): Sync connection management (scripts)
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - ScenarioModel, ImageModel, SessionModel, SessionImageModel: Domain entities
  - SessionStatus: Session lifecycle enum
  - scenario_crud, image_crud, session_crud, session_image_crud: CRUD singletons

Dependencies: sqlalchemy, backend.configs
System role: Database adapter for sessions, the image pool and assignments
"""

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from backend.boundary.db.connection import (
    get_engine,
    get_session_factory,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from backend.boundary.db.models import (
    ImageModel,
    ScenarioModel,
    SessionImageModel,
    SessionModel,
    SessionStatus,
)
from backend.boundary.db.CRUD import (
    BaseCRUD,
    ImageCRUD,
    ScenarioCRUD,
    SessionCRUD,
    SessionImageCRUD,
    image_crud,
    scenario_crud,
    session_crud,
    session_image_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_engine",
    "get_session_factory",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "ImageModel",
    "ScenarioModel",
    "SessionImageModel",
    "SessionModel",
    "SessionStatus",
    # CRUD classes
    "BaseCRUD",
    "ImageCRUD",
    "ScenarioCRUD",
    "SessionCRUD",
    "SessionImageCRUD",
    # CRUD singletons
    "image_crud",
    "scenario_crud",
    "session_crud",
    "session_image_crud",
]

"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata. The
scenario catalog itself is synchronized by the API on startup.

Dependencies: sqlalchemy, backend.configs
System role: Database schema initialization

Usage:
    python -m backend.boundary.db.create_tables
    python -m backend.boundary.db.create_tables --drop
"""

import logging
import sys

from backend.boundary.db.base import Base
from backend.boundary.db.connection import get_engine

# Import all models to register them with Base.metadata
from backend.boundary.db import models  # noqa: F401
from backend.observability.logger import configure_logging

logger = logging.getLogger(__name__)


def create_all_tables() -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Raises:
        SQLAlchemyError: If the connection or DDL fails
    """
    Base.metadata.create_all(bind=get_engine())
    logger.info("Tables created", extra={"tables": sorted(Base.metadata.tables)})


def drop_all_tables() -> None:
    """
    Drop all database tables and their data.

    WARNING: Destructive operation. Use only in development/testing.
    """
    Base.metadata.drop_all(bind=get_engine())
    logger.warning("All tables dropped")


if __name__ == "__main__":
    configure_logging()
    if "--drop" in sys.argv:
        drop_all_tables()
    create_all_tables()

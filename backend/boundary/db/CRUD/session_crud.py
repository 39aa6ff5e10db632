"""
Session CRUD operations.

Session reads with eager-loaded assignments and the guarded
in_progress -> completed transition.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Session persistence operations
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.session_image_model import SessionImageModel
from backend.boundary.db.models.session_model import SessionModel, SessionStatus


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with assignment eager loading and the completion
    transition guarded on the current status.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def get_with_images(
        self,
        session: AsyncSession,
        id: uuid.UUID,
    ) -> SessionModel | None:
        """
        Retrieve a session with its image assignments (ordered) and scenario.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            SessionModel with images loaded, None if not found
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.id == id)
            .options(
                selectinload(SessionModel.images).selectinload(SessionImageModel.image),
                selectinload(SessionModel.scenario),
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_completed(
        self,
        session: AsyncSession,
        id: uuid.UUID,
        payload_final: dict[str, Any],
        completed_at: datetime,
    ) -> bool:
        """
        Transition a session to COMPLETED if it is still IN_PROGRESS.

        Args:
            session: Async database session
            id: Session UUID
            payload_final: Final document to store
            completed_at: Completion timestamp

        Returns:
            bool: True if this call performed the transition, False if the
            session was already completed (or missing)
        """
        stmt = (
            update(SessionModel)
            .where(SessionModel.id == id, SessionModel.status == SessionStatus.IN_PROGRESS)
            .values(
                status=SessionStatus.COMPLETED,
                payload_final=payload_final,
                completed_at=completed_at,
                updated_at=completed_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


session_crud = SessionCRUD()

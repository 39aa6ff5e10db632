"""
Session-image assignment CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Assignment persistence operations
"""

import uuid
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.models.session_image_model import SessionImageModel
from backend.core.order_balancer import STATEMENT_ONE, STATEMENT_TWO, OrderedImage


class SessionImageCRUD:
    """CRUD operations for SessionImageModel (composite primary key)."""

    model = SessionImageModel

    async def add_assignments(
        self,
        session: AsyncSession,
        session_id: uuid.UUID,
        images: Iterable[OrderedImage],
        assigned_at: datetime,
    ) -> list[SessionImageModel]:
        """
        Insert the ordered assignment rows of a new session.

        Returns:
            list[SessionImageModel]: Rows in presentation order
        """
        rows = [
            SessionImageModel(
                session_id=session_id,
                image_id=image.image_id,
                order_index=image.order_index,
                statement=image.statement,
                assigned_at=assigned_at,
            )
            for image in images
        ]
        session.add_all(rows)
        await session.flush()
        return rows

    async def get_assigned_image_ids(
        self,
        session: AsyncSession,
        session_id: uuid.UUID,
    ) -> list[str]:
        """Image ids assigned to a session, in presentation order."""
        stmt = (
            select(SessionImageModel.image_id)
            .where(SessionImageModel.session_id == session_id)
            .order_by(SessionImageModel.order_index)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_statement_history(
        self,
        session: AsyncSession,
        image_ids: Sequence[str],
    ) -> dict[str, tuple[int, int]]:
        """
        Count past assignments of each image under statement 1 and 2.

        Returns:
            dict mapping image_id -> (statement 1 count, statement 2 count);
            images never assigned are absent
        """
        if not image_ids:
            return {}
        stmt = (
            select(
                SessionImageModel.image_id,
                SessionImageModel.statement,
                func.count().label("shown"),
            )
            .where(SessionImageModel.image_id.in_(list(image_ids)))
            .group_by(SessionImageModel.image_id, SessionImageModel.statement)
        )
        result = await session.execute(stmt)

        counts: dict[str, list[int]] = defaultdict(lambda: [0, 0])
        for image_id, statement, shown in result.all():
            if statement == STATEMENT_ONE:
                counts[image_id][0] += int(shown)
            elif statement == STATEMENT_TWO:
                counts[image_id][1] += int(shown)
        return {image_id: (one, two) for image_id, (one, two) in counts.items()}

    async def mark_completed(
        self,
        session: AsyncSession,
        session_id: uuid.UUID,
        completed_at: datetime,
    ) -> int:
        """
        Stamp completed_at on every assignment row of a session.

        Returns:
            int: Number of rows updated
        """
        stmt = (
            update(SessionImageModel)
            .where(SessionImageModel.session_id == session_id)
            .values(completed_at=completed_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount


session_image_crud = SessionImageCRUD()

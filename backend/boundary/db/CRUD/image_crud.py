"""
Image pool CRUD operations.

Candidate selection with row reservation (FOR UPDATE SKIP LOCKED) and the
batched counter updates applied on assignment and completion.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Image pool persistence operations
"""

import uuid
from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.image_model import ImageModel
from backend.boundary.db.models.session_image_model import SessionImageModel


def build_candidate_query(category: str, limit: int) -> Select[tuple[ImageModel]]:
    """
    Build the reservation query for one category.

    Enabled images of the category ranked by ascending assigned_count, then
    ascending completed_count, then random. Rows are locked for the rest of
    the transaction; rows already locked by a concurrent allocator are
    skipped rather than waited on.
    """
    return (
        select(ImageModel)
        .where(ImageModel.enabled.is_(True), ImageModel.category == category)
        .order_by(
            ImageModel.assigned_count.asc(),
            ImageModel.completed_count.asc(),
            func.random(),
        )
        .limit(limit)
        .with_for_update(skip_locked=True)
    )


class ImageCRUD(BaseCRUD[ImageModel]):
    """CRUD operations for ImageModel."""

    def __init__(self) -> None:
        """Initialize ImageCRUD with ImageModel."""
        super().__init__(ImageModel)

    async def reserve_candidates(
        self,
        session: AsyncSession,
        category: str,
        limit: int,
    ) -> Sequence[ImageModel]:
        """
        Lock up to ``limit`` least-used eligible images of a category.

        Args:
            session: Async database session (inside the start transaction)
            category: Image category
            limit: Number of images wanted

        Returns:
            Sequence of locked ImageModels (may be shorter than limit)
        """
        stmt = build_candidate_query(category, limit).execution_options(
            populate_existing=True
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def increment_assigned(
        self,
        session: AsyncSession,
        image_ids: Iterable[str],
        assigned_at: datetime,
    ) -> int:
        """
        Bump assigned_count and stamp last_assigned_at for the given images.

        Returns:
            int: Number of rows updated
        """
        ids = list(image_ids)
        if not ids:
            return 0
        stmt = (
            update(ImageModel)
            .where(ImageModel.id.in_(ids))
            .values(
                assigned_count=ImageModel.assigned_count + 1,
                last_assigned_at=assigned_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def increment_completed_for_session(
        self,
        session: AsyncSession,
        session_id: uuid.UUID,
    ) -> int:
        """
        Bump completed_count on every distinct image assigned to a session.

        Returns:
            int: Number of rows updated
        """
        assigned = select(SessionImageModel.image_id).where(
            SessionImageModel.session_id == session_id
        )
        stmt = (
            update(ImageModel)
            .where(ImageModel.id.in_(assigned))
            .values(completed_count=ImageModel.completed_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def get_many(
        self,
        session: AsyncSession,
        image_ids: Iterable[str],
    ) -> Sequence[ImageModel]:
        """Return the stored rows for the given ids, freshly loaded."""
        stmt = (
            select(ImageModel)
            .where(ImageModel.id.in_(list(image_ids)))
            .order_by(ImageModel.id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


image_crud = ImageCRUD()

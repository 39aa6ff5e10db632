"""
Image pool allocator.

Reserves a quota of images per category inside the caller's session-start
transaction. Candidate rows are locked with SKIP LOCKED so concurrent
allocators never receive the same image and never wait on each other; a
category that comes up short fails the whole allocation before any counter
is touched.

Dependencies: sqlalchemy, backend.boundary.db.CRUD, backend.core
System role: Concurrency-safe image assignment
"""

import logging
from datetime import datetime
from typing import Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.image_crud import image_crud
from backend.core.exceptions import InsufficientImagesError
from backend.core.order_balancer import SelectedImage

logger = logging.getLogger(__name__)


class ImagePoolAllocator:
    """Per-category image reservation bound to one database transaction."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize allocator with the async session owning the transaction.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def allocate(self, category: str, count: int) -> list[SelectedImage]:
        """
        Reserve ``count`` eligible images of one category.

        Args:
            category: Image category
            count: Number of images required

        Returns:
            list[SelectedImage]: Reserved images (row locks held until commit)

        Raises:
            InsufficientImagesError: If fewer than ``count`` images are available
        """
        if count <= 0:
            return []
        rows = await image_crud.reserve_candidates(self.db, category, count)
        if len(rows) < count:
            logger.warning(
                "Image allocation short",
                extra={"category": category, "needed": count, "available": len(rows)},
            )
            raise InsufficientImagesError(category, count, len(rows))
        return [SelectedImage(image_id=row.id, category=row.category) for row in rows]

    async def reserve(
        self,
        categories: Sequence[str],
        per_category: int,
    ) -> dict[str, list[SelectedImage]]:
        """
        Reserve ``per_category`` images in every category.

        Stops at the first short category; no counters are modified here.

        Returns:
            dict mapping category -> reserved images, in category order
        """
        return {category: await self.allocate(category, per_category) for category in categories}

    async def commit_counters(
        self,
        selection: Mapping[str, Sequence[SelectedImage]],
        assigned_at: datetime,
    ) -> int:
        """
        Apply the batched assigned_count / last_assigned_at update.

        Call only after every category met its quota.

        Returns:
            int: Number of image rows updated
        """
        image_ids = [image.image_id for images in selection.values() for image in images]
        return await image_crud.increment_assigned(self.db, image_ids, assigned_at)

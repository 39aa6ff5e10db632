"""
Test suite for the image pool allocator.

Runs against the in-memory SQLite fixture; the row-locking clause itself is
checked by compiling the candidate query for PostgreSQL.

System role: Verification of image reservation and counter updates
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.dialects import postgresql

from backend.application.services.allocation_service import ImagePoolAllocator
from backend.boundary.db.CRUD.image_crud import build_candidate_query, image_crud
from backend.core.exceptions import InsufficientImagesError


class TestCandidateQuery:
    """Test suite for the reservation query shape."""

    def test_postgres_query_should_lock_and_skip_locked_rows(self) -> None:
        sql = str(build_candidate_query("Health_medical", 2).compile(dialect=postgresql.dialect()))

        assert "FOR UPDATE SKIP LOCKED" in sql
        assert "LIMIT" in sql

    def test_query_should_rank_by_assigned_then_completed_then_random(self) -> None:
        sql = str(build_candidate_query("Health_medical", 2).compile(dialect=postgresql.dialect()))
        order_by = sql.split("ORDER BY", 1)[1]

        assert order_by.index("assigned_count") < order_by.index("completed_count")
        assert order_by.index("completed_count") < order_by.index("random()")


class TestImagePoolAllocator:
    """Test suite for ImagePoolAllocator."""

    @pytest.mark.asyncio
    async def test_allocate_should_prefer_least_assigned_images(self, test_async_db, add_images) -> None:
        # Arrange
        await add_images(test_async_db, "Work_from_home", 2, assigned_count=5, completed_count=1)
        fresh = await add_images(test_async_db, "Work_from_home", 2, start=2)
        await test_async_db.commit()

        # Act
        selected = await ImagePoolAllocator(test_async_db).allocate("Work_from_home", 2)

        # Assert
        assert sorted(i.image_id for i in selected) == sorted(fresh)
        assert {i.category for i in selected} == {"Work_from_home"}

    @pytest.mark.asyncio
    async def test_allocate_should_break_assigned_ties_by_completed_count(
        self, test_async_db, add_images
    ) -> None:
        await add_images(test_async_db, "Religion_culture", 1, assigned_count=2, completed_count=2)
        preferred = await add_images(
            test_async_db, "Religion_culture", 1, start=1, assigned_count=2, completed_count=0
        )
        await test_async_db.commit()

        selected = await ImagePoolAllocator(test_async_db).allocate("Religion_culture", 1)

        assert [i.image_id for i in selected] == preferred

    @pytest.mark.asyncio
    async def test_allocate_should_skip_disabled_and_other_categories(
        self, test_async_db, add_images
    ) -> None:
        await add_images(test_async_db, "Health_medical", 2, enabled=False)
        await add_images(test_async_db, "Lifestyle_habits", 3)
        await test_async_db.commit()

        with pytest.raises(InsufficientImagesError) as exc_info:
            await ImagePoolAllocator(test_async_db).allocate("Health_medical", 1)

        assert exc_info.value.details == {"category": "Health_medical", "needed": 1, "available": 0}

    @pytest.mark.asyncio
    async def test_reserve_should_stop_at_short_category_without_touching_counters(
        self, test_async_db, add_images
    ) -> None:
        # Arrange
        ok = await add_images(test_async_db, "Education_knowledge", 2)
        short = await add_images(test_async_db, "Health_medical", 1)
        await test_async_db.commit()

        # Act
        with pytest.raises(InsufficientImagesError) as exc_info:
            await ImagePoolAllocator(test_async_db).reserve(
                ["Education_knowledge", "Health_medical"], 2
            )
        await test_async_db.rollback()

        # Assert
        error = exc_info.value
        assert (error.category, error.needed, error.available) == ("Health_medical", 2, 1)
        rows = await image_crud.get_many(test_async_db, ok + short)
        assert all(row.assigned_count == 0 and row.last_assigned_at is None for row in rows)

    @pytest.mark.asyncio
    async def test_commit_counters_should_bump_every_selected_image_once(
        self, test_async_db, add_images
    ) -> None:
        ids = await add_images(test_async_db, "SES_living_standard", 3)
        await test_async_db.commit()
        allocator = ImagePoolAllocator(test_async_db)
        selection = await allocator.reserve(["SES_living_standard"], 2)
        now = datetime.now(timezone.utc)

        updated = await allocator.commit_counters(selection, now)
        await test_async_db.commit()

        assert updated == 2
        chosen = {i.image_id for i in selection["SES_living_standard"]}
        rows = {row.id: row for row in await image_crud.get_many(test_async_db, ids)}
        for image_id, row in rows.items():
            expected = 1 if image_id in chosen else 0
            assert row.assigned_count == expected
            assert (row.last_assigned_at is not None) == (image_id in chosen)

    @pytest.mark.asyncio
    async def test_zero_quota_should_reserve_nothing(self, test_async_db) -> None:
        assert await ImagePoolAllocator(test_async_db).allocate("Health_medical", 0) == []

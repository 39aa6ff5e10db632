"""
Test suite for scenario resolution and administration.

System role: Verification of scenario catalog persistence and balancing
"""

import random

import pytest
import pytest_asyncio

from backend.application.services.scenario_service import ScenarioService
from backend.boundary.db.CRUD.scenario_crud import scenario_crud
from backend.boundary.db.models import ScenarioModel, SessionModel, SessionStatus
from backend.configs.study import SCENARIOS
from backend.core.exceptions import (
    NoScenarioAvailableError,
    ScenarioNotFoundError,
    UnknownScenarioError,
)


async def add_session(db, scenario_id: str, status: SessionStatus) -> None:
    db.add(
        SessionModel(
            scenario_id=scenario_id,
            status=status,
            n_images=8,
            statement_order=1,
            dataset_version="v1",
        )
    )
    await db.flush()


class TestCatalog:
    """Test suite for catalog synchronization and listing."""

    @pytest.mark.asyncio
    async def test_sync_should_insert_catalog_once(self, test_async_db) -> None:
        service = ScenarioService(test_async_db)

        assert await service.sync_catalog() == len(SCENARIOS)
        assert await service.sync_catalog() == 0
        listed = await service.list_scenarios()
        assert [s["id"] for s in listed] == sorted(s.id for s in SCENARIOS)
        assert all(s["enabled"] for s in listed)

    @pytest.mark.asyncio
    async def test_sync_should_keep_admin_enabled_flag(self, seeded_db) -> None:
        service = ScenarioService(seeded_db)
        await service.set_scenario_enabled("social_media_ai", False)

        await service.sync_catalog()

        scenario = await scenario_crud.get_by_id(seeded_db, "social_media_ai", fresh=True)
        assert scenario.enabled is False

    @pytest.mark.asyncio
    async def test_toggle_unknown_scenario_should_raise_not_found(self, seeded_db) -> None:
        with pytest.raises(UnknownScenarioError) as exc_info:
            await ScenarioService(seeded_db).set_scenario_enabled("missing", True)

        assert exc_info.value.kind == "not_found"
        assert exc_info.value.code == "context_not_found"


class TestRetiredScenarios:
    """Rows outside the configured catalog are never offered or accepted."""

    @pytest_asyncio.fixture
    async def db_with_retired(self, seeded_db):
        seeded_db.add(
            ScenarioModel(id="legacy_ctx", title="Legacy", description="retired", enabled=True)
        )
        await seeded_db.commit()
        yield seeded_db

    @pytest.mark.asyncio
    async def test_retired_row_should_not_be_tallied(self, db_with_retired) -> None:
        tallies = await ScenarioService(db_with_retired).get_tallies()

        assert sorted(t.id for t in tallies) == sorted(s.id for s in SCENARIOS)

    @pytest.mark.asyncio
    async def test_retired_row_should_not_be_listed(self, db_with_retired) -> None:
        listed = await ScenarioService(db_with_retired).list_scenarios()

        assert "legacy_ctx" not in {s["id"] for s in listed}

    @pytest.mark.asyncio
    async def test_retired_row_should_be_rejected_as_explicit_choice(self, db_with_retired) -> None:
        with pytest.raises(ScenarioNotFoundError) as exc_info:
            await ScenarioService(db_with_retired).resolve_for_session("legacy_ctx")

        assert exc_info.value.code == "invalid_context"

    @pytest.mark.asyncio
    async def test_retired_row_should_not_be_toggled(self, db_with_retired) -> None:
        with pytest.raises(UnknownScenarioError):
            await ScenarioService(db_with_retired).set_scenario_enabled("legacy_ctx", False)

        scenario = await scenario_crud.get_by_id(db_with_retired, "legacy_ctx", fresh=True)
        assert scenario.enabled is True

    @pytest.mark.asyncio
    async def test_balanced_pick_should_skip_retired_row(self, db_with_retired) -> None:
        service = ScenarioService(db_with_retired, rng=random.Random(5))

        picks = {(await service.resolve_for_session()).id for _ in range(30)}

        assert "legacy_ctx" not in picks


class TestTallies:
    """Test suite for completed-session tallies and balanced resolution."""

    @pytest.mark.asyncio
    async def test_tallies_should_count_completed_sessions_only(self, seeded_db) -> None:
        # Arrange
        await add_session(seeded_db, "ar_assistant", SessionStatus.COMPLETED)
        await add_session(seeded_db, "ar_assistant", SessionStatus.COMPLETED)
        await add_session(seeded_db, "smart_camera", SessionStatus.IN_PROGRESS)
        await seeded_db.commit()

        # Act
        tallies = {t.id: t.completed_count for t in await ScenarioService(seeded_db).get_tallies()}

        # Assert
        assert tallies == {
            "ar_assistant": 2,
            "furniture_scanner": 0,
            "smart_camera": 0,
            "social_media_ai": 0,
        }

    @pytest.mark.asyncio
    async def test_disabled_scenarios_should_be_excluded(self, seeded_db) -> None:
        service = ScenarioService(seeded_db, rng=random.Random(3))
        for scenario_id in ("ar_assistant", "furniture_scanner", "smart_camera"):
            await service.set_scenario_enabled(scenario_id, False)

        picks = {(await service.resolve_for_session()).id for _ in range(20)}

        assert picks == {"social_media_ai"}

    @pytest.mark.asyncio
    async def test_balanced_resolution_should_pick_least_completed(self, seeded_db) -> None:
        for scenario_id in ("ar_assistant", "furniture_scanner", "smart_camera"):
            await add_session(seeded_db, scenario_id, SessionStatus.COMPLETED)
        await seeded_db.commit()
        service = ScenarioService(seeded_db, rng=random.Random(8))

        picks = {(await service.resolve_for_session()).id for _ in range(20)}

        assert picks == {"social_media_ai"}

    @pytest.mark.asyncio
    async def test_empty_catalog_should_raise_no_scenario(self, test_async_db) -> None:
        with pytest.raises(NoScenarioAvailableError) as exc_info:
            await ScenarioService(test_async_db).resolve_for_session()

        assert exc_info.value.kind == "no_scenario_available"

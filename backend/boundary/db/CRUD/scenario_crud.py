"""
Scenario CRUD operations.

Catalog reads, completed-session tallies for balanced selection, and the
admin enable/disable toggle.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Scenario persistence operations
"""

from typing import Iterable, Sequence

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.scenario_model import ScenarioModel
from backend.boundary.db.models.session_model import SessionModel, SessionStatus
from backend.configs.study import ScenarioDefinition


class ScenarioCRUD(BaseCRUD[ScenarioModel]):
    """CRUD operations for ScenarioModel."""

    def __init__(self) -> None:
        """Initialize ScenarioCRUD with ScenarioModel."""
        super().__init__(ScenarioModel)

    async def list_ordered(
        self,
        session: AsyncSession,
        catalog_ids: Iterable[str],
    ) -> Sequence[ScenarioModel]:
        """Return the catalog scenarios ordered by id."""
        stmt = (
            select(ScenarioModel)
            .where(ScenarioModel.id.in_(list(catalog_ids)))
            .order_by(ScenarioModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_enabled_with_completed_counts(
        self,
        session: AsyncSession,
        catalog_ids: Iterable[str],
    ) -> list[tuple[ScenarioModel, int]]:
        """
        Return enabled catalog scenarios paired with their completed-session counts.

        Scenarios without any session are reported with a count of 0; rows
        outside ``catalog_ids`` are never returned.

        Args:
            session: Async database session
            catalog_ids: Scenario ids of the configured catalog

        Returns:
            list of (ScenarioModel, completed_count) ordered by scenario id
        """
        completed = func.count(
            case((SessionModel.status == SessionStatus.COMPLETED, SessionModel.id))
        )
        stmt = (
            select(ScenarioModel, completed.label("completed_count"))
            .outerjoin(SessionModel, SessionModel.scenario_id == ScenarioModel.id)
            .where(ScenarioModel.enabled.is_(True), ScenarioModel.id.in_(list(catalog_ids)))
            .group_by(ScenarioModel.id)
            .order_by(ScenarioModel.id)
        )
        result = await session.execute(stmt)
        return [(row[0], int(row[1] or 0)) for row in result.all()]

    async def set_enabled(
        self,
        session: AsyncSession,
        id: str,
        enabled: bool,
    ) -> ScenarioModel | None:
        """
        Enable or disable a scenario.

        Returns:
            Updated ScenarioModel if found, None otherwise
        """
        scenario = await self.get_by_id(session, id, for_update=True)
        if scenario is None:
            return None
        scenario.enabled = enabled
        await session.flush()
        return scenario

    async def sync_catalog(
        self,
        session: AsyncSession,
        definitions: Iterable[ScenarioDefinition],
    ) -> int:
        """
        Insert missing catalog scenarios and refresh texts of existing ones.

        The enabled flag of existing rows is left untouched.

        Returns:
            int: Number of newly inserted scenarios
        """
        inserted = 0
        for definition in definitions:
            existing = await self.get_by_id(session, definition.id)
            if existing is None:
                session.add(
                    ScenarioModel(
                        id=definition.id,
                        title=definition.title,
                        short_label=definition.short_label,
                        description=definition.description,
                        enabled=True,
                    )
                )
                inserted += 1
            else:
                existing.title = definition.title
                existing.short_label = definition.short_label
                existing.description = definition.description
        await session.flush()
        return inserted


scenario_crud = ScenarioCRUD()

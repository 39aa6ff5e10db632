"""
Scenario service orchestrator.

Scenario listing, balanced or explicit scenario resolution for new
sessions, the admin enable toggle, and catalog synchronization.

Dependencies: backend.boundary.db.CRUD, backend.core, backend.configs
System role: Study condition use case orchestration
"""

import logging
import random

from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.scenario_crud import scenario_crud
from backend.boundary.db.models.scenario_model import ScenarioModel
from backend.configs.study import SCENARIO_IDS, SCENARIOS
from backend.core.exceptions import (
    NoScenarioAvailableError,
    ScenarioDisabledError,
    ScenarioNotFoundError,
    UnknownScenarioError,
)
from backend.core.scenario_selector import ScenarioTally, pick_balanced_scenario

logger = logging.getLogger(__name__)


def scenario_to_dict(scenario: ScenarioModel | ScenarioTally) -> dict:
    """Serialize a scenario row or tally to the public shape."""
    return {
        "id": scenario.id,
        "title": scenario.title,
        "description": scenario.description,
        "short_label": scenario.short_label,
        "enabled": scenario.enabled,
    }


class ScenarioService:
    """Scenario service orchestrator."""

    def __init__(self, db: AsyncSession, rng: random.Random | None = None) -> None:
        """
        Initialize scenario service.

        Args:
            db: Async SQLAlchemy session
            rng: Random source for tie-breaking
        """
        self.db = db
        self.rng = rng or random.Random()

    async def list_scenarios(self) -> list[dict]:
        """Return every scenario with its enabled flag."""
        scenarios = await scenario_crud.list_ordered(self.db, SCENARIO_IDS)
        return [scenario_to_dict(s) for s in scenarios]

    async def get_tallies(self) -> list[ScenarioTally]:
        """Enabled scenarios with their completed-session counts."""
        rows = await scenario_crud.get_enabled_with_completed_counts(
            self.db, SCENARIO_IDS
        )
        return [
            ScenarioTally(
                id=scenario.id,
                title=scenario.title,
                description=scenario.description,
                short_label=scenario.short_label,
                enabled=scenario.enabled,
                completed_count=completed,
            )
            for scenario, completed in rows
        ]

    async def resolve_for_session(self, scenario_id: str | None = None) -> ScenarioTally:
        """
        Resolve the scenario for a new session.

        An explicit id bypasses balancing but must belong to the catalog,
        exist and be enabled.

        Args:
            scenario_id: Optional explicit scenario id

        Returns:
            ScenarioTally: Scenario to assign

        Raises:
            ScenarioNotFoundError: Explicit id is unknown
            ScenarioDisabledError: Explicit scenario is disabled
            NoScenarioAvailableError: No enabled scenario exists
        """
        if scenario_id:
            if scenario_id not in SCENARIO_IDS:
                raise ScenarioNotFoundError(scenario_id)
            scenario = await scenario_crud.get_by_id(self.db, scenario_id, fresh=True)
            if scenario is None:
                raise ScenarioNotFoundError(scenario_id)
            if not scenario.enabled:
                raise ScenarioDisabledError(scenario_id)
            return ScenarioTally(
                id=scenario.id,
                title=scenario.title,
                description=scenario.description,
                short_label=scenario.short_label,
                enabled=scenario.enabled,
            )

        chosen = pick_balanced_scenario(await self.get_tallies(), self.rng)
        if chosen is None:
            raise NoScenarioAvailableError()
        logger.debug(
            "Balanced scenario picked",
            extra={"scenario_id": chosen.id, "completed_count": chosen.completed_count},
        )
        return chosen

    async def set_scenario_enabled(self, scenario_id: str, enabled: bool) -> dict:
        """
        Enable or disable a scenario (admin operation).

        Raises:
            UnknownScenarioError: Id outside the catalog or missing from the database
        """
        if scenario_id not in SCENARIO_IDS:
            raise UnknownScenarioError(scenario_id)
        try:
            scenario = await scenario_crud.set_enabled(self.db, scenario_id, enabled)
            if scenario is None:
                raise UnknownScenarioError(scenario_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(
            "Scenario toggled", extra={"scenario_id": scenario_id, "enabled": enabled}
        )
        return scenario_to_dict(scenario)

    async def sync_catalog(self) -> int:
        """Insert configured scenarios missing from the database."""
        try:
            inserted = await scenario_crud.sync_catalog(self.db, SCENARIOS)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        if inserted:
            logger.info("Scenario catalog synchronized", extra={"inserted": inserted})
        return inserted

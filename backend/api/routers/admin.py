"""
Admin API endpoints.

Routes: POST /admin/scenarios/{id}/enabled

Every route requires the X-Admin-Id / X-Admin-Password headers.

Dependencies: backend.application.services, backend.models
System role: Study administration HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from backend.api.deps import get_scenario_service, require_admin
from backend.api.routers.error_handling import handle_study_errors
from backend.application.services.scenario_service import ScenarioService
from backend.models.scenario import ScenarioEnabledRequest, ScenarioResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/scenarios/{scenario_id}/enabled", response_model=ScenarioResponse)
@handle_study_errors
async def set_scenario_enabled(
    scenario_id: str,
    request: ScenarioEnabledRequest,
    scenario_service: ScenarioService = Depends(get_scenario_service),
) -> dict:
    """
    Enable or disable a scenario for new sessions.

    Raises:
        HTTPException(401): Bad admin credentials
        HTTPException(404): Scenario not in the catalog
    """
    return await scenario_service.set_scenario_enabled(scenario_id, request.enabled)

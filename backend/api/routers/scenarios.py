"""
Scenario API endpoints.

Routes: GET /scenarios

Dependencies: backend.application.services, backend.models
System role: Scenario catalog HTTP API
"""

from fastapi import APIRouter, Depends

from backend.api.deps import get_scenario_service
from backend.api.routers.error_handling import handle_study_errors
from backend.application.services.scenario_service import ScenarioService
from backend.models.scenario import ScenarioListResponse

router = APIRouter(prefix="/scenarios", tags=["scenarios"])


@router.get("", response_model=ScenarioListResponse)
@handle_study_errors
async def list_scenarios(
    scenario_service: ScenarioService = Depends(get_scenario_service),
) -> dict:
    """List every scenario with its enabled flag."""
    return {"scenarios": await scenario_service.list_scenarios()}

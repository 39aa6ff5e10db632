"""
Scenario schemas.

Dependencies: pydantic
System role: Scenario API contracts
"""

from pydantic import BaseModel, Field


class ScenarioResponse(BaseModel):
    """A study scenario (context) as shown to clients."""

    id: str
    title: str
    description: str
    short_label: str | None = None
    enabled: bool = True


class ScenarioListResponse(BaseModel):
    scenarios: list[ScenarioResponse]


class ScenarioEnabledRequest(BaseModel):
    """Admin request to enable or disable a scenario."""

    enabled: bool = Field(description="New enabled flag")

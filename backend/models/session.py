"""
Session domain models and schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from backend.models.scenario import ScenarioResponse


class StartSessionRequest(BaseModel):
    """Request schema for starting a session."""

    context: str | None = Field(default=None, description="Explicit scenario id; balanced pick when omitted")


class AssignedImageResponse(BaseModel):
    """One image of a session's assignment, in presentation order."""

    image_id: str
    category: str
    order_index: int
    statement: int = Field(description="Statement the image is shown under (1 or 2)")
    image_url: str


class SessionAssignmentResponse(BaseModel):
    """Response schema for session start and resume."""

    session_id: uuid.UUID
    status: str
    context: str | None
    scenario: ScenarioResponse | None
    stage: str | None
    n_images: int
    statement_order: int
    dataset_version: str
    started_at: datetime
    resumed: bool = False
    images: list[AssignedImageResponse]


class SessionResponse(BaseModel):
    """Response schema for session read-back."""

    session_id: uuid.UUID
    status: str
    context: str | None
    scenario: ScenarioResponse | None
    stage: str | None
    n_images: int
    statement_order: int
    started_at: datetime
    updated_at: datetime
    completed_at: datetime | None
    payload_draft: dict | None = None


class ProgressResponse(BaseModel):
    """Response schema for a merged progress patch."""

    ok: bool = True
    session_id: uuid.UUID
    status: str
    updated_at: datetime


class CompleteResponse(BaseModel):
    """Response schema for session completion."""

    ok: bool = True
    session_id: uuid.UUID
    status: str
    completed_at: datetime
    already_completed: bool = Field(default=False, serialization_alias="alreadyCompleted")

"""
Session API endpoints.

Routes:
- POST /sessions/start - Start (or resume) a session with its image assignment
- GET /sessions/{id} - Read session state, optionally with the draft
- PUT /sessions/{id}/progress - Merge a draft patch
- POST /sessions/{id}/complete - Finalize a session

Dependencies: backend.application.services, backend.models
System role: Session lifecycle HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Header, Query, Response, status

from backend.api.deps import get_session_service, get_settings_dependency
from backend.api.routers.error_handling import handle_study_errors
from backend.application.services.session_service import SessionService
from backend.configs import Settings
from backend.core.exceptions import SubmissionMismatchError
from backend.models.annotation import CompleteRequest, ProgressRequest
from backend.models.session import (
    CompleteResponse,
    ProgressResponse,
    SessionAssignmentResponse,
    SessionResponse,
    StartSessionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _parse_session_header(value: str | None) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        logger.info("Ignoring malformed X-Session-Id header", extra={"header": value[:64]})
        return None


@router.post("/start", response_model=SessionAssignmentResponse, status_code=status.HTTP_201_CREATED)
@handle_study_errors
async def start_session(
    response: Response,
    request: StartSessionRequest | None = Body(default=None),
    n: str | None = Query(default=None, description="Number of images (8, 16 or 24)"),
    x_session_id: str | None = Header(default=None),
    session_service: SessionService = Depends(get_session_service),
    settings: Settings = Depends(get_settings_dependency),
) -> dict:
    """
    Start a session, or resume the caller's in-progress session.

    Args:
        response: Outgoing response (status set to 200 on resume)
        request: Optional explicit scenario choice
        n: Requested image count; unsupported values fall back to the default
        x_session_id: Session id of a returning client
        session_service: Injected SessionService

    Returns:
        SessionAssignmentResponse: Session with its ordered images

    Raises:
        HTTPException(400): Unknown or disabled scenario
        HTTPException(409): No scenario available or not enough images
    """
    existing_id = _parse_session_header(x_session_id)
    if existing_id is not None:
        resumed = await session_service.resume(existing_id)
        if resumed is not None:
            response.status_code = status.HTTP_200_OK
            return resumed

    context = (request.context or "").strip() if request else ""
    n_images = settings.study.resolve_image_count(n)
    return await session_service.start(context or None, n_images)


@router.get("/{session_id}", response_model=SessionResponse)
@handle_study_errors
async def get_session(
    session_id: UUID,
    include_draft: bool = Query(default=False),
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Get session state by ID.

    Raises:
        HTTPException(404): Session not found
    """
    return await session_service.get_session(session_id, include_draft=include_draft)


@router.put("/{session_id}/progress", response_model=ProgressResponse)
@handle_study_errors
async def put_progress(
    session_id: UUID,
    request: ProgressRequest,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Merge a progress patch into the session draft.

    Raises:
        HTTPException(404): Session not found
        HTTPException(409): Session already completed
        HTTPException(400): Patch references images not assigned to the session
    """
    return await session_service.merge_progress(
        session_id,
        stage=request.stage.value if request.stage else None,
        draft_patch=request.draft_patch(),
        submitted_image_ids=request.submitted_image_ids(),
        envelope=request.envelope(),
    )


@router.post(
    "/{session_id}/complete", response_model=CompleteResponse, response_model_by_alias=True
)
@handle_study_errors
async def complete_session(
    session_id: UUID,
    request: CompleteRequest,
    session_service: SessionService = Depends(get_session_service),
) -> dict:
    """
    Finalize a session with its complete submission.

    A retry against an already completed session succeeds with
    ``already_completed: true`` and the original completion time.

    Raises:
        HTTPException(400): session_id/context/statement_order or image set mismatch
        HTTPException(404): Session not found
    """
    if request.session_id.strip().lower() != str(session_id):
        raise SubmissionMismatchError("session_id_mismatch", str(session_id), request.session_id)

    return await session_service.finalize(
        session_id,
        request.model_dump(mode="json"),
        submitted_image_ids=request.image_ids(),
        context=request.context,
        statement_order=request.statement_order,
    )

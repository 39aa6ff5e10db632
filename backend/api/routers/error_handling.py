"""
Study engine error handling utilities.

A decorator that maps engine errors to HTTP responses with the
``{"error": code, "details": {...}}`` body, plus the request-validation
handler registered on the app.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from backend.core.exceptions import (
    ALLOCATION_FAILURE,
    INVALID_STATE,
    NO_SCENARIO_AVAILABLE,
    NOT_FOUND,
    VALIDATION_MISMATCH,
    StudyEngineError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_KIND = {
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    INVALID_STATE: status.HTTP_409_CONFLICT,
    ALLOCATION_FAILURE: status.HTTP_409_CONFLICT,
    NO_SCENARIO_AVAILABLE: status.HTTP_409_CONFLICT,
    VALIDATION_MISMATCH: status.HTTP_400_BAD_REQUEST,
}


def error_response(error: StudyEngineError) -> JSONResponse:
    """Render an engine error with the status code of its kind."""
    status_code = STATUS_BY_KIND.get(error.kind, status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(error.to_dict()))


def handle_study_errors(func: F) -> F:
    """
    Decorator to turn study engine errors into JSON error responses.

    This centralizes:
    - Logging of errors with their code and details
    - Mapping error kinds to HTTP status codes
    - Uniform ``{"error", "message", "details"}`` bodies
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except StudyEngineError as e:
            logger.warning(
                "Study request rejected",
                extra={"error_code": e.code, "error_kind": e.kind, "details": e.details},
            )
            return error_response(e)

        except Exception as e:
            logger.exception(
                "Unexpected failure in study operation",
                extra={"error": str(e)},
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "server_error", "message": "An internal error occurred"},
            )

    return wrapper  # type: ignore


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed payloads with 400 and the field errors."""
    logger.warning(
        "Invalid request payload",
        extra={"path": request.url.path, "error_count": len(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"error": "invalid_payload", "details": exc.errors()}),
    )

"""
Exception hierarchy for the study session engine.

Every engine error carries a stable ``code`` and a ``details`` dict so the
caller can decide whether to retry with different parameters. The ``kind``
attribute groups codes into the coarse taxonomy used for HTTP mapping.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any, Sequence

NOT_FOUND = "not_found"
INVALID_STATE = "invalid_state"
ALLOCATION_FAILURE = "allocation_failure"
NO_SCENARIO_AVAILABLE = "no_scenario_available"
VALIDATION_MISMATCH = "validation_mismatch"
INVALID_REQUEST = "invalid_request"


class StudyEngineError(Exception):
    """Base exception for all study engine errors."""

    code: str = "engine_error"
    kind: str = INVALID_REQUEST

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of structured context for the caller
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{"error": code, "details": {...}}`` wire shape."""
        return {"error": self.code, "message": self.message, "details": self.details}


class SessionNotFoundError(StudyEngineError):
    """Raised when a session cannot be found."""

    code = "session_not_found"
    kind = NOT_FOUND

    def __init__(self, session_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["session_id"] = str(session_id)
        super().__init__(f"Session not found: {session_id}", details)


class SessionAlreadyCompletedError(StudyEngineError):
    """Raised when progress is submitted for a completed session."""

    code = "already_completed"
    kind = INVALID_STATE

    def __init__(self, session_id: Any) -> None:
        super().__init__(
            f"Session already completed: {session_id}",
            {"session_id": str(session_id)},
        )


class ScenarioNotFoundError(StudyEngineError):
    """Raised when an explicit scenario id is unknown."""

    code = "invalid_context"
    kind = INVALID_REQUEST

    def __init__(self, scenario_id: str) -> None:
        super().__init__(f"Unknown context id: {scenario_id}", {"context": scenario_id})


class UnknownScenarioError(StudyEngineError):
    """Raised when an admin operation targets a scenario outside the catalog."""

    code = "context_not_found"
    kind = NOT_FOUND

    def __init__(self, scenario_id: str) -> None:
        super().__init__(f"Context not found: {scenario_id}", {"context": scenario_id})


class ScenarioDisabledError(StudyEngineError):
    """Raised when an explicit scenario exists but is disabled."""

    code = "context_disabled"
    kind = INVALID_REQUEST

    def __init__(self, scenario_id: str) -> None:
        super().__init__(f"Context is disabled: {scenario_id}", {"context": scenario_id})


class NoScenarioAvailableError(StudyEngineError):
    """Raised when no enabled scenario exists to assign."""

    code = "no_scenario_available"
    kind = NO_SCENARIO_AVAILABLE

    def __init__(self) -> None:
        super().__init__("No enabled contexts available")


class InsufficientImagesError(StudyEngineError):
    """Raised when a category cannot satisfy its image quota."""

    code = "insufficient_images"
    kind = ALLOCATION_FAILURE

    def __init__(self, category: str, needed: int, available: int) -> None:
        self.category = category
        self.needed = needed
        self.available = available
        super().__init__(
            f"Not enough images in category {category}: needed {needed}, available {available}",
            {"category": category, "needed": needed, "available": available},
        )


class InvalidStudyConfigurationError(StudyEngineError):
    """Raised when the requested image count cannot be split over categories."""

    code = "invalid_image_count"
    kind = INVALID_REQUEST

    def __init__(self, target_count: int, category_count: int) -> None:
        super().__init__(
            f"Image count {target_count} cannot be split evenly over {category_count} categories",
            {"n_images": target_count, "categories": category_count},
        )


class ImageSetMismatchError(StudyEngineError):
    """Raised when a submitted image set disagrees with the assigned set."""

    kind = VALIDATION_MISMATCH

    def __init__(self, code: str, image_ids: Sequence[str], session_id: Any = None) -> None:
        self.code = code
        self.image_ids = list(image_ids)
        details: dict[str, Any] = {"image_ids": self.image_ids}
        if session_id is not None:
            details["session_id"] = str(session_id)
        super().__init__(f"Image set mismatch ({code})", details)


class SubmissionMismatchError(StudyEngineError):
    """Raised when a submission disagrees with a session's fixed values."""

    kind = VALIDATION_MISMATCH

    def __init__(self, code: str, expected: Any, received: Any) -> None:
        self.code = code
        super().__init__(
            f"Submission mismatch ({code})",
            {"expected": expected, "received": received},
        )

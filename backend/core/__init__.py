"""
Core business logic module.

Contains the pure domain rules of the study engine: balanced scenario
selection, statement order balancing, image-set membership checks, draft
merging, and the exception hierarchy.
"""

from backend.core.drafts import merge_draft, normalize_draft_image_urls
from backend.core.exceptions import (
    ImageSetMismatchError,
    InsufficientImagesError,
    InvalidStudyConfigurationError,
    NoScenarioAvailableError,
    ScenarioDisabledError,
    ScenarioNotFoundError,
    SessionAlreadyCompletedError,
    SessionNotFoundError,
    StudyEngineError,
    SubmissionMismatchError,
    UnknownScenarioError,
)
from backend.core.image_membership import check_image_membership
from backend.core.order_balancer import (
    HalfSplitStrategy,
    OrderAssignment,
    PairedHistoryStrategy,
    assign_order,
    select_strategy,
)
from backend.core.scenario_selector import ScenarioTally, pick_balanced_scenario

__all__ = [
    # Exceptions
    "StudyEngineError",
    "SessionNotFoundError",
    "SessionAlreadyCompletedError",
    "ScenarioNotFoundError",
    "ScenarioDisabledError",
    "UnknownScenarioError",
    "NoScenarioAvailableError",
    "InsufficientImagesError",
    "InvalidStudyConfigurationError",
    "ImageSetMismatchError",
    "SubmissionMismatchError",
    # Business logic
    "ScenarioTally",
    "pick_balanced_scenario",
    "OrderAssignment",
    "HalfSplitStrategy",
    "PairedHistoryStrategy",
    "assign_order",
    "select_strategy",
    "check_image_membership",
    "merge_draft",
    "normalize_draft_image_urls",
]

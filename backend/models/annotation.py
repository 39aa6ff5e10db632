"""
Annotation payload schemas.

Shape and range checks for progress patches and final submissions.
The engine stores these documents as free-form JSON; everything here runs
at the HTTP boundary before a document reaches a service.

Dependencies: pydantic
System role: Annotation payload validation
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ATI_KEYS = tuple(f"q{i}" for i in range(1, 10))
IUIPC_KEYS = tuple(f"q{i}" for i in range(1, 9))

Likert7 = Annotated[int, Field(ge=1, le=7)]
Likert5 = Annotated[int, Field(ge=1, le=5)]
Unit = Annotated[float, Field(ge=0, le=1)]


class Stage(str, Enum):
    """UI progress stages a client may report."""

    WELCOME = "welcome"
    ANNOTATE_STARTED = "annotate_started"
    ANNOTATE = "annotate"
    ANNOTATE_DONE = "annotate_done"
    OBFUSCATION_STARTED = "obfuscation_started"
    OBFUSCATION_DONE = "obfuscation_done"
    DEMOGRAPHICS_DONE = "demographics_done"
    COMPLETED = "completed"


class ObfuscationMethod(str, Enum):
    BLACKBOX = "blackbox"
    BLUR = "blur"
    CENSOR = "censor"
    AVATAR = "avatar"


class InformationType(str, Enum):
    PII = "pii"
    LOCATION = "location"
    PERSONAL_INTERESTS = "personal_interests"
    SOCIAL_CONTEXT = "social_context"
    PRIVATE_SPACES = "private_spaces"
    OTHERS_PRIVATE_INFO = "others_private_info"
    OTHERS = "others"
    NONE = "none"


EXCLUSIVE_INFORMATION_TYPES = frozenset({InformationType.NONE})

AppropriatenessNotShare = Literal[
    "slightly_inappropriate",
    "moderately_inappropriate",
    "very_inappropriate",
    "completely_inappropriate",
    "difficult_to_say",
]
AppropriatenessToShare = Literal[
    "slightly_appropriate",
    "moderately_appropriate",
    "very_appropriate",
    "completely_appropriate",
    "difficult_to_say",
]


class StrictModel(BaseModel):
    """Base for payload models: unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class BoundingBox(StrictModel):
    """Region rectangle in image-relative coordinates."""

    x: Unit
    y: Unit
    width: Unit
    height: Unit


class _Region(StrictModel):
    region_id: str = Field(min_length=1)
    bbox: BoundingBox
    information_types: list[InformationType] = Field(default_factory=list)
    other_information: str | None = None

    @field_validator("information_types")
    @classmethod
    def _exclusive_types(cls, value: list[InformationType]) -> list[InformationType]:
        if len(value) > 1 and any(t in EXCLUSIVE_INFORMATION_TYPES for t in value):
            raise ValueError("'none' cannot be combined with other information types")
        return value


class Statement1Region(_Region):
    """Region the participant would not share."""

    appropriateness_not_share: AppropriatenessNotShare
    information_types: list[InformationType] = Field(min_length=1)


class Statement2Region(_Region):
    """Region the participant would share."""

    appropriateness_to_share: AppropriatenessToShare
    information_types: list[InformationType] = Field(min_length=1)


class DraftStatement1Region(_Region):
    appropriateness_not_share: AppropriatenessNotShare | None = None


class DraftStatement2Region(_Region):
    appropriateness_to_share: AppropriatenessToShare | None = None


class FinalizedImage(StrictModel):
    """Complete annotation of one assigned image."""

    image_id: str = Field(min_length=1)
    overall_sensitivity: int = Field(ge=1, le=4)
    statement1_regions: list[Statement1Region]
    statement2_regions: list[Statement2Region]
    obfuscation_method: ObfuscationMethod | None = None

    @model_validator(mode="after")
    def _obfuscation_required(self) -> "FinalizedImage":
        if self.statement1_regions and self.obfuscation_method is None:
            raise ValueError(
                "An obfuscation method is required when statement1_regions has at least one region"
            )
        return self


class DraftImage(StrictModel):
    """Partially annotated image inside a draft."""

    image_id: str = Field(min_length=1)
    image_url: str | None = None
    overall_sensitivity: int | None = Field(default=None, ge=1, le=4)
    statement1_regions: list[DraftStatement1Region] = Field(default_factory=list)
    statement2_regions: list[DraftStatement2Region] = Field(default_factory=list)
    obfuscation_method: ObfuscationMethod | None = None


class AtiScale(StrictModel):
    """Affinity for technology interaction, nine 7-point items."""

    q1: Likert7
    q2: Likert7
    q3: Likert7
    q4: Likert7
    q5: Likert7
    q6: Likert7
    q7: Likert7
    q8: Likert7
    q9: Likert7


class IuipcScale(StrictModel):
    """Internet users' information privacy concerns, eight 7-point items."""

    q1: Likert7
    q2: Likert7
    q3: Likert7
    q4: Likert7
    q5: Likert7
    q6: Likert7
    q7: Likert7
    q8: Likert7


class Demographics(StrictModel):
    age_group: str = Field(min_length=1)
    gender: str = Field(min_length=1)
    academic_background: str = Field(min_length=1)
    current_residence: str = Field(min_length=1)
    ATI: AtiScale
    IUIPC: IuipcScale


class DraftDemographics(StrictModel):
    age_group: str | None = Field(default=None, min_length=1)
    gender: str | None = Field(default=None, min_length=1)
    academic_background: str | None = Field(default=None, min_length=1)
    current_residence: str | None = Field(default=None, min_length=1)
    ATI: dict[str, Likert7] | None = None
    IUIPC: dict[str, Likert7] | None = None


class ObfuscationEvaluation(StrictModel):
    example_image_id: str = Field(min_length=1)
    example_obfuscation_method: ObfuscationMethod
    comfort_sharing: Likert5
    perceived_effectiveness: Likert5
    wants_automatic: bool


DRAFT_FIELDS = ("images", "obfuscation_evaluation", "demographics")


class ProgressDraft(StrictModel):
    """Draft keys a progress patch may replace."""

    images: list[DraftImage] | None = None
    obfuscation_evaluation: ObfuscationEvaluation | None = None
    demographics: DraftDemographics | None = None

    # Identity keys: tolerated, but the client should not resend them
    session_id: str | None = None
    started_at: str | None = None
    context: str | None = None


class ProgressRequest(StrictModel):
    """
    Progress patch.

    Draft keys may be sent inside ``draft`` or at the top level; when both
    are present the ``draft`` value wins.
    """

    stage: Stage | None = None
    draft: ProgressDraft | None = None
    images: list[DraftImage] | None = None
    obfuscation_evaluation: ObfuscationEvaluation | None = None
    demographics: DraftDemographics | None = None

    session_id: str | None = None
    started_at: str | None = None
    context: str | None = None

    def draft_patch(self) -> dict:
        """Top-level keys to merge into the stored draft (only keys actually sent)."""
        patch = {
            name: self._dump_field(self, name)
            for name in DRAFT_FIELDS
            if name in self.model_fields_set
        }
        if self.draft is not None:
            patch.update(
                {name: self._dump_field(self.draft, name) for name in self.draft.model_fields_set}
            )
        return patch

    def envelope(self) -> dict:
        """Top-level fields as sent by the client."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def submitted_image_ids(self) -> list[str] | None:
        patch_images = self.draft.images if self.draft and self.draft.images is not None else self.images
        if patch_images is None:
            return None
        return [image.image_id for image in patch_images]

    @staticmethod
    def _dump_field(model: BaseModel, name: str):
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json", exclude_none=True)
        if isinstance(value, list):
            return [
                v.model_dump(mode="json", exclude_none=True) if isinstance(v, BaseModel) else v
                for v in value
            ]
        if isinstance(value, Enum):
            return value.value
        return value


class CompleteRequest(StrictModel):
    """Final submission of a session."""

    session_id: str = Field(min_length=1)
    context: str = Field(min_length=1)
    statement_order: Literal[1, 2]
    started_at: str = Field(min_length=1)
    completed_at: str = Field(min_length=1)
    n_images: int = Field(ge=1)
    images: list[FinalizedImage] = Field(min_length=1)
    demographics: Demographics
    ATI: AtiScale
    IUIPC: IuipcScale
    obfuscation_evaluation: ObfuscationEvaluation | None = None

    @model_validator(mode="after")
    def _cross_checks(self) -> "CompleteRequest":
        if any(image.statement1_regions for image in self.images) and not self.obfuscation_evaluation:
            raise ValueError(
                "obfuscation_evaluation is required when any image has statement1_regions"
            )
        if len(self.images) != self.n_images:
            raise ValueError("images length must match n_images")
        if self.ATI != self.demographics.ATI:
            raise ValueError("ATI must match demographics.ATI")
        if self.IUIPC != self.demographics.IUIPC:
            raise ValueError("IUIPC must match demographics.IUIPC")
        return self

    def image_ids(self) -> list[str]:
        return [image.image_id for image in self.images]

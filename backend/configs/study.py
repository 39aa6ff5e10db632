"""
Study configuration.

Static study catalog (image categories, scenarios) and the tunable
parameters of session allocation.

Dependencies: pydantic, pydantic_settings
System role: Study design configuration
"""

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings

IMAGE_CATEGORIES: tuple[str, ...] = (
    "Education_knowledge",
    "Health_medical",
    "Household_children",
    "Intimate_private_space",
    "Lifestyle_habits",
    "Religion_culture",
    "SES_living_standard",
    "Work_from_home",
)


@dataclass(frozen=True)
class ScenarioDefinition:
    """Catalog entry for a study scenario (context)."""

    id: str
    title: str
    short_label: str
    description: str


SCENARIOS: tuple[ScenarioDefinition, ...] = (
    ScenarioDefinition(
        id="ar_assistant",
        title="AR furniture visualization app",
        short_label="the AR furniture app",
        description=(
            "Imagine using an app like IKEA Place or Amazon's AR View that lets you "
            "visualize how furniture would look in your room by scanning your space "
            "with your phone camera."
        ),
    ),
    ScenarioDefinition(
        id="furniture_scanner",
        title="Home improvement & shopping app",
        short_label="the home improvement app",
        description=(
            "Imagine using an app like IKEA, OBI, Home Depot, or Houzz that scans your "
            "room photos to suggest products, measure spaces, or provide renovation ideas."
        ),
    ),
    ScenarioDefinition(
        id="smart_camera",
        title="Smart home security camera",
        short_label="the smart home camera",
        description=(
            "Imagine this image was captured by a smart home security camera like Ring, "
            "Nest, or Arlo that records inside your home and uses AI to detect people "
            "or activity."
        ),
    ),
    ScenarioDefinition(
        id="social_media_ai",
        title="Social media & photo storage",
        short_label="social media",
        description=(
            "Imagine uploading this to Instagram, Facebook, or Google Photos where AI "
            "automatically analyzes it to tag people, identify objects, suggest "
            "memories, and organize your content."
        ),
    ),
)

SCENARIO_IDS: frozenset[str] = frozenset(s.id for s in SCENARIOS)


class StudySettings(BaseSettings):
    """Allocation parameters and admin credentials."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STUDY_",
        case_sensitive=False,
        extra="ignore",
    )

    dataset_version: str = Field(default="v1", description="Image dataset version tag")
    allowed_image_counts: list[int] = Field(
        default_factory=lambda: [8, 16, 24],
        description="Image counts a participant may request",
    )
    default_image_count: int = Field(
        default=8, description="Image count used when the request is missing or invalid"
    )
    image_url_prefix: str = Field(
        default="/images_v1/", description="Path prefix under which images are served"
    )
    admin_id: str | None = Field(default=None, description="Admin identifier")
    admin_password: str | None = Field(default=None, description="Admin password")

    def resolve_image_count(self, raw: str | int | None) -> int:
        """Parse a requested image count, falling back to the default."""
        try:
            parsed = int(raw) if raw is not None else None
        except (TypeError, ValueError):
            parsed = None
        if parsed in self.allowed_image_counts:
            return parsed
        return self.default_image_count

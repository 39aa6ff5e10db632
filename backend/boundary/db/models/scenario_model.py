"""
Scenario ORM model.

A study condition ("context") shown to the participant before annotating.
The enabled flag is toggled by admins only; the engine reads it at
selection and validation time.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Study condition catalog persistence
"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.boundary.db.base import Base, TimestampMixin


class ScenarioModel(Base, TimestampMixin):
    """
    Scenario ORM model.

    Attributes:
        id: Stable catalog identifier (e.g. "smart_camera")
        title: Display title
        short_label: Short phrase used inside question wording
        description: Scenario text shown to participants
        enabled: Whether new sessions may be assigned this scenario
        sessions: Sessions assigned to this scenario
    """

    __tablename__ = "scenarios"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    short_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    sessions = relationship("SessionModel", back_populates="scenario")

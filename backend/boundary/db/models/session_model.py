"""
Session ORM model.

A participant's annotation session. Created together with its image
assignments, mutated by progress merges while in progress, and finalized
exactly once.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Session lifecycle persistence
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.boundary.db.base import Base, UUIDMixin, utcnow


class SessionStatus(str, enum.Enum):
    """
    Session lifecycle states.

    IN_PROGRESS: Created; accepts progress merges
    COMPLETED: Finalized; final payload written, no further mutation
    """

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SessionModel(Base, UUIDMixin):
    """
    Session ORM model.

    Attributes:
        id: UUID primary key (opaque session token)
        status: IN_PROGRESS or COMPLETED
        scenario_id: Assigned scenario (nullable until chosen)
        stage: UI progress marker, carried through unchanged
        n_images: Target image count
        statement_order: Statement shown first (1 or 2), fixed at creation
        dataset_version: Image dataset the assignment was drawn from
        payload_draft: Mutable partial answers (free-form JSON)
        payload_final: Final submission, written once at completion
        payload_version: Payload schema version
        started_at / updated_at / completed_at: Lifecycle timestamps (UTC)

    Invariants:
        payload_final and completed_at are non-null iff status == COMPLETED
    """

    __tablename__ = "sessions"

    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SessionStatus.IN_PROGRESS,
        index=True,
    )
    scenario_id: Mapped[str | None] = mapped_column(
        ForeignKey("scenarios.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    stage: Mapped[str | None] = mapped_column(String(64), nullable=True)
    n_images: Mapped[int] = mapped_column(Integer, nullable=False)
    statement_order: Mapped[int] = mapped_column(Integer, nullable=False)
    dataset_version: Mapped[str] = mapped_column(String(32), nullable=False, default="v1")

    payload_draft: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    payload_final: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    payload_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    scenario = relationship("ScenarioModel", back_populates="sessions")
    images = relationship(
        "SessionImageModel",
        back_populates="session",
        order_by="SessionImageModel.order_index",
        cascade="all, delete-orphan",
    )

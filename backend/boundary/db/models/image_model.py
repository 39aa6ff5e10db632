"""
Image ORM model.

One row per image file in the shared pool. Counters record how often the
image was handed out (assigned_count) and how often a session that received
it was completed (completed_count).

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Image pool persistence
"""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.boundary.db.base import Base, TimestampMixin


class ImageModel(Base, TimestampMixin):
    """
    Image ORM model.

    Attributes:
        id: Image identifier (file name, unique)
        category: One of the configured image categories
        assigned_count: Times the image was reserved for a session
        completed_count: Times a session holding the image was finalized
        last_assigned_at: Last reservation timestamp (UTC)
        enabled: Whether the image may be reserved

    Constraints:
        assigned_count >= completed_count >= 0
    """

    __tablename__ = "images"
    __table_args__ = (
        CheckConstraint("completed_count >= 0", name="ck_images_completed_nonneg"),
        CheckConstraint(
            "assigned_count >= completed_count", name="ck_images_assigned_ge_completed"
        ),
        Index("ix_images_category_enabled", "category", "enabled"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    assigned_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_assigned_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    session_links = relationship("SessionImageModel", back_populates="image")

"""
Session-image assignment ORM model.

Join rows between a session and its images. order_index defines the
presentation order and statement records which question framing the image
is shown under.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Assignment persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.boundary.db.base import Base, utcnow


class SessionImageModel(Base):
    """
    Session-image join row.

    Attributes:
        session_id: Owning session
        image_id: Assigned image
        order_index: 0-based presentation position
        statement: Statement (1 or 2) the image is shown under
        assigned_at: Reservation timestamp (UTC)
        completed_at: Stamped when the owning session completes

    Constraints:
        (session_id, image_id) primary key; one image at most once per session
        (session_id, order_index) unique; positions are a permutation of 0..N-1
    """

    __tablename__ = "session_images"
    __table_args__ = (
        UniqueConstraint("session_id", "order_index", name="uq_session_images_order"),
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    image_id: Mapped[str] = mapped_column(
        ForeignKey("images.id", ondelete="RESTRICT"),
        primary_key=True,
        index=True,
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    statement: Mapped[int] = mapped_column(Integer, nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    session = relationship("SessionModel", back_populates="images")
    image = relationship("ImageModel", back_populates="session_links")

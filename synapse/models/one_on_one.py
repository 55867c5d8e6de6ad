"""
Synapse API — One-on-One Meeting SQLAlchemy Model
===================================================

What:  A private meeting between two members. member1 is the organizer.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synapse.database import Base, utcnow

if TYPE_CHECKING:
    from synapse.models.user import User


class OneOnOneMeeting(Base):
    __tablename__ = "one_on_one_meetings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member1_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    member2_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    member1: Mapped["User"] = relationship(foreign_keys=[member1_id])
    member2: Mapped["User"] = relationship(foreign_keys=[member2_id])

    def __repr__(self) -> str:
        return f"<OneOnOneMeeting(id={self.id}, date='{self.date}')>"

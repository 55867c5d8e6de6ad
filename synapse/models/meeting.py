"""
Synapse API — Meeting & Attendance SQLAlchemy Models
======================================================

What:  Group meetings and the members who checked in to them.
How:   Meeting.attendances is a one-to-many with delete-orphan cascade, so
       deleting a meeting removes its attendance rows. The database FK also
       cascades for rows deleted outside the ORM.

Constraint:
    (meeting_id, member_id) is unique; a member checks in at most once.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synapse.database import Base, utcnow

if TYPE_CHECKING:
    from synapse.models.user import User


class Meeting(Base):
    __tablename__ = "meetings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    attendances: Mapped[List["MeetingAttendance"]] = relationship(
        back_populates="meeting",
        cascade="all, delete-orphan",
        order_by="MeetingAttendance.checked_in_at",
    )

    def __repr__(self) -> str:
        return f"<Meeting(id={self.id}, title='{self.title}', date='{self.date}')>"


class MeetingAttendance(Base):
    __tablename__ = "meeting_attendances"
    __table_args__ = (
        UniqueConstraint("meeting_id", "member_id", name="uq_meeting_attendance_member"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    meeting_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    checked_in_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    meeting: Mapped["Meeting"] = relationship(back_populates="attendances")
    member: Mapped["User"] = relationship()

    def __repr__(self) -> str:
        return f"<MeetingAttendance(meeting_id={self.meeting_id}, member_id={self.member_id})>"

"""
Synapse API — Meeting Service
===============================

What:  Group meetings and member check-in.
How:   Meetings always load with their attendances and each attendee's
       member summary (two selectin queries, no N+1).

Attendance rules:
    - Checking in twice returns the existing record unchanged, also when
      both requests race (the unique constraint decides, the loser re-reads)
    - An attendance id is only removable through the meeting it belongs to
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.exceptions import NotFoundError
from synapse.models.meeting import Meeting, MeetingAttendance
from synapse.models.user import User
from synapse.schemas.common import Page
from synapse.schemas.meeting import (
    AttendanceResponse,
    MeetingCreate,
    MeetingResponse,
    MeetingUpdate,
)
from synapse.services.pagination import paginate

logger = logging.getLogger(__name__)

_WITH_ATTENDEES = selectinload(Meeting.attendances).selectinload(MeetingAttendance.member)


class MeetingService:

    async def create(self, db: AsyncSession, payload: MeetingCreate) -> MeetingResponse:
        meeting = Meeting(title=payload.title, date=payload.date)
        db.add(meeting)
        await db.flush()
        logger.info("Meeting %s scheduled for %s", meeting.id, meeting.date.isoformat())
        return await self.get(db, meeting.id)

    async def list_meetings(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Page[MeetingResponse]:
        """Meetings newest date first; the date range is inclusive at both ends."""
        query = select(Meeting)
        if search:
            query = query.where(Meeting.title.icontains(search, autoescape=True))
        if date_from is not None:
            query = query.where(Meeting.date >= date_from)
        if date_to is not None:
            query = query.where(Meeting.date <= date_to)
        query = query.order_by(Meeting.date.desc(), Meeting.id)
        return await paginate(
            db, query, page=page, size=size,
            item_schema=MeetingResponse, options=[_WITH_ATTENDEES],
        )

    async def get(self, db: AsyncSession, meeting_id: uuid.UUID) -> MeetingResponse:
        return MeetingResponse.model_validate(await self._get_or_404(db, meeting_id))

    async def update(
        self,
        db: AsyncSession,
        meeting_id: uuid.UUID,
        payload: MeetingUpdate,
    ) -> MeetingResponse:
        meeting = await self._get_or_404(db, meeting_id)
        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(meeting, field, value)
        await db.flush()
        return await self.get(db, meeting_id)

    async def delete(self, db: AsyncSession, meeting_id: uuid.UUID) -> None:
        """Deletes the meeting; its attendance rows go with it."""
        meeting = await self._get_or_404(db, meeting_id)
        await db.delete(meeting)
        await db.flush()
        logger.info("Meeting %s deleted", meeting_id)

    # ── Attendance ────────────────────────────────────────────────────────

    async def list_attendees(self, db: AsyncSession, meeting_id: uuid.UUID) -> List[AttendanceResponse]:
        meeting = await self._get_or_404(db, meeting_id)
        return [AttendanceResponse.model_validate(a) for a in meeting.attendances]

    async def add_attendance(
        self,
        db: AsyncSession,
        meeting_id: uuid.UUID,
        member: User,
    ) -> AttendanceResponse:
        await self._get_or_404(db, meeting_id)
        member_id = member.id

        attendance = await self._find_member_attendance(db, meeting_id, member_id)
        if attendance is None:
            attendance = MeetingAttendance(meeting_id=meeting_id, member_id=member_id)
            try:
                async with db.begin_nested():
                    db.add(attendance)
                    await db.flush()
            except IntegrityError:
                # A parallel check-in by the same member inserted first
                attendance = await self._find_member_attendance(db, meeting_id, member_id)
                if attendance is None:
                    raise
                logger.info("Member %s already checked in to meeting %s", member_id, meeting_id)
            else:
                logger.info("Member %s checked in to meeting %s", member_id, meeting_id)

        return AttendanceResponse.model_validate(await self._get_attendance(db, meeting_id, attendance.id))

    async def remove_attendance(
        self,
        db: AsyncSession,
        meeting_id: uuid.UUID,
        attendance_id: uuid.UUID,
    ) -> None:
        attendance = await self._get_attendance(db, meeting_id, attendance_id)
        await db.delete(attendance)
        await db.flush()
        logger.info("Attendance %s removed from meeting %s", attendance_id, meeting_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find_member_attendance(
        self,
        db: AsyncSession,
        meeting_id: uuid.UUID,
        member_id: uuid.UUID,
    ) -> Optional[MeetingAttendance]:
        result = await db.execute(
            select(MeetingAttendance).where(
                MeetingAttendance.meeting_id == meeting_id,
                MeetingAttendance.member_id == member_id,
            )
        )
        return result.scalar_one_or_none()

    async def _get_attendance(
        self,
        db: AsyncSession,
        meeting_id: uuid.UUID,
        attendance_id: uuid.UUID,
    ) -> MeetingAttendance:
        result = await db.execute(
            select(MeetingAttendance)
            .where(
                MeetingAttendance.id == attendance_id,
                MeetingAttendance.meeting_id == meeting_id,
            )
            .options(selectinload(MeetingAttendance.member))
            .execution_options(populate_existing=True)
        )
        attendance = result.scalar_one_or_none()
        if attendance is None:
            raise NotFoundError(
                resource="attendance",
                resource_id=str(attendance_id),
                message="Attendance record not found",
            )
        return attendance

    async def _get_or_404(self, db: AsyncSession, meeting_id: uuid.UUID) -> Meeting:
        result = await db.execute(
            select(Meeting)
            .where(Meeting.id == meeting_id)
            .options(_WITH_ATTENDEES)
            .execution_options(populate_existing=True)
        )
        meeting = result.scalar_one_or_none()
        if meeting is None:
            raise NotFoundError(resource="meeting", resource_id=str(meeting_id), message="Meeting not found")
        return meeting


meeting_service = MeetingService()

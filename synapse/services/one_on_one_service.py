"""
One-on-one meetings between two members.

The authenticated caller is always member1 (the organizer); member2 must be
a live user other than the organizer.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.exceptions import NotFoundError, ValidationError
from synapse.models.one_on_one import OneOnOneMeeting
from synapse.models.user import User
from synapse.schemas.common import Page
from synapse.schemas.one_on_one import (
    OneOnOneMeetingCreate,
    OneOnOneMeetingResponse,
    OneOnOneMeetingUpdate,
)
from synapse.services.pagination import paginate
from synapse.services.user_service import user_service

logger = logging.getLogger(__name__)

_WITH_MEMBERS = (
    selectinload(OneOnOneMeeting.member1),
    selectinload(OneOnOneMeeting.member2),
)


def _involving(member_id: uuid.UUID):
    return or_(OneOnOneMeeting.member1_id == member_id, OneOnOneMeeting.member2_id == member_id)


class OneOnOneMeetingService:

    async def create(
        self,
        db: AsyncSession,
        payload: OneOnOneMeetingCreate,
        organizer: User,
    ) -> OneOnOneMeetingResponse:
        if payload.member2_id == organizer.id:
            raise ValidationError(
                message="Cannot schedule a one-on-one meeting with yourself",
                field="member2Id",
            )
        await user_service.get_or_404(db, payload.member2_id)

        meeting = OneOnOneMeeting(
            member1_id=organizer.id,
            member2_id=payload.member2_id,
            date=payload.date,
            notes=payload.notes,
        )
        db.add(meeting)
        await db.flush()
        logger.info("One-on-one %s scheduled by %s", meeting.id, organizer.id)
        return await self.get(db, meeting.id)

    async def list_meetings(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        member_id: Optional[uuid.UUID] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Page[OneOnOneMeetingResponse]:
        query = select(OneOnOneMeeting)
        if member_id is not None:
            query = query.where(_involving(member_id))
        if date_from is not None:
            query = query.where(OneOnOneMeeting.date >= date_from)
        if date_to is not None:
            query = query.where(OneOnOneMeeting.date <= date_to)
        query = query.order_by(OneOnOneMeeting.date.desc(), OneOnOneMeeting.id)
        return await paginate(
            db, query, page=page, size=size,
            item_schema=OneOnOneMeetingResponse, options=_WITH_MEMBERS,
        )

    async def list_by_member(self, db: AsyncSession, member_id: uuid.UUID) -> List[OneOnOneMeetingResponse]:
        result = await db.execute(
            select(OneOnOneMeeting)
            .where(_involving(member_id))
            .options(*_WITH_MEMBERS)
            .order_by(OneOnOneMeeting.date.desc(), OneOnOneMeeting.id)
        )
        return [OneOnOneMeetingResponse.model_validate(m) for m in result.scalars().all()]

    async def get(self, db: AsyncSession, meeting_id: uuid.UUID) -> OneOnOneMeetingResponse:
        return OneOnOneMeetingResponse.model_validate(await self._get_or_404(db, meeting_id))

    async def update(
        self,
        db: AsyncSession,
        meeting_id: uuid.UUID,
        payload: OneOnOneMeetingUpdate,
    ) -> OneOnOneMeetingResponse:
        meeting = await self._get_or_404(db, meeting_id)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("date") is not None:
            meeting.date = changes["date"]
        if "notes" in changes:
            meeting.notes = changes["notes"]
        await db.flush()
        return await self.get(db, meeting_id)

    async def delete(self, db: AsyncSession, meeting_id: uuid.UUID) -> None:
        meeting = await self._get_or_404(db, meeting_id)
        await db.delete(meeting)
        await db.flush()
        logger.info("One-on-one %s deleted", meeting_id)

    async def _get_or_404(self, db: AsyncSession, meeting_id: uuid.UUID) -> OneOnOneMeeting:
        result = await db.execute(
            select(OneOnOneMeeting)
            .where(OneOnOneMeeting.id == meeting_id)
            .options(*_WITH_MEMBERS)
            .execution_options(populate_existing=True)
        )
        meeting = result.scalar_one_or_none()
        if meeting is None:
            raise NotFoundError(
                resource="one-on-one meeting",
                resource_id=str(meeting_id),
                message="One-on-one meeting not found",
            )
        return meeting


one_on_one_service = OneOnOneMeetingService()

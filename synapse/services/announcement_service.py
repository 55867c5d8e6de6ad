"""Announcements: member-authored posts with title/content search."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.exceptions import NotFoundError
from synapse.models.announcement import Announcement
from synapse.models.user import User
from synapse.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementResponse,
    AnnouncementUpdate,
)
from synapse.schemas.common import Page
from synapse.services.pagination import paginate

logger = logging.getLogger(__name__)

_WITH_AUTHOR = selectinload(Announcement.author)


class AnnouncementService:

    async def create(
        self,
        db: AsyncSession,
        payload: AnnouncementCreate,
        author: User,
    ) -> AnnouncementResponse:
        announcement = Announcement(**payload.model_dump(), author_id=author.id)
        db.add(announcement)
        await db.flush()
        logger.info("Announcement %s posted by %s", announcement.id, author.id)
        return await self.get(db, announcement.id)

    async def list_announcements(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        search: Optional[str] = None,
        author_id: Optional[uuid.UUID] = None,
    ) -> Page[AnnouncementResponse]:
        query = select(Announcement)
        if search:
            query = query.where(
                or_(
                    Announcement.title.icontains(search, autoescape=True),
                    Announcement.content.icontains(search, autoescape=True),
                )
            )
        if author_id is not None:
            query = query.where(Announcement.author_id == author_id)
        query = query.order_by(Announcement.created_at.desc(), Announcement.id)
        return await paginate(
            db, query, page=page, size=size,
            item_schema=AnnouncementResponse, options=[_WITH_AUTHOR],
        )

    async def list_by_author(self, db: AsyncSession, author_id: uuid.UUID) -> List[AnnouncementResponse]:
        result = await db.execute(
            select(Announcement)
            .where(Announcement.author_id == author_id)
            .options(_WITH_AUTHOR)
            .order_by(Announcement.created_at.desc(), Announcement.id)
        )
        return [AnnouncementResponse.model_validate(a) for a in result.scalars().all()]

    async def get(self, db: AsyncSession, announcement_id: uuid.UUID) -> AnnouncementResponse:
        return AnnouncementResponse.model_validate(await self._get_or_404(db, announcement_id))

    async def update(
        self,
        db: AsyncSession,
        announcement_id: uuid.UUID,
        payload: AnnouncementUpdate,
    ) -> AnnouncementResponse:
        announcement = await self._get_or_404(db, announcement_id)
        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(announcement, field, value)
        await db.flush()
        return await self.get(db, announcement_id)

    async def delete(self, db: AsyncSession, announcement_id: uuid.UUID) -> None:
        announcement = await self._get_or_404(db, announcement_id)
        await db.delete(announcement)
        await db.flush()
        logger.info("Announcement %s deleted", announcement_id)

    async def _get_or_404(self, db: AsyncSession, announcement_id: uuid.UUID) -> Announcement:
        result = await db.execute(
            select(Announcement)
            .where(Announcement.id == announcement_id)
            .options(_WITH_AUTHOR)
            .execution_options(populate_existing=True)
        )
        announcement = result.scalar_one_or_none()
        if announcement is None:
            raise NotFoundError(
                resource="announcement",
                resource_id=str(announcement_id),
                message="Announcement not found",
            )
        return announcement


announcement_service = AnnouncementService()

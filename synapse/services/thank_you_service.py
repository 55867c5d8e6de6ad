"""
Thank-yous between members.

A thank-you may point at the referral that produced the business; when a
referral id is given it must exist.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.exceptions import NotFoundError
from synapse.models.thank_you import ThankYou
from synapse.models.user import User
from synapse.schemas.common import Page
from synapse.schemas.thank_you import ThankYouCreate, ThankYouResponse, ThankYouUpdate
from synapse.services.pagination import paginate
from synapse.services.referral_service import referral_service
from synapse.services.user_service import user_service

logger = logging.getLogger(__name__)

_WITH_RELATIONS = (
    selectinload(ThankYou.from_member),
    selectinload(ThankYou.to_member),
    selectinload(ThankYou.referral),
)


def _involving(member_id: uuid.UUID):
    return or_(ThankYou.from_member_id == member_id, ThankYou.to_member_id == member_id)


class ThankYouService:

    async def create(
        self,
        db: AsyncSession,
        payload: ThankYouCreate,
        sender: User,
    ) -> ThankYouResponse:
        await user_service.get_or_404(db, payload.to_member_id)
        if payload.referral_id is not None:
            await referral_service.get_or_404(db, payload.referral_id)

        thank_you = ThankYou(**payload.model_dump(), from_member_id=sender.id)
        db.add(thank_you)
        await db.flush()
        logger.info("Thank-you %s from %s to %s", thank_you.id, sender.id, payload.to_member_id)
        return await self.get(db, thank_you.id)

    async def list_thank_yous(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        member_id: Optional[uuid.UUID] = None,
    ) -> Page[ThankYouResponse]:
        query = select(ThankYou)
        if member_id is not None:
            query = query.where(_involving(member_id))
        query = query.order_by(ThankYou.created_at.desc(), ThankYou.id)
        return await paginate(
            db, query, page=page, size=size,
            item_schema=ThankYouResponse, options=_WITH_RELATIONS,
        )

    async def list_by_member(self, db: AsyncSession, member_id: uuid.UUID) -> List[ThankYouResponse]:
        result = await db.execute(
            select(ThankYou)
            .where(_involving(member_id))
            .options(*_WITH_RELATIONS)
            .order_by(ThankYou.created_at.desc(), ThankYou.id)
        )
        return [ThankYouResponse.model_validate(t) for t in result.scalars().all()]

    async def get(self, db: AsyncSession, thank_you_id: uuid.UUID) -> ThankYouResponse:
        return ThankYouResponse.model_validate(await self._get_or_404(db, thank_you_id))

    async def update(
        self,
        db: AsyncSession,
        thank_you_id: uuid.UUID,
        payload: ThankYouUpdate,
    ) -> ThankYouResponse:
        thank_you = await self._get_or_404(db, thank_you_id)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("description") is not None:
            thank_you.description = changes["description"]
        if "amount" in changes:
            thank_you.amount = changes["amount"]
        await db.flush()
        return await self.get(db, thank_you_id)

    async def delete(self, db: AsyncSession, thank_you_id: uuid.UUID) -> None:
        thank_you = await self._get_or_404(db, thank_you_id)
        await db.delete(thank_you)
        await db.flush()
        logger.info("Thank-you %s deleted", thank_you_id)

    async def _get_or_404(self, db: AsyncSession, thank_you_id: uuid.UUID) -> ThankYou:
        result = await db.execute(
            select(ThankYou)
            .where(ThankYou.id == thank_you_id)
            .options(*_WITH_RELATIONS)
            .execution_options(populate_existing=True)
        )
        thank_you = result.scalar_one_or_none()
        if thank_you is None:
            raise NotFoundError(resource="thank you", resource_id=str(thank_you_id), message="Thank you not found")
        return thank_you


thank_you_service = ThankYouService()

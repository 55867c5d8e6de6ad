"""
Synapse API — Referral Service
================================

What:  Business referrals between members and their status pipeline.
How:   The sender is the authenticated user; the recipient must be a live
       member. Only the status is editable after creation.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.exceptions import NotFoundError
from synapse.models.referral import Referral, ReferralStatus
from synapse.models.user import User
from synapse.schemas.common import Page
from synapse.schemas.referral import ReferralCreate, ReferralResponse, ReferralUpdate
from synapse.services.pagination import paginate
from synapse.services.user_service import user_service

logger = logging.getLogger(__name__)

_WITH_MEMBERS = (
    selectinload(Referral.from_member),
    selectinload(Referral.to_member),
)
_NEWEST_FIRST = (Referral.created_at.desc(), Referral.id)


class ReferralService:

    async def create(
        self,
        db: AsyncSession,
        payload: ReferralCreate,
        sender: User,
    ) -> ReferralResponse:
        await user_service.get_or_404(db, payload.to_member_id)

        referral = Referral(**payload.model_dump(), from_member_id=sender.id)
        db.add(referral)
        await db.flush()
        logger.info("Referral %s sent from %s to %s", referral.id, sender.id, payload.to_member_id)
        return await self.get(db, referral.id)

    async def list_referrals(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        member_id: Optional[uuid.UUID] = None,
        status: Optional[ReferralStatus] = None,
    ) -> Page[ReferralResponse]:
        query = select(Referral)
        if member_id is not None:
            query = query.where(
                or_(Referral.from_member_id == member_id, Referral.to_member_id == member_id)
            )
        if status is not None:
            query = query.where(Referral.status == status)
        query = query.order_by(*_NEWEST_FIRST)
        return await paginate(
            db, query, page=page, size=size,
            item_schema=ReferralResponse, options=_WITH_MEMBERS,
        )

    async def list_by_member(self, db: AsyncSession, member_id: uuid.UUID) -> List[ReferralResponse]:
        return await self._list_where(
            db, or_(Referral.from_member_id == member_id, Referral.to_member_id == member_id)
        )

    async def list_by_status(self, db: AsyncSession, status: ReferralStatus) -> List[ReferralResponse]:
        return await self._list_where(db, Referral.status == status)

    async def get(self, db: AsyncSession, referral_id: uuid.UUID) -> ReferralResponse:
        return ReferralResponse.model_validate(await self.get_or_404(db, referral_id))

    async def update_status(
        self,
        db: AsyncSession,
        referral_id: uuid.UUID,
        payload: ReferralUpdate,
    ) -> ReferralResponse:
        referral = await self.get_or_404(db, referral_id)
        previous = referral.status
        referral.status = payload.status
        await db.flush()
        logger.info("Referral %s status %s -> %s", referral_id, previous.value, payload.status.value)
        return await self.get(db, referral_id)

    async def delete(self, db: AsyncSession, referral_id: uuid.UUID) -> None:
        referral = await self.get_or_404(db, referral_id)
        await db.delete(referral)
        await db.flush()
        logger.info("Referral %s deleted", referral_id)

    async def get_or_404(self, db: AsyncSession, referral_id: uuid.UUID) -> Referral:
        result = await db.execute(
            select(Referral)
            .where(Referral.id == referral_id)
            .options(*_WITH_MEMBERS)
            .execution_options(populate_existing=True)
        )
        referral = result.scalar_one_or_none()
        if referral is None:
            raise NotFoundError(resource="referral", resource_id=str(referral_id), message="Referral not found")
        return referral

    async def _list_where(self, db: AsyncSession, condition) -> List[ReferralResponse]:
        result = await db.execute(
            select(Referral).where(condition).options(*_WITH_MEMBERS).order_by(*_NEWEST_FIRST)
        )
        return [ReferralResponse.model_validate(r) for r in result.scalars().all()]


referral_service = ReferralService()

"""
Synapse API — Membership Payment Service
==========================================

What:  Membership fees: scheduling, settlement and overdue reporting.
Who:   /api/membership-payments routes (writes are admin-only there).

Ordering:
    list / by status / overdue → due date ascending (what is due next first)
    by member                  → due date descending (latest first)
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.database import utcnow
from synapse.exceptions import NotFoundError
from synapse.models.membership_payment import MembershipPayment, PaymentStatus
from synapse.schemas.common import Page
from synapse.schemas.membership_payment import (
    MembershipPaymentCreate,
    MembershipPaymentResponse,
    MembershipPaymentUpdate,
)
from synapse.services.pagination import paginate
from synapse.services.user_service import user_service

logger = logging.getLogger(__name__)

_WITH_MEMBER = selectinload(MembershipPayment.member)
_DUE_FIRST = (MembershipPayment.due_date.asc(), MembershipPayment.id)
_DUE_LAST = (MembershipPayment.due_date.desc(), MembershipPayment.id)


class MembershipPaymentService:

    async def create(self, db: AsyncSession, payload: MembershipPaymentCreate) -> MembershipPaymentResponse:
        await user_service.get_or_404(db, payload.member_id)

        payment = MembershipPayment(
            member_id=payload.member_id,
            due_date=payload.due_date,
            amount=payload.amount,
        )
        db.add(payment)
        await db.flush()
        logger.info("Payment %s of %s scheduled for member %s", payment.id, payment.amount, payment.member_id)
        return await self.get(db, payment.id)

    async def list_payments(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        member_id: Optional[uuid.UUID] = None,
        status: Optional[PaymentStatus] = None,
    ) -> Page[MembershipPaymentResponse]:
        query = select(MembershipPayment)
        if member_id is not None:
            query = query.where(MembershipPayment.member_id == member_id)
        if status is not None:
            query = query.where(MembershipPayment.status == status)
        query = query.order_by(*_DUE_FIRST)
        return await paginate(
            db, query, page=page, size=size,
            item_schema=MembershipPaymentResponse, options=[_WITH_MEMBER],
        )

    async def list_by_member(self, db: AsyncSession, member_id: uuid.UUID) -> List[MembershipPaymentResponse]:
        return await self._list_where(db, MembershipPayment.member_id == member_id, _DUE_LAST)

    async def list_by_status(self, db: AsyncSession, status: PaymentStatus) -> List[MembershipPaymentResponse]:
        return await self._list_where(db, MembershipPayment.status == status, _DUE_FIRST)

    async def list_overdue(self, db: AsyncSession) -> List[MembershipPaymentResponse]:
        """PENDING payments already past their due date, plus anything marked OVERDUE."""
        condition = or_(
            and_(
                MembershipPayment.status == PaymentStatus.PENDING,
                MembershipPayment.due_date < utcnow(),
            ),
            MembershipPayment.status == PaymentStatus.OVERDUE,
        )
        return await self._list_where(db, condition, _DUE_FIRST)

    async def get(self, db: AsyncSession, payment_id: uuid.UUID) -> MembershipPaymentResponse:
        return MembershipPaymentResponse.model_validate(await self._get_or_404(db, payment_id))

    async def mark_as_paid(self, db: AsyncSession, payment_id: uuid.UUID) -> MembershipPaymentResponse:
        payment = await self._get_or_404(db, payment_id)
        payment.status = PaymentStatus.PAID
        payment.paid_at = utcnow()
        await db.flush()
        logger.info("Payment %s marked as paid", payment_id)
        return await self.get(db, payment_id)

    async def update(
        self,
        db: AsyncSession,
        payment_id: uuid.UUID,
        payload: MembershipPaymentUpdate,
    ) -> MembershipPaymentResponse:
        payment = await self._get_or_404(db, payment_id)
        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(payment, field, value)
        await db.flush()
        return await self.get(db, payment_id)

    async def delete(self, db: AsyncSession, payment_id: uuid.UUID) -> None:
        payment = await self._get_or_404(db, payment_id)
        await db.delete(payment)
        await db.flush()
        logger.info("Payment %s deleted", payment_id)

    async def _get_or_404(self, db: AsyncSession, payment_id: uuid.UUID) -> MembershipPayment:
        result = await db.execute(
            select(MembershipPayment)
            .where(MembershipPayment.id == payment_id)
            .options(_WITH_MEMBER)
            .execution_options(populate_existing=True)
        )
        payment = result.scalar_one_or_none()
        if payment is None:
            raise NotFoundError(resource="payment", resource_id=str(payment_id), message="Payment not found")
        return payment

    async def _list_where(self, db: AsyncSession, condition, order_by) -> List[MembershipPaymentResponse]:
        result = await db.execute(
            select(MembershipPayment).where(condition).options(_WITH_MEMBER).order_by(*order_by)
        )
        return [MembershipPaymentResponse.model_validate(p) for p in result.scalars().all()]


membership_payment_service = MembershipPaymentService()

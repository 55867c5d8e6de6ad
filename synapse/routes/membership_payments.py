"""
Synapse API — Membership Payment Routes
=========================================

What:  Membership fees under /api/membership-payments.
Who:   Any member may read; creating, settling, editing and deleting
       payments is restricted to admins.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user, require_admin
from synapse.models.membership_payment import PaymentStatus
from synapse.schemas.common import ErrorResponse, Page
from synapse.schemas.membership_payment import (
    MembershipPaymentCreate,
    MembershipPaymentResponse,
    MembershipPaymentUpdate,
)
from synapse.services.membership_payment_service import membership_payment_service

router = APIRouter(prefix="/api/membership-payments", tags=["Membership payments"])

_NOT_FOUND = {404: {"description": "Payment not found", "model": ErrorResponse}}
_READ = [Depends(get_current_user)]
_WRITE = [Depends(require_admin)]


@router.post(
    "",
    response_model=MembershipPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=_WRITE,
)
async def create_payment(
    payload: MembershipPaymentCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MembershipPaymentResponse:
    return await membership_payment_service.create(db, payload)


@router.get("", response_model=Page[MembershipPaymentResponse], dependencies=_READ)
async def list_payments(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    member_id: Optional[UUID] = Query(default=None, alias="memberId"),
    payment_status: Optional[PaymentStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db_session),
) -> Page[MembershipPaymentResponse]:
    return await membership_payment_service.list_payments(
        db, page=page, size=size, member_id=member_id, status=payment_status
    )


@router.get("/member/{member_id}", response_model=List[MembershipPaymentResponse], dependencies=_READ)
async def list_payments_by_member(
    member_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[MembershipPaymentResponse]:
    return await membership_payment_service.list_by_member(db, member_id)


@router.get("/status/{payment_status}", response_model=List[MembershipPaymentResponse], dependencies=_READ)
async def list_payments_by_status(
    payment_status: PaymentStatus,
    db: AsyncSession = Depends(get_db_session),
) -> List[MembershipPaymentResponse]:
    return await membership_payment_service.list_by_status(db, payment_status)


@router.get("/overdue/list", response_model=List[MembershipPaymentResponse], dependencies=_READ)
async def list_overdue_payments(
    db: AsyncSession = Depends(get_db_session),
) -> List[MembershipPaymentResponse]:
    return await membership_payment_service.list_overdue(db)


@router.get("/{payment_id}", response_model=MembershipPaymentResponse, responses=_NOT_FOUND, dependencies=_READ)
async def get_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> MembershipPaymentResponse:
    return await membership_payment_service.get(db, payment_id)


@router.post(
    "/{payment_id}/mark-as-paid",
    response_model=MembershipPaymentResponse,
    responses=_NOT_FOUND,
    dependencies=_WRITE,
)
async def mark_payment_as_paid(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> MembershipPaymentResponse:
    return await membership_payment_service.mark_as_paid(db, payment_id)


@router.patch("/{payment_id}", response_model=MembershipPaymentResponse, responses=_NOT_FOUND, dependencies=_WRITE)
async def update_payment(
    payment_id: UUID,
    payload: MembershipPaymentUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MembershipPaymentResponse:
    return await membership_payment_service.update(db, payment_id, payload)


@router.delete(
    "/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
    dependencies=_WRITE,
)
async def delete_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await membership_payment_service.delete(db, payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

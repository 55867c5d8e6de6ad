"""Referral routes under /api/referrals (token required)."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user
from synapse.models.referral import ReferralStatus
from synapse.models.user import User
from synapse.schemas.common import ErrorResponse, Page
from synapse.schemas.referral import ReferralCreate, ReferralResponse, ReferralUpdate
from synapse.services.referral_service import referral_service

router = APIRouter(
    prefix="/api/referrals",
    tags=["Referrals"],
    dependencies=[Depends(get_current_user)],
)

_NOT_FOUND = {404: {"description": "Referral not found", "model": ErrorResponse}}


@router.post("", response_model=ReferralResponse, status_code=status.HTTP_201_CREATED)
async def create_referral(
    payload: ReferralCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ReferralResponse:
    return await referral_service.create(db, payload, sender=current_user)


@router.get("", response_model=Page[ReferralResponse])
async def list_referrals(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    member_id: Optional[UUID] = Query(default=None, alias="memberId"),
    referral_status: Optional[ReferralStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db_session),
) -> Page[ReferralResponse]:
    return await referral_service.list_referrals(
        db, page=page, size=size, member_id=member_id, status=referral_status
    )


@router.get("/member/{member_id}", response_model=List[ReferralResponse])
async def list_referrals_by_member(
    member_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[ReferralResponse]:
    return await referral_service.list_by_member(db, member_id)


@router.get("/status/{referral_status}", response_model=List[ReferralResponse])
async def list_referrals_by_status(
    referral_status: ReferralStatus,
    db: AsyncSession = Depends(get_db_session),
) -> List[ReferralResponse]:
    return await referral_service.list_by_status(db, referral_status)


@router.get("/{referral_id}", response_model=ReferralResponse, responses=_NOT_FOUND)
async def get_referral(
    referral_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ReferralResponse:
    return await referral_service.get(db, referral_id)


@router.patch("/{referral_id}", response_model=ReferralResponse, responses=_NOT_FOUND)
async def update_referral_status(
    referral_id: UUID,
    payload: ReferralUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ReferralResponse:
    return await referral_service.update_status(db, referral_id, payload)


@router.delete("/{referral_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_referral(
    referral_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await referral_service.delete(db, referral_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Thank-you routes under /api/thank-you (token required)."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user
from synapse.models.user import User
from synapse.schemas.common import ErrorResponse, Page
from synapse.schemas.thank_you import ThankYouCreate, ThankYouResponse, ThankYouUpdate
from synapse.services.thank_you_service import thank_you_service

router = APIRouter(
    prefix="/api/thank-you",
    tags=["Thank you"],
    dependencies=[Depends(get_current_user)],
)

_NOT_FOUND = {404: {"description": "Thank you not found", "model": ErrorResponse}}


@router.post("", response_model=ThankYouResponse, status_code=status.HTTP_201_CREATED)
async def create_thank_you(
    payload: ThankYouCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ThankYouResponse:
    return await thank_you_service.create(db, payload, sender=current_user)


@router.get("", response_model=Page[ThankYouResponse])
async def list_thank_yous(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    member_id: Optional[UUID] = Query(default=None, alias="memberId"),
    db: AsyncSession = Depends(get_db_session),
) -> Page[ThankYouResponse]:
    return await thank_you_service.list_thank_yous(db, page=page, size=size, member_id=member_id)


@router.get("/member/{member_id}", response_model=List[ThankYouResponse])
async def list_thank_yous_by_member(
    member_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[ThankYouResponse]:
    return await thank_you_service.list_by_member(db, member_id)


@router.get("/{thank_you_id}", response_model=ThankYouResponse, responses=_NOT_FOUND)
async def get_thank_you(
    thank_you_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ThankYouResponse:
    return await thank_you_service.get(db, thank_you_id)


@router.patch("/{thank_you_id}", response_model=ThankYouResponse, responses=_NOT_FOUND)
async def update_thank_you(
    thank_you_id: UUID,
    payload: ThankYouUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ThankYouResponse:
    return await thank_you_service.update(db, thank_you_id, payload)


@router.delete("/{thank_you_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_thank_you(
    thank_you_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await thank_you_service.delete(db, thank_you_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""One-on-one meeting routes under /api/one-on-one-meetings (token required)."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user
from synapse.models.user import User
from synapse.schemas.common import ErrorResponse, Page
from synapse.schemas.one_on_one import (
    OneOnOneMeetingCreate,
    OneOnOneMeetingResponse,
    OneOnOneMeetingUpdate,
)
from synapse.services.one_on_one_service import one_on_one_service

router = APIRouter(
    prefix="/api/one-on-one-meetings",
    tags=["One-on-one meetings"],
    dependencies=[Depends(get_current_user)],
)

_NOT_FOUND = {404: {"description": "One-on-one meeting not found", "model": ErrorResponse}}


@router.post(
    "",
    response_model=OneOnOneMeetingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Cannot meet with yourself", "model": ErrorResponse},
        404: {"description": "Member not found", "model": ErrorResponse},
    },
)
async def create_one_on_one(
    payload: OneOnOneMeetingCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> OneOnOneMeetingResponse:
    return await one_on_one_service.create(db, payload, organizer=current_user)


@router.get("", response_model=Page[OneOnOneMeetingResponse])
async def list_one_on_ones(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    member_id: Optional[UUID] = Query(default=None, alias="memberId"),
    date_from: Optional[datetime] = Query(default=None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(default=None, alias="dateTo"),
    db: AsyncSession = Depends(get_db_session),
) -> Page[OneOnOneMeetingResponse]:
    return await one_on_one_service.list_meetings(
        db, page=page, size=size, member_id=member_id, date_from=date_from, date_to=date_to
    )


@router.get("/member/{member_id}", response_model=List[OneOnOneMeetingResponse])
async def list_one_on_ones_by_member(
    member_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[OneOnOneMeetingResponse]:
    return await one_on_one_service.list_by_member(db, member_id)


@router.get("/{meeting_id}", response_model=OneOnOneMeetingResponse, responses=_NOT_FOUND)
async def get_one_on_one(
    meeting_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> OneOnOneMeetingResponse:
    return await one_on_one_service.get(db, meeting_id)


@router.patch("/{meeting_id}", response_model=OneOnOneMeetingResponse, responses=_NOT_FOUND)
async def update_one_on_one(
    meeting_id: UUID,
    payload: OneOnOneMeetingUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> OneOnOneMeetingResponse:
    return await one_on_one_service.update(db, meeting_id, payload)


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_one_on_one(
    meeting_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await one_on_one_service.delete(db, meeting_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

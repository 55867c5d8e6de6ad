"""
Synapse API — Meeting Routes
==============================

What:  Group meetings and check-in under /api/meetings (token required).

    POST   /api/meetings                                   schedule
    GET    /api/meetings                                   list (search, date range)
    GET    /api/meetings/{id}                              detail with attendances
    GET    /api/meetings/{id}/attendees                    attendance list
    POST   /api/meetings/{id}/attendance                   check in the caller
    DELETE /api/meetings/{id}/attendance/{attendanceId}    remove a check-in
    PATCH  /api/meetings/{id}                              reschedule / rename
    DELETE /api/meetings/{id}                              delete with attendances
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user
from synapse.models.user import User
from synapse.schemas.common import ErrorResponse, Page
from synapse.schemas.meeting import (
    AttendanceResponse,
    MeetingCreate,
    MeetingResponse,
    MeetingUpdate,
)
from synapse.services.meeting_service import meeting_service

router = APIRouter(
    prefix="/api/meetings",
    tags=["Meetings"],
    dependencies=[Depends(get_current_user)],
)

_NOT_FOUND = {404: {"description": "Meeting not found", "model": ErrorResponse}}


@router.post("", response_model=MeetingResponse, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    payload: MeetingCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MeetingResponse:
    return await meeting_service.create(db, payload)


@router.get("", response_model=Page[MeetingResponse])
async def list_meetings(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    search: Optional[str] = Query(default=None, description="Substring of the title"),
    date_from: Optional[datetime] = Query(default=None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(default=None, alias="dateTo"),
    db: AsyncSession = Depends(get_db_session),
) -> Page[MeetingResponse]:
    return await meeting_service.list_meetings(
        db, page=page, size=size, search=search, date_from=date_from, date_to=date_to
    )


@router.get("/{meeting_id}", response_model=MeetingResponse, responses=_NOT_FOUND)
async def get_meeting(
    meeting_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> MeetingResponse:
    return await meeting_service.get(db, meeting_id)


@router.get("/{meeting_id}/attendees", response_model=List[AttendanceResponse], responses=_NOT_FOUND)
async def list_attendees(
    meeting_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[AttendanceResponse]:
    return await meeting_service.list_attendees(db, meeting_id)


@router.post(
    "/{meeting_id}/attendance",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_NOT_FOUND,
    summary="Check the caller in to the meeting",
)
async def add_attendance(
    meeting_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> AttendanceResponse:
    return await meeting_service.add_attendance(db, meeting_id, current_user)


@router.delete(
    "/{meeting_id}/attendance/{attendance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Attendance record not found", "model": ErrorResponse}},
)
async def remove_attendance(
    meeting_id: UUID,
    attendance_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await meeting_service.remove_attendance(db, meeting_id, attendance_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{meeting_id}", response_model=MeetingResponse, responses=_NOT_FOUND)
async def update_meeting(
    meeting_id: UUID,
    payload: MeetingUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MeetingResponse:
    return await meeting_service.update(db, meeting_id, payload)


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_meeting(
    meeting_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await meeting_service.delete(db, meeting_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

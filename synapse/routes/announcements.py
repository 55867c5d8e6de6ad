"""Announcement routes. Every endpoint requires a bearer token."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user
from synapse.models.user import User
from synapse.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementResponse,
    AnnouncementUpdate,
)
from synapse.schemas.common import ErrorResponse, Page
from synapse.services.announcement_service import announcement_service

router = APIRouter(
    prefix="/api/announcements",
    tags=["Announcements"],
    dependencies=[Depends(get_current_user)],
)

_NOT_FOUND = {404: {"description": "Announcement not found", "model": ErrorResponse}}


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> AnnouncementResponse:
    return await announcement_service.create(db, payload, author=current_user)


@router.get("", response_model=Page[AnnouncementResponse])
async def list_announcements(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    search: Optional[str] = Query(default=None, description="Substring of title or content"),
    author_id: Optional[UUID] = Query(default=None, alias="authorId"),
    db: AsyncSession = Depends(get_db_session),
) -> Page[AnnouncementResponse]:
    return await announcement_service.list_announcements(
        db, page=page, size=size, search=search, author_id=author_id
    )


@router.get("/author/{author_id}", response_model=List[AnnouncementResponse])
async def list_announcements_by_author(
    author_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[AnnouncementResponse]:
    return await announcement_service.list_by_author(db, author_id)


@router.get("/{announcement_id}", response_model=AnnouncementResponse, responses=_NOT_FOUND)
async def get_announcement(
    announcement_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> AnnouncementResponse:
    return await announcement_service.get(db, announcement_id)


@router.patch("/{announcement_id}", response_model=AnnouncementResponse, responses=_NOT_FOUND)
async def update_announcement(
    announcement_id: UUID,
    payload: AnnouncementUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> AnnouncementResponse:
    return await announcement_service.update(db, announcement_id, payload)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_announcement(
    announcement_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await announcement_service.delete(db, announcement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

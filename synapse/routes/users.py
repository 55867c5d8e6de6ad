"""
Synapse API — User Routes
===========================

What:  Member management under /api/users.

Access:
    POST   /api/users           admin
    GET    /api/users           authenticated
    GET    /api/users/{id}      authenticated
    PATCH  /api/users/{id}      self or admin (role/status: admin only)
    DELETE /api/users/{id}      admin (soft delete)
    POST   /api/users/emails    authenticated
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user, require_admin
from synapse.models.user import User
from synapse.schemas.common import ErrorResponse, Page
from synapse.schemas.user import (
    DeleteUserResponse,
    UserCreate,
    UserEmailsResponse,
    UserResponse,
    UserUpdate,
)
from synapse.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already in use", "model": ErrorResponse}},
    summary="Create a member",
)
async def create_user(
    payload: UserCreate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.create(db, payload)


@router.get("", response_model=Page[UserResponse], summary="List members")
async def list_users(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    search: Optional[str] = Query(default=None, description="Substring of name or email"),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Page[UserResponse]:
    return await user_service.list_users(db, page=page, size=size, search=search)


@router.post(
    "/emails",
    response_model=UserEmailsResponse,
    responses={404: {"description": "One or more users not found", "model": ErrorResponse}},
    summary="Resolve user ids to email addresses",
)
async def get_user_emails(
    user_ids: List[UUID] = Body(...),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserEmailsResponse:
    return await user_service.get_emails(db, user_ids)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
async def get_user(
    user_id: UUID,
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        403: {"description": "Not allowed to change this user", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        409: {"description": "Email already in use", "model": ErrorResponse},
    },
)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.update_user(db, user_id, payload, current_user)


@router.delete("/{user_id}", response_model=DeleteUserResponse)
async def delete_user(
    user_id: UUID,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteUserResponse:
    return await user_service.delete_user(db, user_id)

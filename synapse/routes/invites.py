"""
Synapse API — Invite Routes
=============================

What:  Invite listing (authenticated) and the public token endpoints the
       registration page calls.

    GET    /api/invites                     authenticated
    GET    /api/invites/token/{token}       public: validate a link
    POST   /api/invites/{token}/complete    public: register with the invite
    DELETE /api/invites/{id}                authenticated
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user
from synapse.models.invite import InviteStatus
from synapse.models.user import User
from synapse.schemas.common import ErrorResponse, Page
from synapse.schemas.invite import InviteResponse
from synapse.schemas.user import UserCreate
from synapse.services.invite_service import invite_service

router = APIRouter(prefix="/api/invites", tags=["Invites"])

_TOKEN_ERRORS = {
    400: {"description": "Invite already used or expired", "model": ErrorResponse},
    404: {"description": "Invite not found", "model": ErrorResponse},
}


@router.get("", response_model=Page[InviteResponse], summary="List invites")
async def list_invites(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    invite_status: Optional[InviteStatus] = Query(default=None, alias="status"),
    email: Optional[str] = Query(default=None, description="Substring of the invited email"),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Page[InviteResponse]:
    return await invite_service.list_invites(
        db, page=page, size=size, status=invite_status, email=email
    )


@router.get(
    "/token/{token}",
    response_model=InviteResponse,
    responses=_TOKEN_ERRORS,
    summary="Validate an invite token",
)
async def get_invite_by_token(
    token: str,
    db: AsyncSession = Depends(get_db_session),
) -> InviteResponse:
    return await invite_service.get_by_token(db, token)


@router.post(
    "/{token}/complete",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_TOKEN_ERRORS, 409: {"description": "Email already in use", "model": ErrorResponse}},
    summary="Register a member through an invite",
)
async def complete_invite(
    token: str,
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> InviteResponse:
    return await invite_service.complete_invite(db, token, payload)


@router.delete("/{invite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invite(
    invite_id: UUID,
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await invite_service.delete_invite(db, invite_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

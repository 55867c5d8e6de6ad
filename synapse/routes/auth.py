"""
Synapse API — Authentication Routes
=====================================

What:  POST /api/auth/login, POST /api/auth/refresh-token, GET /api/auth/me.
How:   Thin handlers over AuthService; tokens are returned in the body as
       {accessToken, refreshToken}.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user
from synapse.models.user import User
from synapse.schemas.auth import LoginRequest, RefreshTokenRequest, TokenPair
from synapse.schemas.common import ErrorResponse
from synapse.schemas.user import UserResponse
from synapse.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=TokenPair,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Exchange email and password for a token pair",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenPair:
    return await auth_service.login(db, payload)


@router.post(
    "/refresh-token",
    response_model=TokenPair,
    responses={401: {"description": "Invalid refresh token", "model": ErrorResponse}},
    summary="Exchange a refresh token for a new token pair",
)
async def refresh_token(
    payload: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenPair:
    return await auth_service.refresh(db, payload.refresh_token)


@router.get("/me", response_model=UserResponse, summary="The authenticated user")
async def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)

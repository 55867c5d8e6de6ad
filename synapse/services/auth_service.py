"""
Synapse API — Authentication Service
======================================

What:  Credential login, refresh-token rotation and bearer-token resolution.
How:   Passwords are checked with bcrypt; tokens are HS256 JWTs from
       synapse.security. A user must be live (not soft-deleted) and ACTIVE
       to log in, refresh or use an access token.
Who:   /api/auth routes and the get_current_user dependency.

Error messages are deliberately uniform: every login failure is
"Invalid credentials" and every refresh failure is "Invalid refresh token",
so callers cannot discover which emails exist.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from synapse.exceptions import AuthenticationError
from synapse.models.user import User
from synapse.schemas.auth import LoginRequest, TokenPair
from synapse.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    create_token_pair,
    decode_token,
    verify_password,
)
from synapse.services.user_service import user_service

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid refresh token"
INVALID_ACCESS_TOKEN = "Invalid or expired token"


class AuthService:

    async def login(self, db: AsyncSession, payload: LoginRequest) -> TokenPair:
        user = await user_service.find_by_email(db, payload.email)
        if user is None or not user.is_active:
            logger.info("Login rejected for %s: unknown or inactive account", payload.email)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        if not verify_password(payload.password, user.password_hash):
            logger.info("Login rejected for %s: bad password", payload.email)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        logger.info("User %s logged in", user.id)
        return TokenPair(**create_token_pair(str(user.id), user.email))

    async def refresh(self, db: AsyncSession, refresh_token: str) -> TokenPair:
        """Exchanges a valid refresh token for a brand new token pair."""
        user = await self._user_from_token(db, refresh_token, REFRESH_TOKEN)
        if user is None:
            raise AuthenticationError(message=INVALID_REFRESH_TOKEN)
        return TokenPair(**create_token_pair(str(user.id), user.email))

    async def authenticate(self, db: AsyncSession, access_token: str) -> User:
        """
        Resolves an access token to its user.

        Raises:
            AuthenticationError: bad signature, expired, wrong token type,
                                 or the user is gone / inactive
        """
        user = await self._user_from_token(db, access_token, ACCESS_TOKEN)
        if user is None:
            raise AuthenticationError(message=INVALID_ACCESS_TOKEN)
        return user

    async def _user_from_token(
        self,
        db: AsyncSession,
        token: str,
        token_type: str,
    ) -> Optional[User]:
        payload = decode_token(token, expected_type=token_type)
        if payload is None:
            return None

        try:
            user_id = uuid.UUID(str(payload["sub"]))
        except ValueError:
            logger.warning("Token subject is not a UUID: %r", payload.get("sub"))
            return None

        user = await user_service.find_live(db, user_id)
        if user is None or not user.is_active:
            return None
        return user


auth_service = AuthService()

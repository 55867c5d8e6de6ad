"""
Synapse API — Request Dependencies
====================================

What:  FastAPI dependencies that resolve the authenticated caller.
How:   get_current_user parses `Authorization: Bearer <token>`, validates the
       access token and loads the live, ACTIVE user behind it.
       require_admin builds on it and rejects non-admins with 403.
Who:   Every protected route, via Depends(...).

Failure modes:
    no header / not "Bearer <token>"   → 401 Missing or invalid authorization header
    bad signature / expired / refresh  → 401 Invalid or expired token
    user deleted or INACTIVE           → 401 Invalid or expired token
    authenticated but not ADMIN        → 403
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.exceptions import AuthenticationError, PermissionDeniedError
from synapse.models.user import User
from synapse.security import get_token_from_header
from synapse.services.auth_service import auth_service


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    token = get_token_from_header(authorization)
    if not token:
        raise AuthenticationError(message="Missing or invalid authorization header")
    user = await auth_service.authenticate(db, token)
    # Picked up by the access log
    request.state.user_id = str(user.id)
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise PermissionDeniedError(message="Administrator role required")
    return current_user

"""
Synapse API — Password Hashing & JWT Tokens
=============================================

What:  bcrypt password hashing and HS256 access/refresh token handling.
How:   bcrypt for the hash (cost from PASSWORD_HASH_ROUNDS), PyJWT for signing.
       Both tokens carry a `type` claim so a refresh token can never be
       used as an access token and vice versa.
Who:   AuthService (login/refresh), UserService (create/update),
       the current-user dependency.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from synapse.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


# ── Password Hashing ──────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    """Hashes a plain-text password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=settings.password_hash_rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: Optional[str]) -> bool:
    """
    Checks a password against its stored hash.

    Returns False (never raises) for a missing or malformed hash.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification failed: {e}")
        return False


# ── JWT Tokens ────────────────────────────────────────────────────────────

def _create_token(user_id: str, email: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: str, email: str) -> str:
    return _create_token(
        user_id,
        email,
        ACCESS_TOKEN,
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user_id: str, email: str) -> str:
    return _create_token(
        user_id,
        email,
        REFRESH_TOKEN,
        timedelta(days=settings.refresh_token_expire_days),
    )


def create_token_pair(user_id: str, email: str) -> Dict[str, str]:
    """Issues a fresh access + refresh token for the user."""
    return {
        "access_token": create_access_token(user_id, email),
        "refresh_token": create_refresh_token(user_id, email),
    }


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> Optional[Dict[str, Any]]:
    """
    Decodes and validates a JWT.

    Args:
        token:          Encoded JWT string
        expected_type:  "access" or "refresh"

    Returns:
        The payload when the signature, expiry and type all check out,
        otherwise None.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except ExpiredSignatureError:
        logger.debug(f"{expected_type.capitalize()} token expired")
        return None
    except InvalidTokenError as e:
        logger.warning(f"Invalid {expected_type} token: {e}")
        return None

    if payload.get("type") != expected_type:
        logger.warning(f"Token type mismatch: expected {expected_type}, got {payload.get('type')}")
        return None

    return payload


def get_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """Extracts the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]

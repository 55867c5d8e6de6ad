"""
Synapse API — User Schemas
============================

What:  Request/response models for /api/users and invite completion.

Password policy (create and update):
    8..72 characters (72 is the bcrypt input limit), at least one lowercase
    letter, one uppercase letter, one digit and one of @$!%*?&, and nothing
    outside letters, digits and those specials.
"""

import re
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from synapse.models.user import UserRole, UserStatus
from synapse.schemas.common import CamelModel

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")
PASSWORD_RULES = (
    "Password must contain at least one uppercase letter, one lowercase letter, "
    "one number and one special character (@$!%*?&)"
)


def validate_password_strength(value: Optional[str]) -> Optional[str]:
    if value is not None and not PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_RULES)
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(CamelModel):
    """
    What:  Payload for POST /api/users and POST /api/invites/{token}/complete.
    Who:   Admin creating a member, or an invitee finishing registration.
    """
    name: str = Field(min_length=3, max_length=255)
    email: EmailStr
    company: Optional[str] = Field(default=None, max_length=255)
    password: str = Field(min_length=8, max_length=72)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return validate_password_strength(v)


class UserUpdate(CamelModel):
    """
    What:  Partial update for PATCH /api/users/{id}.

    Only fields present in the request body are applied. role/status changes
    are admin-only; the service enforces that.
    """
    name: Optional[str] = Field(default=None, min_length=3, max_length=255)
    email: Optional[EmailStr] = None
    company: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=8, max_length=72)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return validate_password_strength(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    company: Optional[str] = None
    role: UserRole
    status: UserStatus
    created_at: datetime
    updated_at: Optional[datetime] = None


class DeleteUserResponse(CamelModel):
    message: str
    id: uuid.UUID


class UserEmailsResponse(CamelModel):
    emails: List[str]
    count: int

"""
Synapse API — User SQLAlchemy Model
=====================================

What:  ORM model for the `users` table (members and administrators).
How:   Declarative mapping; Alembic migration 001 creates the table.
Who:   UserService, AuthService, InviteService and every model that embeds a member.

Table Design Rationale:
    - email is unique across live and soft-deleted rows
    - password_hash is nullable: a row without a hash can never log in
    - deleted_at implements soft delete; list/get queries filter on IS NULL
    - role/status are native enums (user_role, user_status) on PostgreSQL
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from synapse.database import Base, utcnow


class UserRole(str, enum.Enum):
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class User(Base):
    """
    A registered member.

    Lifecycle:
        1. Created by an admin (POST /api/users), by invite completion, or
           by the bootstrap admin seed at startup
        2. Updated by the member themself or an admin
        3. Soft-deleted by an admin (deleted_at set, row kept for references)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # bcrypt hash; never serialized
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.MEMBER,
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status"),
        nullable=False,
        default=UserStatus.ACTIVE,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None and self.status == UserStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

"""
Synapse API — User Service
============================

What:  Member management: creation, search, profile updates, soft delete
       and bulk email lookup.
How:   Stateless singleton; every method receives the request's AsyncSession.
       Writes are flushed, never committed (get_db_session owns the commit).
Who:   /api/users routes, InviteService (registration), AuthService and the
       startup admin seed.

Access rules enforced here (not in routes):
    - Only the user themself or an admin may update a profile
    - Only an admin may change role or status
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import utcnow
from synapse.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from synapse.models.user import User, UserRole
from synapse.schemas.common import Page
from synapse.schemas.user import (
    DeleteUserResponse,
    UserCreate,
    UserEmailsResponse,
    UserResponse,
    UserUpdate,
)
from synapse.security import hash_password
from synapse.services.pagination import paginate

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "Email already in use"

# Fields that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"name", "email", "password", "role", "status"}


def _live_users():
    return select(User).where(User.deleted_at.is_(None))


class UserService:
    """
    Business logic layer for users.

    Soft-deleted rows stay in the table (other records reference them) but
    are invisible to every read in this service.
    """

    # ── Lookups ───────────────────────────────────────────────────────────

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """Any row with this email, soft-deleted included (the column is unique)."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_live(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        result = await db.execute(_live_users().where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_or_404(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        user = await self.find_live(db, user_id)
        if user is None:
            raise NotFoundError(
                resource="user",
                resource_id=str(user_id),
                message=f"User with id {user_id} not found",
            )
        return user

    # ── Create ────────────────────────────────────────────────────────────

    async def create_user(
        self,
        db: AsyncSession,
        payload: UserCreate,
        role: UserRole = UserRole.MEMBER,
    ) -> User:
        """
        Inserts a user with a bcrypt-hashed password.

        Raises:
            ConflictError: email already taken (checked up front, and again
                           via the unique constraint for concurrent inserts)
        """
        if await self.find_by_email(db, payload.email) is not None:
            raise ConflictError(message=EMAIL_IN_USE, context={"email": payload.email})

        user = User(
            name=payload.name,
            email=payload.email,
            company=payload.company,
            password_hash=hash_password(payload.password),
            role=role,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("Concurrent insert for %s: %s", payload.email, e.orig)
            raise ConflictError(message=EMAIL_IN_USE, context={"email": payload.email})

        logger.info("User created: %s (%s)", user.id, user.role.value)
        return user

    async def create(self, db: AsyncSession, payload: UserCreate) -> UserResponse:
        user = await self.create_user(db, payload)
        return UserResponse.model_validate(user)

    async def seed_admin(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        name: str,
    ) -> Optional[User]:
        """
        Creates the bootstrap ADMIN unless the email is already registered.

        Returns the new user, or None when nothing was created.
        """
        if await self.find_by_email(db, email) is not None:
            logger.info("Bootstrap admin %s already exists, skipping seed", email)
            return None
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=UserRole.ADMIN,
        )
        db.add(user)
        await db.flush()
        logger.info("Bootstrap admin created: %s", email)
        return user

    # ── Read ──────────────────────────────────────────────────────────────

    async def list_users(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        search: Optional[str] = None,
    ) -> Page[UserResponse]:
        """Live users, newest first; `search` matches name or email (case-insensitive)."""
        query = _live_users()
        if search:
            # autoescape: % and _ typed by the user match literally
            query = query.where(
                or_(
                    User.name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                )
            )
        query = query.order_by(User.created_at.desc(), User.id)
        return await paginate(db, query, page=page, size=size, item_schema=UserResponse)

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> UserResponse:
        return UserResponse.model_validate(await self.get_or_404(db, user_id))

    async def get_emails(self, db: AsyncSession, user_ids: List[uuid.UUID]) -> UserEmailsResponse:
        """
        Resolves a list of user ids to their email addresses.

        Raises:
            ValidationError: empty id list
            NotFoundError:   any id that is not a live user
        """
        if not user_ids:
            raise ValidationError(message="User ids list must not be empty", field="ids")

        wanted = list(dict.fromkeys(user_ids))
        result = await db.execute(_live_users().where(User.id.in_(wanted)))
        found = {user.id: user.email for user in result.scalars().all()}
        if len(found) != len(wanted):
            missing = [str(uid) for uid in wanted if uid not in found]
            raise NotFoundError(
                resource="user",
                message="One or more users not found",
                context={"missing_ids": missing},
            )

        emails = [found[uid] for uid in wanted]
        return UserEmailsResponse(emails=emails, count=len(emails))

    # ── Update / Delete ───────────────────────────────────────────────────

    async def update_user(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        payload: UserUpdate,
        current_user: User,
    ) -> UserResponse:
        """
        Applies a partial update.

        Raises:
            NotFoundError:         user missing or soft-deleted
            PermissionDeniedError: not self/admin, or a non-admin touching role/status
            ConflictError:         new email belongs to another user
        """
        user = await self.get_or_404(db, user_id)

        if not current_user.is_admin and current_user.id != user.id:
            raise PermissionDeniedError(message="You can only update your own profile")

        changes = payload.model_dump(exclude_unset=True)
        changes = {
            key: value
            for key, value in changes.items()
            if value is not None or key not in _REQUIRED_FIELDS
        }

        if ("role" in changes or "status" in changes) and not current_user.is_admin:
            raise PermissionDeniedError(message="Only administrators can change role or status")

        new_email = changes.get("email")
        if new_email and new_email != user.email:
            existing = await self.find_by_email(db, new_email)
            if existing is not None and existing.id != user.id:
                raise ConflictError(message=EMAIL_IN_USE, context={"email": new_email})

        password = changes.pop("password", None)
        if password:
            user.password_hash = hash_password(password)

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("Email conflict updating user %s: %s", user_id, e.orig)
            raise ConflictError(message=EMAIL_IN_USE)

        await db.refresh(user)
        logger.info("User %s updated fields: %s", user_id, sorted(payload.model_fields_set))
        return UserResponse.model_validate(user)

    async def delete_user(self, db: AsyncSession, user_id: uuid.UUID) -> DeleteUserResponse:
        """Soft delete: the row stays, deleted_at is set."""
        user = await self.get_or_404(db, user_id)
        user.deleted_at = utcnow()
        await db.flush()
        logger.info("User %s soft-deleted", user_id)
        return DeleteUserResponse(message=f"User {user_id} deleted successfully", id=user_id)


# Singleton instance, imported by routes and other services
user_service = UserService()

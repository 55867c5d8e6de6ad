"""
Synapse API — Invite Service
==============================

What:  Issues, lists, validates and redeems registration invites.
Who:   ApplicationService (approval issues an invite) and /api/invites routes.

Redemption Flow (POST /api/invites/{token}/complete):
    ┌──────────────┐    ┌──────────────┐    ┌────────────────┐    ┌─────────────┐
    │ Lookup token │───▶│ PENDING and  │───▶│ Email matches  │───▶│ COMPLETED + │
    │   (404)      │    │ not expired  │    │ invite (400)   │    │ create user │
    └──────────────┘    │   (400)      │    └────────────────┘    └─────────────┘
                        └──────────────┘
    Both writes share the request transaction, so a failure in user creation
    (e.g. email already in use) leaves the invite PENDING.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.config import settings
from synapse.database import utcnow
from synapse.exceptions import NotFoundError, ValidationError
from synapse.models.invite import Invite, InviteStatus
from synapse.schemas.common import Page
from synapse.schemas.invite import InviteResponse
from synapse.schemas.user import UserCreate
from synapse.services.invite_mailer import invite_mailer
from synapse.services.pagination import paginate
from synapse.services.user_service import user_service

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class InviteService:

    async def create_invite(
        self,
        db: AsyncSession,
        email: str,
        application_id: Optional[uuid.UUID] = None,
    ) -> Invite:
        """
        Issues a PENDING invite valid for INVITE_TTL_DAYS and mails the link.

        Raises:
            ValidationError: a PENDING invite already exists for the email
        """
        existing = await db.execute(
            select(Invite.id).where(
                Invite.email == email,
                Invite.status == InviteStatus.PENDING,
            )
        )
        if existing.first() is not None:
            raise ValidationError(message="Invite already exists for this email", field="email")

        invite = Invite(
            email=email,
            token=str(uuid.uuid4()),
            expires_at=utcnow() + timedelta(days=settings.invite_ttl_days),
            application_id=application_id,
        )
        db.add(invite)
        await db.flush()
        logger.info("Invite %s created for %s", invite.id, email)

        invite_mailer.send_invite(invite.email, invite.token)
        return invite

    async def list_invites(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        status: Optional[InviteStatus] = None,
        email: Optional[str] = None,
    ) -> Page[InviteResponse]:
        query = select(Invite)
        if status is not None:
            query = query.where(Invite.status == status)
        if email:
            query = query.where(Invite.email.icontains(email, autoescape=True))
        query = query.order_by(Invite.created_at.desc(), Invite.id)
        return await paginate(
            db,
            query,
            page=page,
            size=size,
            item_schema=InviteResponse,
            options=[selectinload(Invite.application)],
        )

    async def _find_valid(self, db: AsyncSession, token: str) -> Invite:
        result = await db.execute(
            select(Invite).where(Invite.token == token).options(selectinload(Invite.application))
        )
        invite = result.scalar_one_or_none()

        if invite is None:
            raise NotFoundError(resource="invite", message="Invite not found")
        if invite.status != InviteStatus.PENDING:
            raise ValidationError(message="Invite already used")
        if _as_utc(invite.expires_at) < utcnow():
            raise ValidationError(message="Invite expired")
        return invite

    async def get_by_token(self, db: AsyncSession, token: str) -> InviteResponse:
        return InviteResponse.model_validate(await self._find_valid(db, token))

    async def complete_invite(
        self,
        db: AsyncSession,
        token: str,
        payload: UserCreate,
    ) -> InviteResponse:
        """
        Redeems an invite: marks it COMPLETED and registers the member.

        Raises:
            NotFoundError:   unknown token
            ValidationError: used, expired, or payload email differs from the invite
            ConflictError:   the email is already registered
        """
        invite = await self._find_valid(db, token)

        if payload.email.lower() != invite.email.lower():
            raise ValidationError(
                message="Email does not match the invite",
                field="email",
            )

        invite.status = InviteStatus.COMPLETED
        await db.flush()
        # Stored email is always the invited address
        registration = payload.model_copy(update={"email": invite.email})
        user = await user_service.create_user(db, registration)

        logger.info("Invite %s completed, member %s registered", invite.id, user.id)
        return InviteResponse.model_validate(invite)

    async def delete_invite(self, db: AsyncSession, invite_id: uuid.UUID) -> None:
        invite = await db.get(Invite, invite_id)
        if invite is None:
            raise NotFoundError(resource="invite", resource_id=str(invite_id), message="Invite not found")
        await db.delete(invite)
        await db.flush()
        logger.info("Invite %s deleted", invite_id)


invite_service = InviteService()

"""
Synapse API — Application Service
===================================

What:  Public membership applications and their admin review.
How:   Approval and rejection only apply to PENDING applications. Approval
       issues an invite in the same transaction, so a failed invite (e.g. a
       pending invite already exists) leaves the application PENDING.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from synapse.exceptions import NotFoundError, ValidationError
from synapse.models.application import Application, ApplicationStatus
from synapse.models.user import User
from synapse.schemas.application import ApplicationCreate, ApplicationResponse
from synapse.schemas.common import Page
from synapse.services.invite_service import invite_service
from synapse.services.pagination import paginate

logger = logging.getLogger(__name__)

EMAIL_REGISTERED = "Email already registered"


class ApplicationService:

    async def create_application(
        self,
        db: AsyncSession,
        payload: ApplicationCreate,
    ) -> ApplicationResponse:
        existing = await db.execute(
            select(Application.id).where(Application.email == payload.email)
        )
        if existing.first() is not None:
            raise ValidationError(message=EMAIL_REGISTERED, field="email")

        application = Application(**payload.model_dump())
        db.add(application)
        try:
            await db.flush()
        except IntegrityError:
            raise ValidationError(message=EMAIL_REGISTERED, field="email")

        logger.info("Application %s submitted by %s", application.id, application.email)
        return await self.get_application(db, application.id)

    async def list_applications(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        search: Optional[str] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> Page[ApplicationResponse]:
        query = select(Application)
        if search:
            query = query.where(
                or_(
                    Application.name.icontains(search, autoescape=True),
                    Application.email.icontains(search, autoescape=True),
                    Application.company.icontains(search, autoescape=True),
                )
            )
        if status is not None:
            query = query.where(Application.status == status)
        query = query.order_by(Application.created_at.desc(), Application.id)
        return await paginate(
            db,
            query,
            page=page,
            size=size,
            item_schema=ApplicationResponse,
            options=[selectinload(Application.reviewer)],
        )

    async def get_application(self, db: AsyncSession, application_id: uuid.UUID) -> ApplicationResponse:
        return ApplicationResponse.model_validate(await self._get_or_404(db, application_id))

    async def approve(
        self,
        db: AsyncSession,
        application_id: uuid.UUID,
        reviewer: User,
    ) -> ApplicationResponse:
        """PENDING → APPROVED, then issue the invite for the applicant's email."""
        application = await self._review(db, application_id, reviewer, ApplicationStatus.APPROVED)
        await invite_service.create_invite(db, application.email, application_id=application.id)
        logger.info("Application %s approved by %s", application_id, reviewer.id)
        return await self.get_application(db, application_id)

    async def reject(
        self,
        db: AsyncSession,
        application_id: uuid.UUID,
        reviewer: User,
    ) -> ApplicationResponse:
        await self._review(db, application_id, reviewer, ApplicationStatus.REJECTED)
        logger.info("Application %s rejected by %s", application_id, reviewer.id)
        return await self.get_application(db, application_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _review(
        self,
        db: AsyncSession,
        application_id: uuid.UUID,
        reviewer: User,
        outcome: ApplicationStatus,
    ) -> Application:
        application = await self._get_or_404(db, application_id)
        if application.status != ApplicationStatus.PENDING:
            verb = "approved" if outcome == ApplicationStatus.APPROVED else "rejected"
            raise ValidationError(message=f"Only pending applications can be {verb}")

        application.status = outcome
        application.reviewed_by_id = reviewer.id
        await db.flush()
        return application

    async def _get_or_404(self, db: AsyncSession, application_id: uuid.UUID) -> Application:
        result = await db.execute(
            select(Application)
            .where(Application.id == application_id)
            .options(selectinload(Application.reviewer))
            .execution_options(populate_existing=True)
        )
        application = result.scalar_one_or_none()
        if application is None:
            raise NotFoundError(
                resource="application",
                resource_id=str(application_id),
                message="Application not found",
            )
        return application


application_service = ApplicationService()

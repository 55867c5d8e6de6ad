"""
Synapse API — Application Routes
==================================

What:  Public membership form plus admin review under /api/applications.
Who:   POST is anonymous (the landing page form); listing needs a token;
       approve/reject need an admin.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.database import get_db_session
from synapse.dependencies import get_current_user, require_admin
from synapse.models.application import ApplicationStatus
from synapse.models.user import User
from synapse.schemas.application import ApplicationCreate, ApplicationResponse
from synapse.schemas.common import ErrorResponse, Page
from synapse.services.application_service import application_service

router = APIRouter(prefix="/api/applications", tags=["Applications"])

_REVIEW_ERRORS = {
    400: {"description": "Application is not pending", "model": ErrorResponse},
    404: {"description": "Application not found", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Submit a membership application",
)
async def create_application(
    payload: ApplicationCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    return await application_service.create_application(db, payload)


@router.get("", response_model=Page[ApplicationResponse], summary="List applications")
async def list_applications(
    page: int = Query(default=1, ge=1),
    size: int = Query(default=10, ge=1, le=100),
    search: Optional[str] = Query(default=None, description="Substring of name, email or company"),
    application_status: Optional[ApplicationStatus] = Query(default=None, alias="status"),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Page[ApplicationResponse]:
    return await application_service.list_applications(
        db, page=page, size=size, search=search, status=application_status
    )


@router.patch(
    "/{application_id}/approve",
    response_model=ApplicationResponse,
    responses=_REVIEW_ERRORS,
    summary="Approve an application and send an invite",
)
async def approve_application(
    application_id: UUID,
    reviewer: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    return await application_service.approve(db, application_id, reviewer)


@router.patch(
    "/{application_id}/reject",
    response_model=ApplicationResponse,
    responses=_REVIEW_ERRORS,
    summary="Reject an application",
)
async def reject_application(
    application_id: UUID,
    reviewer: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    return await application_service.reject(db, application_id, reviewer)

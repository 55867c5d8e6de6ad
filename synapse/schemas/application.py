"""Schemas for the public membership application form and its review."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from synapse.models.application import ApplicationStatus
from synapse.schemas.common import CamelModel, MemberSummary


class ApplicationCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    company: str = Field(min_length=1, max_length=255)
    reason: str = Field(min_length=10, description="Why the applicant wants to join")


class ApplicationResponse(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    company: str
    reason: str
    status: ApplicationStatus
    reviewed_by_id: Optional[uuid.UUID] = None
    reviewer: Optional[MemberSummary] = None
    created_at: datetime

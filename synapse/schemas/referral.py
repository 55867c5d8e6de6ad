"""Referral request/response models."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from synapse.models.referral import ReferralStatus
from synapse.schemas.common import CamelModel, MemberSummary


class ReferralCreate(CamelModel):
    to_member_id: uuid.UUID
    contact_name: str = Field(min_length=3, max_length=255)
    contact_email: Optional[EmailStr] = None
    company: Optional[str] = Field(default=None, max_length=255)
    description: str = Field(min_length=10)


class ReferralUpdate(CamelModel):
    status: ReferralStatus


class ReferralSummary(CamelModel):
    """Referral embedded in a thank-you."""
    id: uuid.UUID
    contact_name: str
    company: Optional[str] = None
    status: ReferralStatus


class ReferralResponse(CamelModel):
    id: uuid.UUID
    from_member_id: uuid.UUID
    from_member: Optional[MemberSummary] = None
    to_member_id: uuid.UUID
    to_member: Optional[MemberSummary] = None
    contact_name: str
    contact_email: Optional[str] = None
    company: Optional[str] = None
    description: str
    status: ReferralStatus
    created_at: datetime
    updated_at: datetime

"""
Thank-you request/response models.

Amounts are accepted as decimals with at most two places and returned as
JSON numbers.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from synapse.schemas.common import CamelModel, MemberSummary
from synapse.schemas.referral import ReferralSummary


class ThankYouCreate(CamelModel):
    to_member_id: uuid.UUID
    description: str = Field(min_length=10)
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    referral_id: Optional[uuid.UUID] = None


class ThankYouUpdate(CamelModel):
    description: Optional[str] = Field(default=None, min_length=10)
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class ThankYouResponse(CamelModel):
    id: uuid.UUID
    from_member_id: uuid.UUID
    from_member: Optional[MemberSummary] = None
    to_member_id: uuid.UUID
    to_member: Optional[MemberSummary] = None
    description: str
    amount: Optional[float] = None
    referral_id: Optional[uuid.UUID] = None
    referral: Optional[ReferralSummary] = None
    created_at: datetime

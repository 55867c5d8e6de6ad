"""Membership payment request/response models."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from synapse.models.membership_payment import PaymentStatus
from synapse.schemas.common import CamelModel, MemberSummary


class MembershipPaymentCreate(CamelModel):
    member_id: uuid.UUID
    due_date: datetime
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class MembershipPaymentUpdate(CamelModel):
    due_date: Optional[datetime] = None
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    status: Optional[PaymentStatus] = None


class MembershipPaymentResponse(CamelModel):
    id: uuid.UUID
    member_id: uuid.UUID
    member: Optional[MemberSummary] = None
    due_date: datetime
    paid_at: Optional[datetime] = None
    amount: float
    status: PaymentStatus
    created_at: datetime

"""
Synapse API — Membership Payment SQLAlchemy Model
===================================================

What:  A membership fee owed by a member, with its due date and settlement.

Status semantics:
    PENDING  → created, not yet paid
    PAID     → settled; paid_at records when
    OVERDUE  → set explicitly by an admin. A PENDING payment past its due
               date is also reported by the overdue listing.
"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synapse.database import Base, utcnow

if TYPE_CHECKING:
    from synapse.models.user import User


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class MembershipPayment(Base):
    __tablename__ = "membership_payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status"),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    member: Mapped["User"] = relationship()

    # The overdue listing filters on (status, due_date)
    __table_args__ = (
        Index("idx_membership_payments_status_due", "status", "due_date"),
    )

    def __repr__(self) -> str:
        return f"<MembershipPayment(id={self.id}, status='{self.status}', due='{self.due_date}')>"

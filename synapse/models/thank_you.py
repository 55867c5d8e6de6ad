"""
Synapse API — Thank You SQLAlchemy Model
==========================================

What:  A recorded "thank you" between members, optionally tied to a referral
       and carrying the closed business amount.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Numeric, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from synapse.database import Base, utcnow

if TYPE_CHECKING:
    from synapse.models.referral import Referral
    from synapse.models.user import User


class ThankYou(Base):
    __tablename__ = "thank_yous"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    from_member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    referral_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("referrals.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

    from_member: Mapped["User"] = relationship(foreign_keys=[from_member_id])
    to_member: Mapped["User"] = relationship(foreign_keys=[to_member_id])
    referral: Mapped[Optional["Referral"]] = relationship()

    def __repr__(self) -> str:
        return f"<ThankYou(id={self.id}, amount={self.amount})>"

"""One-on-one meeting request/response models."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from synapse.schemas.common import CamelModel, MemberSummary


class OneOnOneMeetingCreate(CamelModel):
    # member1 is always the authenticated organizer
    member2_id: uuid.UUID
    date: datetime
    notes: Optional[str] = None


class OneOnOneMeetingUpdate(CamelModel):
    date: Optional[datetime] = None
    notes: Optional[str] = None


class OneOnOneMeetingResponse(CamelModel):
    id: uuid.UUID
    member1_id: uuid.UUID
    member1: Optional[MemberSummary] = None
    member2_id: uuid.UUID
    member2: Optional[MemberSummary] = None
    date: datetime
    notes: Optional[str] = None
    created_at: datetime

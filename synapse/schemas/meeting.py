"""
Synapse API — Meeting Schemas
===============================

What:  Group meeting payloads and the attendance records embedded in them.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from synapse.schemas.common import CamelModel, MemberSummary


class MeetingCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    date: datetime = Field(description="When the meeting takes place (ISO 8601)")


class MeetingUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[datetime] = None


class AttendanceResponse(CamelModel):
    id: uuid.UUID
    meeting_id: uuid.UUID
    member_id: uuid.UUID
    member: Optional[MemberSummary] = None
    checked_in_at: datetime


class MeetingResponse(CamelModel):
    id: uuid.UUID
    title: str
    date: datetime
    attendances: List[AttendanceResponse] = Field(default_factory=list)
    created_at: datetime

"""Announcement request/response models."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from synapse.schemas.common import CamelModel, MemberSummary


class AnnouncementCreate(CamelModel):
    title: str = Field(min_length=5, max_length=255)
    content: str = Field(min_length=10)


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=5, max_length=255)
    content: Optional[str] = Field(default=None, min_length=10)


class AnnouncementResponse(CamelModel):
    id: uuid.UUID
    title: str
    content: str
    author_id: uuid.UUID
    author: Optional[MemberSummary] = None
    created_at: datetime

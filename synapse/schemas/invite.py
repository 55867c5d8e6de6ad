"""Invite response models. Invites are only created by application approval."""

import uuid
from datetime import datetime
from typing import Optional

from synapse.models.application import ApplicationStatus
from synapse.models.invite import InviteStatus
from synapse.schemas.common import CamelModel


class InviteApplication(CamelModel):
    """The application an invite was issued for."""
    id: uuid.UUID
    name: str
    email: str
    company: str
    status: ApplicationStatus
    created_at: datetime


class InviteResponse(CamelModel):
    id: uuid.UUID
    email: str
    token: str
    expires_at: datetime
    status: InviteStatus
    application_id: Optional[uuid.UUID] = None
    application: Optional[InviteApplication] = None
    created_at: datetime

"""
Synapse API — Shared Pydantic Schemas
=======================================

What:  Base model, pagination envelope and small response models used by
       every resource.
How:   CamelModel gives every schema a camelCase wire format (the frontend
       contract) while Python code keeps snake_case attributes. FastAPI
       serializes responses by alias, and `populate_by_name` lets tests and
       services build models with either spelling.
"""

import math
import uuid
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from synapse.models.user import UserRole, UserStatus

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


# ══════════════════════════════════════════════════════════════════════════
# Pagination
# ══════════════════════════════════════════════════════════════════════════


class Page(CamelModel, Generic[T]):
    """
    What:  Offset-pagination envelope returned by every list endpoint.

    totalPages = ceil(total / size), and 0 when there are no rows.
    """
    data: List[T] = Field(description="Items on this page")
    page: int = Field(description="1-based page number")
    size: int = Field(description="Requested page size")
    total: int = Field(description="Total rows matching the filters")
    total_pages: int = Field(description="Number of pages at this size")

    @staticmethod
    def count_pages(total: int, size: int) -> int:
        return math.ceil(total / size) if total else 0


# ══════════════════════════════════════════════════════════════════════════
# Embedded / Utility Models
# ══════════════════════════════════════════════════════════════════════════


class MemberSummary(CamelModel):
    """Public view of a user embedded in other resources (never the hash)."""
    id: uuid.UUID
    name: str
    email: str
    company: Optional[str] = None
    role: UserRole
    status: UserStatus


class ErrorResponse(BaseModel):
    """
    What:  Standard error response format for all API errors.
    Who:   Returned by global exception handlers in main.py.

    Fields:
        error:      Machine-readable code (validation_error, not_found, ...)
        message:    Human-readable description
        details:    Optional context (offending field, validation errors)
        request_id: Correlation ID from X-Request-ID for log lookup
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None)
    request_id: Optional[str] = Field(default=None)


class HealthResponse(BaseModel):
    """
    What:  Health check response for monitoring and orchestration.
    Who:   Returned by GET /health.

    Status logic:
        healthy:    database reachable
        unhealthy:  database unreachable
    """
    status: str = Field(description="Overall status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database status: connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the application started")
    timestamp: datetime = Field(description="Server time of the check (UTC)")

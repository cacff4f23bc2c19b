"""
DevFlow Backend — Shared Schemas (Envelope, Pagination, Health)
=================================================================

What:  The response envelope every action returns, the pagination input
       shared by the list actions, and the compact author/tag shapes that
       appear inside question and answer payloads.
Why:   Actions never raise to their caller. They return either
       `{success: true, data}` or `{success: false, error}` so HTTP routes,
       the outbound fetch handler, and tests all read one shape.
Who:   Every service in `devflow.services` and every route in `devflow.routes`.
"""

import uuid
from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from devflow.config import settings
from devflow.exceptions import ErrorKind

T = TypeVar("T")


# ══════════════════════════════════════════════════════════════════════════
# Response Envelope
# ══════════════════════════════════════════════════════════════════════════


class ActionError(BaseModel):
    """
    Failure payload of the envelope.

    `details` is only present for validation failures: each offending field
    maps to its list of messages, ready for form display.
    """
    kind: ErrorKind = Field(description="Failure category")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, List[str]]] = Field(
        default=None,
        description="Field-keyed validation messages",
    )


class ActionResponse(BaseModel, Generic[T]):
    """
    Tagged result of an action.

    `status` is the HTTP status the result maps to. It travels with the
    object for the route layer but is never serialized.
    """
    success: bool
    data: Optional[T] = None
    error: Optional[ActionError] = None
    status: int = Field(default=200, exclude=True)


# ══════════════════════════════════════════════════════════════════════════
# Pagination
# ══════════════════════════════════════════════════════════════════════════


class PaginatedSearchParams(BaseModel):
    """
    Input shared by every paginated list action.

    Parameters:
        page:       1-based page number
        page_size:  items per page (DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)
        query:      free-text filter, matched case-insensitively
        filter:     named sort order; each entity declares its own set
    """
    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    page_size: int = Field(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page",
    )
    query: Optional[str] = Field(default=None, description="Search text")
    filter: Optional[str] = Field(default=None, description="Sort filter name")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


# ══════════════════════════════════════════════════════════════════════════
# Embedded References
# ══════════════════════════════════════════════════════════════════════════


class AuthorOut(BaseModel):
    id: uuid.UUID
    name: str
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class TagRefOut(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Health
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(BaseModel):
    """
    What:  Service health for load balancers and uptime monitors.
    Who:   Returned by GET /health.
    """
    status: str = Field(description="Overall status: healthy or degraded")
    version: str = Field(description="API version")
    database: str = Field(description="Database connection: connected or disconnected")
    uptime: float = Field(description="Seconds since the process started")
    timestamp: datetime = Field(description="Server time (UTC)")

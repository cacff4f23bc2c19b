"""
DevFlow Backend — Shared Column Definitions
=============================================

Primary key and timestamp columns every table carries, plus the enums
stored in vote and interaction rows.

Why UUID primary keys: identifiers are exposed in URLs and must not be
guessable or sequential. `sqlalchemy.Uuid` maps to native UUID on
PostgreSQL and CHAR(32) on SQLite.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Uuid
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TargetType(str, enum.Enum):
    """What a vote or interaction points at."""

    QUESTION = "question"
    ANSWER = "answer"


class VoteType(str, enum.Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


def enum_column(enum_cls: type[enum.Enum]) -> Enum:
    # Stored as the lowercase value in a VARCHAR so the same migration works
    # on SQLite and PostgreSQL
    return Enum(
        enum_cls,
        native_enum=False,
        length=16,
        values_callable=lambda members: [m.value for m in members],
    )


class IdentifiedMixin:
    """UUID primary key plus created/updated timestamps (UTC)."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

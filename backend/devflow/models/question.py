"""
DevFlow Backend — Question and Answer Models
==============================================

Question counters (views, upvotes, downvotes, answer_count) are
denormalized: they are adjusted in the same transaction as the rows they
summarize (votes, answers) and never recomputed on read.

The question's tag list is not a column here. It is the ordered set of
`tag_questions` rows for the question (see models/tag.py).
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from devflow.database import Base
from devflow.models.common import IdentifiedMixin


def _counter() -> Mapped[int]:
    return mapped_column(Integer, nullable=False, default=0, server_default=text("0"))


class Question(IdentifiedMixin, Base):
    __tablename__ = "questions"

    title: Mapped[str] = mapped_column(String(150), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    views: Mapped[int] = _counter()
    upvotes: Mapped[int] = _counter()
    downvotes: Mapped[int] = _counter()
    answer_count: Mapped[int] = _counter()

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, title='{self.title[:30]}')>"


class Answer(IdentifiedMixin, Base):
    __tablename__ = "answers"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    upvotes: Mapped[int] = _counter()
    downvotes: Mapped[int] = _counter()

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, question_id={self.question_id})>"


# Listing pages sort newest-first by default
Index("idx_questions_created_at", Question.created_at.desc())

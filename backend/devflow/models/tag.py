"""
DevFlow Backend — Tag and TagQuestion Models
==============================================

Tag names are unique case-insensitively: "React" and "react" are the same
tag. `question_count` mirrors the number of `tag_questions` rows pointing
at the tag and is adjusted in the transaction that adds or removes links.
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from devflow.database import Base
from devflow.models.common import IdentifiedMixin


class Tag(IdentifiedMixin, Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    question_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    def __repr__(self) -> str:
        return f"<Tag(name='{self.name}', question_count={self.question_count})>"


class TagQuestion(IdentifiedMixin, Base):
    """Join row linking one tag to one question; `position` keeps tag order."""

    __tablename__ = "tag_questions"

    tag_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("tag_id", "question_id", name="uq_tag_questions_pair"),
    )


Index("uq_tags_name_lower", func.lower(Tag.name), unique=True)

"""
DevFlow Backend — Vote, Collection and Interaction Models
===========================================================

Vote:         one row per (author, target) while a vote is active. The
              target is a question or an answer, so `target_id` has no
              foreign key; `target_type` says which table it points into.
Collection:   a saved-question bookmark, one per (author, question).
Interaction:  append-only activity record (view, upvote, post, ...).

Votes and collections are looked up before they are written; the lookup
indexes below are deliberately non-unique.
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from devflow.database import Base
from devflow.models.common import IdentifiedMixin, TargetType, VoteType, enum_column


class Vote(IdentifiedMixin, Base):
    __tablename__ = "votes"

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    target_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    target_type: Mapped[TargetType] = mapped_column(enum_column(TargetType), nullable=False)
    vote_type: Mapped[VoteType] = mapped_column(enum_column(VoteType), nullable=False)

    def __repr__(self) -> str:
        return f"<Vote({self.vote_type.value} on {self.target_type.value} {self.target_id})>"


class Collection(IdentifiedMixin, Base):
    __tablename__ = "collections"

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )


class Interaction(IdentifiedMixin, Base):
    __tablename__ = "interactions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    action_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    action_type: Mapped[TargetType] = mapped_column(enum_column(TargetType), nullable=False)


Index("idx_votes_author_target", Vote.author_id, Vote.target_id, Vote.target_type)
Index("idx_collections_author_question", Collection.author_id, Collection.question_id)

"""
DevFlow Backend — Vote, Collection & Interaction Schemas
==========================================================

What:  Inputs and outputs of the vote state machine, the save toggle, and
       the activity log.
Who:   `devflow.services.vote_service`, `collection_service`,
       `interaction_service`.
"""

import uuid
from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field

from devflow.models.common import TargetType, VoteType
from devflow.schemas.common import PaginatedSearchParams
from devflow.schemas.question import QuestionOut


# ── Votes ─────────────────────────────────────────────────────────────────

class CreateVoteParams(BaseModel):
    target_id: uuid.UUID
    target_type: TargetType
    vote_type: VoteType


class HasVotedParams(BaseModel):
    target_id: uuid.UUID
    target_type: TargetType


class HasVotedOut(BaseModel):
    has_upvoted: bool = False
    has_downvoted: bool = False


class VoteCountOut(BaseModel):
    """Target counters after a vote has been applied."""
    upvotes: int
    downvotes: int


# ── Collections ───────────────────────────────────────────────────────────

class CollectionBaseParams(BaseModel):
    question_id: uuid.UUID


class SavedOut(BaseModel):
    saved: bool


class SavedQuestionOut(BaseModel):
    id: uuid.UUID
    question: QuestionOut
    created_at: datetime


class SavedQuestionList(BaseModel):
    collection: List[SavedQuestionOut]
    is_next: bool


class GetSavedQuestionsParams(PaginatedSearchParams):
    pass


# ── Interactions ──────────────────────────────────────────────────────────

InteractionAction = Literal[
    "view", "upvote", "downvote", "bookmark", "post", "edit", "delete", "search"
]


class CreateInteractionParams(BaseModel):
    action: InteractionAction
    action_id: uuid.UUID
    action_target: TargetType
    author_id: uuid.UUID = Field(description="Owner of the content acted on")


class InteractionOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    action: str
    action_id: uuid.UUID
    action_type: TargetType
    created_at: datetime

    model_config = {"from_attributes": True}

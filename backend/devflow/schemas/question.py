"""
DevFlow Backend — Question & Answer Schemas
=============================================

What:  Input shapes validated by the Action Guard for question and answer
       actions, and the output shapes those actions return.
Who:   `devflow.services.question_service`, `answer_service`, routes.

Tag input rules:
    1 to 3 tags, each 1 to 15 characters after trimming. Duplicates that
    differ only by case are collapsed, keeping the first spelling, because
    tag names are unique case-insensitively.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from devflow.schemas.common import AuthorOut, PaginatedSearchParams, TagRefOut


# ══════════════════════════════════════════════════════════════════════════
# Input Models
# ══════════════════════════════════════════════════════════════════════════


class AskQuestionParams(BaseModel):
    title: str = Field(min_length=5, max_length=100, description="Question title")
    content: str = Field(min_length=1, description="Question body (markdown)")
    tags: List[str] = Field(min_length=1, max_length=3, description="Tag names")

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: List[str]) -> List[str]:
        seen = set()
        tags = []
        for raw in v:
            name = raw.strip()
            if not name:
                raise ValueError("Tag is required.")
            if len(name) > 15:
                raise ValueError("Tag cannot exceed 15 characters.")
            if name.lower() in seen:
                continue
            seen.add(name.lower())
            tags.append(name)
        return tags


class EditQuestionParams(AskQuestionParams):
    question_id: uuid.UUID


class GetQuestionParams(BaseModel):
    question_id: uuid.UUID


class IncrementViewsParams(BaseModel):
    question_id: uuid.UUID


class CreateAnswerParams(BaseModel):
    question_id: uuid.UUID
    content: str = Field(min_length=100, description="Answer body (markdown)")


class GetAnswersParams(PaginatedSearchParams):
    question_id: uuid.UUID


# ══════════════════════════════════════════════════════════════════════════
# Output Models
# ══════════════════════════════════════════════════════════════════════════


class QuestionOut(BaseModel):
    """Full question with its author and ordered tag list."""
    id: uuid.UUID
    title: str
    content: str
    tags: List[TagRefOut] = Field(default_factory=list)
    author: Optional[AuthorOut] = None
    views: int = 0
    upvotes: int = 0
    downvotes: int = 0
    answer_count: int = 0
    created_at: datetime
    updated_at: datetime


class QuestionList(BaseModel):
    questions: List[QuestionOut]
    is_next: bool


class HotQuestionOut(BaseModel):
    id: uuid.UUID
    title: str

    model_config = {"from_attributes": True}


class ViewsOut(BaseModel):
    views: int


class AnswerOut(BaseModel):
    id: uuid.UUID
    content: str
    question_id: uuid.UUID
    author: Optional[AuthorOut] = None
    upvotes: int = 0
    downvotes: int = 0
    created_at: datetime


class AnswerList(BaseModel):
    answers: List[AnswerOut]
    is_next: bool
    total_answers: int

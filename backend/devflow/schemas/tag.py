"""
DevFlow Backend — Tag & Search Schemas
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from devflow.schemas.common import PaginatedSearchParams
from devflow.schemas.question import QuestionOut


class TagOut(BaseModel):
    id: uuid.UUID
    name: str
    question_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class TagList(BaseModel):
    tags: List[TagOut]
    is_next: bool


class GetTagQuestionsParams(PaginatedSearchParams):
    tag_id: uuid.UUID


class TagQuestionList(BaseModel):
    tag: TagOut
    questions: List[QuestionOut]
    is_next: bool


SearchType = Literal["question", "answer", "user", "tag"]


class GlobalSearchParams(BaseModel):
    query: str = Field(min_length=1, description="Text to search for")
    type: Optional[SearchType] = Field(default=None, description="Restrict to one kind")


class SearchHit(BaseModel):
    """
    One global search result.

    `id` is what a client navigates to: answer hits carry their question's
    id so the link opens the question page.
    """
    title: str
    type: SearchType
    id: uuid.UUID

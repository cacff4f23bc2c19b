"""
DevFlow Backend — Tag Service
===============================

What:  Browse tags, the most used tags, and the questions under one tag.
"""

import logging
from typing import List

from sqlalchemy import asc, desc, select

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import NotFoundError
from devflow.models import Question, Tag, TagQuestion
from devflow.schemas.common import PaginatedSearchParams
from devflow.schemas.tag import GetTagQuestionsParams, TagList, TagOut, TagQuestionList
from devflow.services.guard import ActionContext, server_action
from devflow.services.queries import fetch_page, has_next_page, hydrate_questions, text_filter

logger = logging.getLogger(__name__)

TOP_TAGS_LIMIT = 5

TAG_SORTS = {
    "popular": (desc(Tag.question_count), asc(Tag.name)),
    "recent": (desc(Tag.created_at), desc(Tag.id)),
    "oldest": (asc(Tag.created_at), asc(Tag.id)),
    "name": (asc(Tag.name),),
}


class TagService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action(PaginatedSearchParams)
    async def get_tags(self, ctx: ActionContext) -> TagList:
        params: PaginatedSearchParams = ctx.params
        stmt = select(Tag)
        if params.query:
            stmt = stmt.where(text_filter(params.query, Tag.name))

        order_by = TAG_SORTS.get(params.filter, TAG_SORTS["popular"])
        async with self.store.session() as session:
            tags, total = await fetch_page(session, stmt, params, *order_by)

        return TagList(
            tags=[TagOut.model_validate(t) for t in tags],
            is_next=has_next_page(total, params, len(tags)),
        )

    @server_action()
    async def get_top_tags(self, ctx: ActionContext) -> List[TagOut]:
        async with self.store.session() as session:
            tags = await session.scalars(
                select(Tag).order_by(*TAG_SORTS["popular"]).limit(TOP_TAGS_LIMIT)
            )
            return [TagOut.model_validate(t) for t in tags]

    @server_action(GetTagQuestionsParams)
    async def get_tag_questions(self, ctx: ActionContext) -> TagQuestionList:
        params: GetTagQuestionsParams = ctx.params
        stmt = (
            select(Question)
            .join(TagQuestion, TagQuestion.question_id == Question.id)
            .where(TagQuestion.tag_id == params.tag_id)
        )
        if params.query:
            stmt = stmt.where(text_filter(params.query, Question.title))

        async with self.store.session() as session:
            tag = await session.get(Tag, params.tag_id)
            if tag is None:
                raise NotFoundError("Tag", str(params.tag_id))
            questions, total = await fetch_page(
                session, stmt, params, desc(Question.created_at), desc(Question.id)
            )
            items = await hydrate_questions(session, questions)

        return TagQuestionList(
            tag=TagOut.model_validate(tag),
            questions=items,
            is_next=has_next_page(total, params, len(items)),
        )


tag_service = TagService()

"""
DevFlow Backend — Global Search
=================================

What:  One search box across questions, answers, users and tags.
How:   Without a type filter each kind contributes up to 2 hits; with one,
       only that kind is searched and up to 8 hits come back.

    kind       matched on   hit title                       hit id
    question   title        question title                  question id
    answer     content      "Answers containing <query>"    parent question id
    user       name         user name                       user id
    tag        name         tag name                        tag id
"""

import logging
from typing import List

from sqlalchemy import desc, select

from devflow.database import DocumentStore, store as default_store
from devflow.models import Answer, Question, Tag, User
from devflow.schemas.tag import GlobalSearchParams, SearchHit
from devflow.services.guard import ActionContext, server_action
from devflow.services.queries import text_filter

logger = logging.getLogger(__name__)

HITS_PER_TYPE = 2
HITS_SINGLE_TYPE = 8

SEARCH_TARGETS = {
    "question": (Question, Question.title, Question.created_at),
    "answer": (Answer, Answer.content, Answer.created_at),
    "user": (User, User.name, User.created_at),
    "tag": (Tag, Tag.name, Tag.question_count),
}


def to_hit(kind: str, row, query: str) -> SearchHit:
    if kind == "question":
        return SearchHit(title=row.title, type=kind, id=row.id)
    if kind == "answer":
        return SearchHit(title=f"Answers containing {query}", type=kind, id=row.question_id)
    return SearchHit(title=row.name, type=kind, id=row.id)


class SearchService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action(GlobalSearchParams)
    async def global_search(self, ctx: ActionContext) -> List[SearchHit]:
        params: GlobalSearchParams = ctx.params
        if params.type:
            kinds, limit = [params.type], HITS_SINGLE_TYPE
        else:
            kinds, limit = list(SEARCH_TARGETS), HITS_PER_TYPE

        hits: List[SearchHit] = []
        async with self.store.session() as session:
            for kind in kinds:
                model, column, order_column = SEARCH_TARGETS[kind]
                rows = await session.scalars(
                    select(model)
                    .where(text_filter(params.query, column))
                    .order_by(desc(order_column))
                    .limit(limit)
                )
                hits.extend(to_hit(kind, row, params.query) for row in rows)

        logger.debug("Global search %r (%s): %d hits", params.query, params.type, len(hits))
        return hits


search_service = SearchService()

"""
DevFlow Backend — Collection Service (saved questions)
========================================================

What:  Toggle a question in the caller's collection, check whether it is
       saved, and list the caller's saved questions.
How:   The toggle is two single-row operations (lookup, then insert or
       delete), each committed on its own; it does not open a transaction.

Known gap:
    Two concurrent toggles from the same caller can both see "not saved"
    and insert two rows, or interleave a delete with an insert. Nothing
    here prevents that; the collections table has a lookup index only.
"""

import logging

from sqlalchemy import asc, desc, select

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import NotFoundError
from devflow.models import Collection, Question
from devflow.schemas.interaction import (
    CollectionBaseParams,
    GetSavedQuestionsParams,
    SavedOut,
    SavedQuestionList,
    SavedQuestionOut,
)
from devflow.services.guard import ActionContext, server_action
from devflow.services.queries import fetch_page, hydrate_questions, text_filter

logger = logging.getLogger(__name__)

COLLECTION_SORTS = {
    "mostrecent": (desc(Question.created_at),),
    "oldest": (asc(Question.created_at),),
    "mostvoted": (desc(Question.upvotes),),
    "mostviewed": (desc(Question.views),),
    "mostanswered": (desc(Question.answer_count),),
}


class CollectionService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action(CollectionBaseParams, authorize=True)
    async def toggle_save_question(self, ctx: ActionContext) -> SavedOut:
        question_id = ctx.params.question_id
        async with self.store.session() as session:
            question = await session.get(Question, question_id)
            if question is None:
                raise NotFoundError("Question", str(question_id))

            existing = await session.scalar(
                select(Collection).where(
                    Collection.question_id == question_id,
                    Collection.author_id == ctx.user_id,
                )
            )
            if existing is not None:
                await session.delete(existing)
                await session.commit()
                logger.info("Question %s removed from %s's collection", question_id, ctx.user_id)
                return SavedOut(saved=False)

            session.add(Collection(question_id=question_id, author_id=ctx.user_id))
            await session.commit()

        logger.info("Question %s saved to %s's collection", question_id, ctx.user_id)
        return SavedOut(saved=True)

    @server_action(CollectionBaseParams, authorize=True)
    async def has_saved_question(self, ctx: ActionContext) -> SavedOut:
        async with self.store.session() as session:
            existing = await session.scalar(
                select(Collection.id).where(
                    Collection.question_id == ctx.params.question_id,
                    Collection.author_id == ctx.user_id,
                )
            )
        return SavedOut(saved=existing is not None)

    @server_action(GetSavedQuestionsParams, authorize=True)
    async def get_saved_questions(self, ctx: ActionContext) -> SavedQuestionList:
        params: GetSavedQuestionsParams = ctx.params
        stmt = (
            select(Collection)
            .join(Question, Question.id == Collection.question_id)
            .where(Collection.author_id == ctx.user_id)
        )
        if params.query:
            # title OR content, same as the question list
            stmt = stmt.where(text_filter(params.query, Question.title, Question.content))

        order_by = COLLECTION_SORTS.get(params.filter, COLLECTION_SORTS["mostrecent"])

        async with self.store.session() as session:
            collections, total = await fetch_page(
                session, stmt, params, *order_by, desc(Collection.id)
            )
            questions = (
                await session.scalars(
                    select(Question).where(Question.id.in_([c.question_id for c in collections]))
                )
            ).all()
            hydrated = {q.id: q for q in await hydrate_questions(session, questions)}

        items = [
            SavedQuestionOut(id=c.id, question=hydrated[c.question_id], created_at=c.created_at)
            for c in collections
        ]
        # Compares against page * returned count, not skip + returned count
        is_next = total > params.page * len(items)
        return SavedQuestionList(collection=items, is_next=is_next)


collection_service = CollectionService()

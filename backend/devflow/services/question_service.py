"""
DevFlow Backend — Question Service
====================================

What:  Create, edit, read and list questions; count views; hot list.
Why:   Question create/edit touch four tables (questions, tags,
       tag_questions, and tag counters). They must land together or not at
       all, otherwise tag counts drift from the join rows they summarize.
How:   Every multi-row write runs inside one `store.transaction()`. Tag
       counters are SQL expression updates (`question_count + 1`) so the
       arithmetic happens in the database.
Who:   Routes in `devflow.routes.questions`; tests call the actions directly.

Create flow (one transaction):
    insert question ──▶ for each tag: upsert tag (count +1) ──▶ insert join
    rows in order ──▶ hydrate and return
    Any failure rolls back every statement above.

Edit flow (one transaction):
    load question (NotFound) ──▶ author check (Forbidden) ──▶ write
    title/content only if changed ──▶ tag delta by lowercase name:
        added:   upsert tag (count +1), insert join row
        removed: count -1, delete join row
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import ForbiddenError, NotFoundError
from devflow.models import Question, Tag, TagQuestion
from devflow.schemas.common import PaginatedSearchParams
from devflow.schemas.question import (
    AskQuestionParams,
    EditQuestionParams,
    GetQuestionParams,
    HotQuestionOut,
    IncrementViewsParams,
    QuestionList,
    QuestionOut,
    ViewsOut,
)
from devflow.services.guard import ActionContext, server_action
from devflow.services.queries import (
    fetch_page,
    has_next_page,
    hydrate_questions,
    text_filter,
)

logger = logging.getLogger(__name__)

HOT_QUESTIONS_LIMIT = 5


def question_sort(filter_name):
    """Filter name → ORDER BY columns. Unknown names fall back to newest."""
    newest = (desc(Question.created_at), desc(Question.id))
    if filter_name == "popular":
        return (desc(Question.upvotes),) + newest
    return newest


class QuestionService:
    """
    Question actions.

    Every public method is wrapped by `server_action` and returns an
    ActionResponse; the underscored helpers run inside a caller's
    transaction and raise.
    """

    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    # ── Tag helpers (run inside the caller's transaction) ─────────────────

    async def _upsert_tag(self, tx: AsyncSession, name: str) -> Tag:
        """
        Find a tag by case-insensitive name and bump its count, or create it
        with a count of 1. The first spelling ever used is kept.
        """
        tag = await tx.scalar(select(Tag).where(func.lower(Tag.name) == name.lower()))
        if tag is None:
            tag = Tag(name=name, question_count=1)
            tx.add(tag)
            await tx.flush()
            return tag
        await tx.execute(
            update(Tag)
            .where(Tag.id == tag.id)
            .values(question_count=Tag.question_count + 1)
            .execution_options(synchronize_session=False)
        )
        return tag

    async def _link_tags(
        self, tx: AsyncSession, question_id: uuid.UUID, names: List[str], start: int = 0
    ) -> None:
        for offset, name in enumerate(names):
            tag = await self._upsert_tag(tx, name)
            tx.add(TagQuestion(tag_id=tag.id, question_id=question_id, position=start + offset))
        await tx.flush()

    async def _load_one(self, tx: AsyncSession, question_id: uuid.UUID) -> QuestionOut:
        question = await tx.get(Question, question_id, populate_existing=True)
        if question is None:
            raise NotFoundError("Question", str(question_id))
        return (await hydrate_questions(tx, [question]))[0]

    # ── Actions ───────────────────────────────────────────────────────────

    @server_action(AskQuestionParams, authorize=True, status=201)
    async def create_question(self, ctx: ActionContext) -> QuestionOut:
        params: AskQuestionParams = ctx.params
        async with self.store.transaction() as tx:
            question = Question(
                title=params.title,
                content=params.content,
                author_id=ctx.user_id,
            )
            tx.add(question)
            await tx.flush()

            await self._link_tags(tx, question.id, params.tags)
            result = await self._load_one(tx, question.id)

        logger.info(
            "Question %s created by %s with tags %s", result.id, ctx.user_id, params.tags
        )
        return result

    @server_action(EditQuestionParams, authorize=True)
    async def edit_question(self, ctx: ActionContext) -> QuestionOut:
        params: EditQuestionParams = ctx.params
        async with self.store.transaction() as tx:
            question = await tx.get(Question, params.question_id)
            if question is None:
                raise NotFoundError("Question", str(params.question_id))
            if question.author_id != ctx.user_id:
                raise ForbiddenError("You are not allowed to edit this question")

            # Only rewrite fields that differ
            if question.title != params.title:
                question.title = params.title
            if question.content != params.content:
                question.content = params.content

            rows = await tx.execute(
                select(TagQuestion.id, Tag.id, Tag.name, TagQuestion.position)
                .join(Tag, Tag.id == TagQuestion.tag_id)
                .where(TagQuestion.question_id == question.id)
            )
            current = {name.lower(): (link_id, tag_id) for link_id, tag_id, name, _ in rows}
            requested = {name.lower() for name in params.tags}

            tags_to_add = [name for name in params.tags if name.lower() not in current]
            tags_to_remove = [key for key in current if key not in requested]

            for key in tags_to_remove:
                link_id, tag_id = current[key]
                await tx.execute(
                    update(Tag)
                    .where(Tag.id == tag_id)
                    .values(question_count=Tag.question_count - 1)
                    .execution_options(synchronize_session=False)
                )
                await tx.execute(delete(TagQuestion).where(TagQuestion.id == link_id))

            if tags_to_add:
                next_position = await tx.scalar(
                    select(func.coalesce(func.max(TagQuestion.position) + 1, 0)).where(
                        TagQuestion.question_id == question.id
                    )
                )
                await self._link_tags(tx, question.id, tags_to_add, start=next_position)

            await tx.flush()
            result = await self._load_one(tx, question.id)

        logger.info(
            "Question %s edited: +%s -%s", question.id, tags_to_add, tags_to_remove
        )
        return result

    @server_action(GetQuestionParams)
    async def get_question(self, ctx: ActionContext) -> QuestionOut:
        async with self.store.session() as session:
            return await self._load_one(session, ctx.params.question_id)

    @server_action(PaginatedSearchParams)
    async def get_questions(self, ctx: ActionContext) -> QuestionList:
        params: PaginatedSearchParams = ctx.params
        stmt = select(Question)
        if params.query:
            stmt = stmt.where(text_filter(params.query, Question.title, Question.content))
        if params.filter == "unanswered":
            stmt = stmt.where(Question.answer_count == 0)

        async with self.store.session() as session:
            questions, total = await fetch_page(
                session, stmt, params, *question_sort(params.filter)
            )
            items = await hydrate_questions(session, questions)

        return QuestionList(
            questions=items,
            is_next=has_next_page(total, params, len(items)),
        )

    @server_action(IncrementViewsParams)
    async def increment_views(self, ctx: ActionContext) -> ViewsOut:
        question_id = ctx.params.question_id
        async with self.store.transaction() as tx:
            result = await tx.execute(
                update(Question)
                .where(Question.id == question_id)
                .values(views=Question.views + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError("Question", str(question_id))
            views = await tx.scalar(select(Question.views).where(Question.id == question_id))
        return ViewsOut(views=views)

    @server_action()
    async def get_hot_questions(self, ctx: ActionContext) -> List[HotQuestionOut]:
        async with self.store.session() as session:
            questions = await session.scalars(
                select(Question)
                .order_by(desc(Question.views), desc(Question.upvotes))
                .limit(HOT_QUESTIONS_LIMIT)
            )
            return [HotQuestionOut.model_validate(q) for q in questions]


# Module-level singleton
question_service = QuestionService()

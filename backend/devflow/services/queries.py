"""
DevFlow Backend — Query Helpers (Pagination & Hydration)
==========================================================

What:  Shared building blocks for the list actions: case-insensitive text
       filters, count + windowed fetch, and turning ORM rows into output
       models with their authors and tags attached.
Why:   Models carry no ORM relationships (async sessions cannot lazy-load),
       so authors and tags are fetched with one extra query per page instead
       of one per row.
Who:   question, answer, user, tag, collection and search services.
"""

import uuid
from typing import Dict, Iterable, List, Sequence, Tuple

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from devflow.models import Answer, Question, Tag, TagQuestion, User
from devflow.schemas.common import AuthorOut, PaginatedSearchParams, TagRefOut
from devflow.schemas.question import AnswerOut, QuestionOut


def text_filter(query, *columns):
    """OR of `column ILIKE %query%` across columns."""
    pattern = f"%{query}%"
    return or_(*(column.ilike(pattern) for column in columns))


async def fetch_page(
    tx: AsyncSession,
    stmt: Select,
    params: PaginatedSearchParams,
    *order_by,
) -> Tuple[List, int]:
    """
    Run a count and a windowed fetch for `stmt`.

    Returns (rows, total) where total counts every row matching the
    statement's filters, ignoring the window.
    """
    total = await tx.scalar(select(func.count()).select_from(stmt.subquery()))
    window = stmt.order_by(*order_by).offset(params.skip).limit(params.page_size)
    rows = (await tx.scalars(window)).all()
    return list(rows), total or 0


def has_next_page(total: int, params: PaginatedSearchParams, returned: int) -> bool:
    # More rows exist past the end of this window
    return total > params.skip + returned


# ── Hydration ─────────────────────────────────────────────────────────────

async def load_authors(
    tx: AsyncSession, user_ids: Iterable[uuid.UUID]
) -> Dict[uuid.UUID, AuthorOut]:
    ids = set(user_ids)
    if not ids:
        return {}
    users = (await tx.scalars(select(User).where(User.id.in_(ids)))).all()
    return {user.id: AuthorOut.model_validate(user) for user in users}


async def load_question_tags(
    tx: AsyncSession, question_ids: Iterable[uuid.UUID]
) -> Dict[uuid.UUID, List[TagRefOut]]:
    """Ordered tag list per question, read from the join rows."""
    ids = set(question_ids)
    tags: Dict[uuid.UUID, List[TagRefOut]] = {qid: [] for qid in ids}
    if not ids:
        return tags
    rows = await tx.execute(
        select(TagQuestion.question_id, Tag.id, Tag.name)
        .join(Tag, Tag.id == TagQuestion.tag_id)
        .where(TagQuestion.question_id.in_(ids))
        .order_by(TagQuestion.question_id, TagQuestion.position)
    )
    for question_id, tag_id, name in rows:
        tags[question_id].append(TagRefOut(id=tag_id, name=name))
    return tags


def question_out(question: Question, author, tags) -> QuestionOut:
    return QuestionOut(
        id=question.id,
        title=question.title,
        content=question.content,
        tags=tags,
        author=author,
        views=question.views,
        upvotes=question.upvotes,
        downvotes=question.downvotes,
        answer_count=question.answer_count,
        created_at=question.created_at,
        updated_at=question.updated_at,
    )


async def hydrate_questions(
    tx: AsyncSession, questions: Sequence[Question]
) -> List[QuestionOut]:
    authors = await load_authors(tx, (q.author_id for q in questions))
    tags = await load_question_tags(tx, (q.id for q in questions))
    return [question_out(q, authors.get(q.author_id), tags.get(q.id, [])) for q in questions]


async def hydrate_answers(tx: AsyncSession, answers: Sequence[Answer]) -> List[AnswerOut]:
    authors = await load_authors(tx, (a.author_id for a in answers))
    return [
        AnswerOut(
            id=a.id,
            content=a.content,
            question_id=a.question_id,
            author=authors.get(a.author_id),
            upvotes=a.upvotes,
            downvotes=a.downvotes,
            created_at=a.created_at,
        )
        for a in answers
    ]

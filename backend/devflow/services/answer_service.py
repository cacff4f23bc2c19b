"""
DevFlow Backend — Answer Service
==================================

What:  Post an answer to a question; list a question's answers.
How:   The answer insert and the parent's `answer_count + 1` run in one
       transaction, so an answer never exists without being counted.
"""

import logging

from sqlalchemy import asc, desc, select, update

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import NotFoundError
from devflow.models import Answer, Question
from devflow.schemas.question import AnswerList, AnswerOut, CreateAnswerParams, GetAnswersParams
from devflow.services.guard import ActionContext, server_action
from devflow.services.queries import fetch_page, has_next_page, hydrate_answers

logger = logging.getLogger(__name__)


def answer_sort(filter_name):
    if filter_name == "oldest":
        return (asc(Answer.created_at), asc(Answer.id))
    if filter_name == "popular":
        return (desc(Answer.upvotes), desc(Answer.created_at), desc(Answer.id))
    # "latest" and default
    return (desc(Answer.created_at), desc(Answer.id))


class AnswerService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action(CreateAnswerParams, authorize=True, status=201)
    async def create_answer(self, ctx: ActionContext) -> AnswerOut:
        params: CreateAnswerParams = ctx.params
        async with self.store.transaction() as tx:
            question = await tx.get(Question, params.question_id)
            if question is None:
                raise NotFoundError("Question", str(params.question_id))

            answer = Answer(
                content=params.content,
                author_id=ctx.user_id,
                question_id=question.id,
            )
            tx.add(answer)
            await tx.flush()

            await tx.execute(
                update(Question)
                .where(Question.id == question.id)
                .values(answer_count=Question.answer_count + 1)
                .execution_options(synchronize_session=False)
            )
            result = (await hydrate_answers(tx, [answer]))[0]

        logger.info("Answer %s posted on question %s", result.id, params.question_id)
        return result

    @server_action(GetAnswersParams)
    async def get_answers(self, ctx: ActionContext) -> AnswerList:
        params: GetAnswersParams = ctx.params
        stmt = select(Answer).where(Answer.question_id == params.question_id)

        async with self.store.session() as session:
            answers, total = await fetch_page(session, stmt, params, *answer_sort(params.filter))
            items = await hydrate_answers(session, answers)

        return AnswerList(
            answers=items,
            is_next=has_next_page(total, params, len(items)),
            total_answers=total,
        )


answer_service = AnswerService()

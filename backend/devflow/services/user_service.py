"""
DevFlow Backend — User Service
================================

What:  Create and list users, look one up with their activity totals, and
       page through a user's questions and answers.
Who:   `devflow.routes.users`, and `auth_service` for the duplicate checks.
"""

import logging
from typing import List

from sqlalchemy import asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import ConflictError, NotFoundError
from devflow.models import Answer, Question, User
from devflow.schemas.common import PaginatedSearchParams
from devflow.schemas.user import (
    GetUserContentParams,
    GetUserParams,
    UserAnswerList,
    UserList,
    UserOut,
    UserParams,
    UserProfile,
    UserQuestionList,
)
from devflow.services.guard import ActionContext, server_action
from devflow.services.queries import (
    fetch_page,
    has_next_page,
    hydrate_answers,
    hydrate_questions,
    text_filter,
)

logger = logging.getLogger(__name__)


def user_sort(filter_name):
    if filter_name == "oldest":
        return (asc(User.created_at), asc(User.id))
    if filter_name == "popular":
        return (desc(User.reputation), desc(User.created_at), desc(User.id))
    return (desc(User.created_at), desc(User.id))


async def ensure_unique_user(
    tx: AsyncSession,
    email: str,
    username: str,
    email_message: str,
    username_message: str,
) -> None:
    """Raise ConflictError if the email or username is already registered."""
    if await tx.scalar(select(User.id).where(User.email == email)) is not None:
        raise ConflictError(email_message, context={"email": email})
    if await tx.scalar(select(User.id).where(User.username == username)) is not None:
        raise ConflictError(username_message, context={"username": username})


class UserService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action()
    async def list_users(self, ctx: ActionContext) -> List[UserOut]:
        async with self.store.session() as session:
            users = await session.scalars(select(User).order_by(asc(User.created_at)))
            return [UserOut.model_validate(u) for u in users]

    @server_action(UserParams, status=201)
    async def create_user(self, ctx: ActionContext) -> UserOut:
        params: UserParams = ctx.params
        async with self.store.transaction() as tx:
            await ensure_unique_user(
                tx,
                params.email,
                params.username,
                email_message="User already exists.",
                username_message="Username is already taken.",
            )
            user = User(**params.model_dump())
            tx.add(user)
            await tx.flush()
            result = UserOut.model_validate(user)

        logger.info("User %s created (%s)", result.id, result.username)
        return result

    @server_action(PaginatedSearchParams)
    async def get_users(self, ctx: ActionContext) -> UserList:
        params: PaginatedSearchParams = ctx.params
        stmt = select(User)
        if params.query:
            stmt = stmt.where(text_filter(params.query, User.name, User.email))

        async with self.store.session() as session:
            users, total = await fetch_page(session, stmt, params, *user_sort(params.filter))

        return UserList(
            users=[UserOut.model_validate(u) for u in users],
            is_next=has_next_page(total, params, len(users)),
        )

    @server_action(GetUserParams)
    async def get_user_by_id(self, ctx: ActionContext) -> UserProfile:
        user_id = ctx.params.user_id
        async with self.store.session() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise NotFoundError("User", str(user_id))
            total_questions = await session.scalar(
                select(func.count()).select_from(Question).where(Question.author_id == user_id)
            )
            total_answers = await session.scalar(
                select(func.count()).select_from(Answer).where(Answer.author_id == user_id)
            )

        return UserProfile(
            user=UserOut.model_validate(user),
            total_questions=total_questions,
            total_answers=total_answers,
        )

    @server_action(GetUserContentParams)
    async def get_user_questions(self, ctx: ActionContext) -> UserQuestionList:
        params: GetUserContentParams = ctx.params
        stmt = select(Question).where(Question.author_id == params.user_id)

        async with self.store.session() as session:
            questions, total = await fetch_page(
                session, stmt, params, desc(Question.created_at), desc(Question.id)
            )
            items = await hydrate_questions(session, questions)

        return UserQuestionList(questions=items, is_next=has_next_page(total, params, len(items)))

    @server_action(GetUserContentParams)
    async def get_user_answers(self, ctx: ActionContext) -> UserAnswerList:
        params: GetUserContentParams = ctx.params
        stmt = select(Answer).where(Answer.author_id == params.user_id)

        async with self.store.session() as session:
            answers, total = await fetch_page(
                session, stmt, params, desc(Answer.created_at), desc(Answer.id)
            )
            items = await hydrate_answers(session, answers)

        return UserAnswerList(answers=items, is_next=has_next_page(total, params, len(items)))


user_service = UserService()

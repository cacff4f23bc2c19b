"""
DevFlow Backend — User & Account Service Tests

What we test:
    ✅ Duplicate email / username rejected as conflicts
    ✅ Duplicate (provider, provider_account_id) rejected, one record kept
    ✅ Account passwords are stored hashed and never returned
    ✅ User listing, profile totals, and per-user content
"""

import uuid

import pytest
from sqlalchemy import select

from conftest import ANSWER_TEXT, count_rows, create_user, question_payload
from devflow.exceptions import ErrorKind
from devflow.models import Account, User
from devflow.security import verify_password
from devflow.services.account_service import AccountService
from devflow.services.answer_service import AnswerService
from devflow.services.question_service import QuestionService
from devflow.services.user_service import UserService


def _user(username="linus", email=None):
    return {"name": "Linus", "username": username, "email": email or f"{username}@example.com"}


def _account(user_id, provider="github", provider_account_id="12345", **extra):
    return {
        "user_id": str(user_id),
        "name": "Linus",
        "provider": provider,
        "provider_account_id": provider_account_id,
        **extra,
    }


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_and_list(self, store):
        service = UserService(store)

        created = await service.create_user(_user())
        listed = await service.list_users()

        assert created.status == 201
        assert created.data.username == "linus"
        assert [u.username for u in listed.data] == ["linus"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, store):
        service = UserService(store)
        await service.create_user(_user())

        result = await service.create_user(_user(username="other", email="linus@example.com"))

        assert result.error.kind == ErrorKind.CONFLICT
        assert result.error.message == "User already exists."
        assert await count_rows(store, User) == 1

    @pytest.mark.asyncio
    async def test_duplicate_username(self, store):
        service = UserService(store)
        await service.create_user(_user())

        result = await service.create_user(_user(email="new@example.com"))

        assert result.error.kind == ErrorKind.CONFLICT
        assert result.error.message == "Username is already taken."

    @pytest.mark.asyncio
    async def test_invalid_email(self, store):
        result = await UserService(store).create_user(_user(email="not-an-email"))
        assert result.error.kind == ErrorKind.VALIDATION
        assert "email" in result.error.details


class TestUserQueries:
    @pytest.mark.asyncio
    async def test_profile_totals_and_content(self, store, author, other_user):
        question = await QuestionService(store).create_question(question_payload(), session=author)
        await AnswerService(store).create_answer(
            {"question_id": str(question.data.id), "content": ANSWER_TEXT}, session=author
        )
        service = UserService(store)

        profile = await service.get_user_by_id({"user_id": str(author.user_id)})
        questions = await service.get_user_questions({"user_id": str(author.user_id)})
        answers = await service.get_user_answers({"user_id": str(other_user.user_id)})

        assert profile.data.total_questions == 1
        assert profile.data.total_answers == 1
        assert [q.id for q in questions.data.questions] == [question.data.id]
        assert answers.data.answers == []
        assert answers.data.is_next is False

    @pytest.mark.asyncio
    async def test_unknown_user(self, store):
        result = await UserService(store).get_user_by_id({"user_id": str(uuid.uuid4())})
        assert result.error.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_search_and_popular_filter(self, store):
        await create_user(store, "alice", reputation=5)
        await create_user(store, "bob", reputation=50)
        await create_user(store, "carol", reputation=20)
        service = UserService(store)

        popular = await service.get_users({"filter": "popular"})
        found = await service.get_users({"query": "CAR"})

        assert [u.username for u in popular.data.users] == ["bob", "carol", "alice"]
        assert [u.username for u in found.data.users] == ["carol"]


class TestCreateAccount:
    @pytest.mark.asyncio
    async def test_duplicate_provider_pair_rejected(self, store, author):
        service = AccountService(store)

        first = await service.create_account(_account(author.user_id))
        second = await service.create_account(_account(author.user_id))

        assert first.success is True
        assert second.success is False
        assert second.error.kind == ErrorKind.CONFLICT
        assert second.error.message == "An account with the same provider already exists"
        assert await count_rows(store, Account) == 1

    @pytest.mark.asyncio
    async def test_same_id_different_provider_allowed(self, store, author):
        service = AccountService(store)

        await service.create_account(_account(author.user_id, provider="github"))
        result = await service.create_account(_account(author.user_id, provider="google"))

        assert result.success is True
        listed = await service.list_accounts()
        assert len(listed.data) == 2

    @pytest.mark.asyncio
    async def test_password_hashed_and_hidden(self, store, author):
        result = await AccountService(store).create_account(
            _account(author.user_id, provider="credentials", password="s3cret!")
        )

        assert "password" not in result.model_dump()["data"]
        async with store.session() as session:
            stored = await session.scalar(select(Account.password))
        assert stored != "s3cret!"
        assert verify_password("s3cret!", stored)

    @pytest.mark.asyncio
    async def test_unknown_user(self, store):
        result = await AccountService(store).create_account(_account(uuid.uuid4()))
        assert result.error.kind == ErrorKind.NOT_FOUND

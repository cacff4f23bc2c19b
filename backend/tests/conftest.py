"""
DevFlow Backend — Test Configuration (conftest.py)
====================================================

What:  Shared fixtures: a throwaway SQLite database per test, a
       DocumentStore over it, seeded users, and an HTTP client bound to
       the app.
Why:   Transaction behaviour (rollback on failure, counters moving
       together) only means something against a real database, so storage
       is not mocked.

Fixture Hierarchy:
    store ──▶ author, other_user (User rows + AuthSession)
          ──▶ app_client (routes the global store to this database)
"""

import os
import tempfile

# Override settings BEFORE any devflow import: config is read at import time
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{tempfile.mkdtemp(prefix='devflow_test_')}/devflow.db"
)
os.environ["AUTH_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import devflow.models  # noqa: E402,F401
from devflow.database import (  # noqa: E402
    Base,
    DocumentStore,
    build_engine,
    build_session_factory,
)
from devflow.models import Question, Tag, TagQuestion, User  # noqa: E402
from devflow.services.guard import AuthSession  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Storage
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def store(tmp_path):
    """
    A DocumentStore over a fresh SQLite file with every table created.

    Usage:
        async def test_something(store):
            service = QuestionService(store)
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'devflow.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield DocumentStore(build_session_factory(engine))
    await engine.dispose()


async def create_user(store: DocumentStore, username: str, **fields) -> AuthSession:
    """Insert a user and return the session a signed-in caller would carry."""
    async with store.transaction() as tx:
        user = User(
            name=fields.pop("name", username.title()),
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            **fields,
        )
        tx.add(user)
        await tx.flush()
        return AuthSession(user_id=user.id, name=user.name, image=user.image)


@pytest_asyncio.fixture
async def author(store) -> AuthSession:
    return await create_user(store, "ada")


@pytest_asyncio.fixture
async def other_user(store) -> AuthSession:
    return await create_user(store, "grace")


# ══════════════════════════════════════════════════════════════════════════
# Inspection helpers
# ══════════════════════════════════════════════════════════════════════════

async def count_rows(store: DocumentStore, model) -> int:
    from sqlalchemy import func, select

    async with store.session() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def tag_counts(store: DocumentStore) -> Dict[str, int]:
    from sqlalchemy import select

    async with store.session() as session:
        rows = await session.execute(select(Tag.name, Tag.question_count))
        return {name: count for name, count in rows}


async def link_count(store: DocumentStore, question_id) -> int:
    from sqlalchemy import func, select

    async with store.session() as session:
        return await session.scalar(
            select(func.count())
            .select_from(TagQuestion)
            .where(TagQuestion.question_id == question_id)
        )


async def load_question(store: DocumentStore, question_id) -> Optional[Question]:
    async with store.session() as session:
        return await session.get(Question, question_id)


def question_payload(title: str = "How do async transactions work?", tags: Optional[List[str]] = None):
    return {
        "title": title,
        "content": "I am trying to understand how transactions behave with asyncio.",
        "tags": tags if tags is not None else ["python", "sqlalchemy"],
    }


ANSWER_TEXT = (
    "Open the session with async with, then wrap the writes in session.begin(). "
    "Leaving the block commits, and any exception inside it rolls everything back."
)


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def app_client(store, monkeypatch):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    The app's module-level store is pointed at this test's database.

    Usage:
        async def test_health(app_client):
            response = await app_client.get("/health")
    """
    import devflow.database
    from devflow.main import app

    monkeypatch.setattr(devflow.database.store, "_session_factory", store._session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

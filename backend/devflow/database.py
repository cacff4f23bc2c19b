"""
DevFlow Backend — Document Store Client
=========================================

What:  Async SQLAlchemy engine, session factory, declarative base, and the
       `DocumentStore` handle every action uses to reach storage.
Why:   Multi-document mutations (vote, question create/edit, answer create,
       sign-up) must apply all of their writes or none of them. Keeping the
       transaction boundary in one place means no action manages commit or
       rollback by hand.
How:   `DocumentStore.transaction()` opens a session and a `session.begin()`
       block: normal exit commits, any exception rolls back and re-raises.
       `DocumentStore.session()` hands out a plain session for
       single-statement writes that the caller commits itself.
Who:   Services (`devflow.services.*`), the health route, and Alembic.
When:  Engine is created at module import; sessions are created per action.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and apply to
    server databases only. SQLite (tests, local hacking) uses SQLAlchemy's
    default pool for the aiosqlite driver.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from devflow.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool options are only passed for server databases; the aiosqlite pool
    rejects them.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: response models are built from ORM objects
    # after the transaction has committed
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


class Base(DeclarativeBase):
    """Base class for all DevFlow ORM models (shared metadata for Alembic)."""
    pass


class DocumentStore:
    """
    Thin handle over the session factory.

    Every service receives one of these. Production code uses the module
    level `store`; tests build their own against a throwaway database.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Run a block of reads and writes as one atomic unit.

        Usage:
            async with store.transaction() as tx:
                tx.add(Question(...))
                await tx.execute(update(Tag)...)
            # committed here; an exception inside the block rolls back
            # every statement and propagates to the caller
        """
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except Exception as exc:
                logger.warning(
                    "Transaction aborted, all writes rolled back: %s",
                    type(exc).__name__,
                )
                raise

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Plain session for single-statement writes.

        The caller commits after each write. Uncommitted work is rolled back
        if the block raises.
        """
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Executes SELECT 1; raises if the database is unreachable."""
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))


store = DocumentStore(async_session_factory)


async def dispose_engine() -> None:
    """Closes all pooled connections. Called from the app lifespan on shutdown."""
    await engine.dispose()

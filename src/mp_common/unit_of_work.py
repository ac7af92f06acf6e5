"""Unit of Work — the only sanctioned way to compose multi-table mutations.

    order = await run_atomic(session_factory, lambda db: _create(db, ...))

`body` receives the session that *is* the atomic scope and must thread it
through every repository call. The scope commits only if `body` returns;
any exception, including task cancellation, rolls it back and propagates.
No timeout is applied here: the surrounding request bounds lock hold time.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.mp_common.db_errors import classify_db_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

SessionFactory = async_sessionmaker[AsyncSession]


async def run_atomic(
    session_factory: SessionFactory,
    body: Callable[[AsyncSession], Awaitable[T]],
) -> T:
    async with session_factory() as db:
        try:
            result = await body(db)
        except BaseException as exc:
            # BaseException: CancelledError must not leave the scope open
            logger.warning("Unit of work rolled back: %s", type(exc).__name__)
            await db.rollback()
            raise
        try:
            await db.commit()
        except SQLAlchemyError as exc:
            logger.warning("Commit failed, rolling back: %s", type(exc).__name__)
            await db.rollback()
            raise classify_db_error(exc) from exc
        return result


async def run_read(
    session_factory: SessionFactory,
    body: Callable[[AsyncSession], Awaitable[T]],
) -> T:
    """Read-only scope: no commit, the session is simply closed."""
    async with session_factory() as db:
        return await body(db)

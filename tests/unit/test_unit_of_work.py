"""Tests for mp_common.unit_of_work — commit / rollback discipline."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.mp_common.errors import ConflictError, InsufficientQuantityError
from src.mp_common.unit_of_work import run_atomic, run_read


def _session_factory() -> tuple[MagicMock, AsyncMock]:
    db = AsyncMock()
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=db)
    ctx.__aexit__ = AsyncMock(return_value=False)
    factory = MagicMock(return_value=ctx)
    return factory, db


class TestRunAtomic:
    async def test_commits_and_returns_body_result(self) -> None:
        factory, db = _session_factory()

        async def body(session: object) -> str:
            assert session is db
            return "order-1"

        assert await run_atomic(factory, body) == "order-1"
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    async def test_error_rolls_back_and_propagates(self) -> None:
        factory, db = _session_factory()

        async def body(session: object) -> None:
            raise InsufficientQuantityError(2, 1)

        with pytest.raises(InsufficientQuantityError):
            await run_atomic(factory, body)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_unexpected_exception_rolls_back(self) -> None:
        factory, db = _session_factory()

        async def body(session: object) -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await run_atomic(factory, body)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_cancellation_rolls_back(self) -> None:
        factory, db = _session_factory()

        async def body(session: object) -> None:
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await run_atomic(factory, body)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_failed_commit_rolls_back_and_is_classified(self) -> None:
        factory, db = _session_factory()
        db.commit.side_effect = IntegrityError("COMMIT", {}, Exception("duplicate key value"))

        async def body(session: object) -> int:
            return 1

        with pytest.raises(ConflictError):
            await run_atomic(factory, body)
        db.rollback.assert_awaited_once()


class TestRunRead:
    async def test_never_commits(self) -> None:
        factory, db = _session_factory()

        async def body(session: object) -> int:
            return 42

        assert await run_read(factory, body) == 42
        db.commit.assert_not_awaited()

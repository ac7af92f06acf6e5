# tests/unit/test_order_persistence.py
"""Unit tests for OrderRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.mp_common.errors import ConflictError, InternalError
from src.mp_order.domain.models import Order
from src.mp_order.infrastructure.persistence import OrderRepository


def _make_row(**kwargs: Any) -> MagicMock:
    """Create a mock row with all orders columns."""
    row = MagicMock()
    row.id = kwargs.get("id", "order-1")
    row.listing_id = kwargs.get("listing_id", "listing-1")
    row.buyer_id = kwargs.get("buyer_id", "buyer-1")
    row.seller_id = kwargs.get("seller_id", "seller-1")
    row.quantity = kwargs.get("quantity", 2)
    row.amount_cents = kwargs.get("amount_cents", 2000)
    row.state = kwargs.get("state", "pending_payment")
    row.seller_respond_by = kwargs.get("seller_respond_by")
    row.review_ends_at = kwargs.get("review_ends_at")
    row.created_at = kwargs.get("created_at", datetime.now(UTC))
    return row


def _make_order(**kwargs: Any) -> Order:
    return Order(
        id=kwargs.get("id"),
        listing_id=kwargs.get("listing_id", "listing-1"),
        buyer_id=kwargs.get("buyer_id", "buyer-1"),
        seller_id=kwargs.get("seller_id", "seller-1"),
        quantity=kwargs.get("quantity", 2),
        amount=kwargs.get("amount", 2000),
        state=kwargs.get("state", "pending_payment"),
    )


def _db_returning(row: Any = None, rows: list[Any] | None = None) -> AsyncMock:
    db = AsyncMock()
    result = MagicMock()
    result.fetchone.return_value = row
    result.fetchall.return_value = rows or []
    db.execute.return_value = result
    return db


class TestCreate:
    async def test_returns_order_with_db_assigned_identity(self) -> None:
        created_at = datetime(2026, 3, 1, tzinfo=UTC)
        db = _db_returning(MagicMock(id="3f1c0000-0000-0000-0000-000000000001", created_at=created_at))
        order = await OrderRepository().create(db, _make_order())
        assert order.id == "3f1c0000-0000-0000-0000-000000000001"
        assert order.created_at == created_at
        params = db.execute.call_args[0][1]
        assert params["amount_cents"] == 2000
        assert params["state"] == "pending_payment"
        assert "RETURNING id, created_at" in str(db.execute.call_args[0][0])

    async def test_no_row_returned(self) -> None:
        with pytest.raises(InternalError):
            await OrderRepository().create(_db_returning(None), _make_order())


class TestReads:
    async def test_get_by_id_maps_row(self) -> None:
        db = _db_returning(_make_row(state="in_review"))
        order = await OrderRepository().get_by_id(db, "order-1")
        assert order is not None
        assert order.amount == 2000
        assert order.state == "in_review"

    async def test_get_by_id_missing(self) -> None:
        assert await OrderRepository().get_by_id(_db_returning(None), "x") is None

    async def test_get_for_update_locks_row(self) -> None:
        db = _db_returning(_make_row())
        await OrderRepository().get_for_update(db, "order-1")
        assert "FOR UPDATE" in str(db.execute.call_args[0][0])

    async def test_list_all_newest_first(self) -> None:
        db = _db_returning(rows=[_make_row(id="b"), _make_row(id="a")])
        orders = await OrderRepository().list_all(db)
        assert [o.id for o in orders] == ["b", "a"]
        assert "ORDER BY created_at DESC" in str(db.execute.call_args[0][0])


class TestUpdate:
    async def test_only_mutable_columns(self) -> None:
        db = _db_returning()
        await OrderRepository().update(db, _make_order(id="order-1", state="completed"))
        params = db.execute.call_args[0][1]
        assert set(params) == {"id", "state", "seller_respond_by", "review_ends_at"}
        assert params["state"] == "completed"


class TestDelete:
    async def test_deleted(self) -> None:
        assert await OrderRepository().delete(_db_returning(MagicMock(id="o")), "o") is True

    async def test_missing(self) -> None:
        assert await OrderRepository().delete(_db_returning(None), "o") is False

    async def test_referenced_by_ledger_is_conflict(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = IntegrityError(
            "DELETE", {}, Exception("violates foreign key constraint")
        )
        with pytest.raises(ConflictError):
            await OrderRepository().delete(db, "o")

"""OrderRepository — raw SQL persistence implementation."""
from dataclasses import replace
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.db_errors import translate_db_errors
from src.mp_common.errors import InternalError
from src.mp_order.domain.models import Order

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (listing_id, buyer_id, seller_id, quantity, amount_cents,
        state, seller_respond_by, review_ends_at)
    VALUES (:listing_id, :buyer_id, :seller_id, :quantity, :amount_cents,
        :state, :seller_respond_by, :review_ends_at)
    RETURNING id, created_at
""")

_UPDATE_ORDER_SQL = text("""
    UPDATE orders
    SET state = :state, seller_respond_by = :seller_respond_by,
        review_ends_at = :review_ends_at
    WHERE id = :id
""")

_DELETE_ORDER_SQL = text("DELETE FROM orders WHERE id = :id RETURNING id")

_SELECT_COLUMNS = """
    id, listing_id, buyer_id, seller_id, quantity, amount_cents, state,
    seller_respond_by, review_ends_at, created_at
"""

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = :id
""")

_GET_ORDER_FOR_UPDATE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = :id
    FOR UPDATE
""")

_LIST_ORDERS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    ORDER BY created_at DESC, id DESC
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=str(row.id),
        listing_id=str(row.listing_id),
        buyer_id=str(row.buyer_id),
        seller_id=str(row.seller_id),
        quantity=row.quantity,
        amount=row.amount_cents,
        state=row.state,
        seller_respond_by=row.seller_respond_by,
        review_ends_at=row.review_ends_at,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def create(self, db: AsyncSession, order: Order) -> Order:
        """Insert and return the order with its database-assigned id and created_at."""
        with translate_db_errors():
            result = await db.execute(
                _INSERT_ORDER_SQL,
                {
                    "listing_id": order.listing_id,
                    "buyer_id": order.buyer_id,
                    "seller_id": order.seller_id,
                    "quantity": order.quantity,
                    "amount_cents": order.amount,
                    "state": order.state,
                    "seller_respond_by": order.seller_respond_by,
                    "review_ends_at": order.review_ends_at,
                },
            )
            row = result.fetchone()
        if row is None:
            raise InternalError("Order insert returned no rows")
        return replace(order, id=str(row.id), created_at=row.created_at)

    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None:
        with translate_db_errors():
            result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
            row = result.fetchone()
        return _row_to_order(row) if row else None

    async def get_for_update(self, db: AsyncSession, order_id: str) -> Order | None:
        """Locking read; the row stays locked until the caller's unit of work ends."""
        with translate_db_errors():
            result = await db.execute(_GET_ORDER_FOR_UPDATE_SQL, {"id": order_id})
            row = result.fetchone()
        return _row_to_order(row) if row else None

    async def list_all(self, db: AsyncSession) -> list[Order]:
        with translate_db_errors():
            result = await db.execute(_LIST_ORDERS_SQL)
            rows = result.fetchall()
        return [_row_to_order(row) for row in rows]

    async def update(self, db: AsyncSession, order: Order) -> None:
        """Persist the mutable columns. Amount, quantity and parties never change."""
        with translate_db_errors():
            await db.execute(
                _UPDATE_ORDER_SQL,
                {
                    "id": order.id,
                    "state": order.state,
                    "seller_respond_by": order.seller_respond_by,
                    "review_ends_at": order.review_ends_at,
                },
            )

    async def delete(self, db: AsyncSession, order_id: str) -> bool:
        with translate_db_errors():
            result = await db.execute(_DELETE_ORDER_SQL, {"id": order_id})
            row = result.fetchone()
        return row is not None

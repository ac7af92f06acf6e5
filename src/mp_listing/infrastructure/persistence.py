"""ListingRepository — inventory guard over the listings table.

`get_for_purchase` is the locking read of the purchase flow: it row-locks the
listing (FOR UPDATE) and share-locks the seller (FOR SHARE) in one round trip,
so two purchases of the same listing serialize while purchases of different
listings, even from the same seller, do not block each other. A concurrent
seller freeze waits for the purchase to finish.

Must be called inside an open unit of work; locks are held until it ends.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.db_errors import translate_db_errors
from src.mp_common.errors import InvalidInputError, ListingNotFoundError
from src.mp_listing.domain.models import ListingForPurchase

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_FOR_PURCHASE_SQL = text("""
    SELECT l.id          AS listing_id,
           l.seller_id   AS seller_id,
           u.is_frozen   AS seller_is_frozen,
           l.price_cents AS price_cents,
           l.quantity    AS quantity,
           l.is_active   AS is_active,
           l.expires_at  AS expires_at
    FROM listings l
    JOIN users u ON u.id = l.seller_id
    WHERE l.id = :listing_id
    FOR UPDATE OF l
    FOR SHARE OF u
""")

_DECREMENT_QUANTITY_SQL = text("""
    UPDATE listings
    SET quantity = :new_quantity
    WHERE id = :listing_id AND seller_id = :seller_id
    RETURNING id
""")

_RESTOCK_SQL = text("""
    UPDATE listings
    SET quantity = quantity + :quantity
    WHERE id = :listing_id
    RETURNING id
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_purchase_view(row: Any) -> ListingForPurchase:
    return ListingForPurchase(
        id=str(row.listing_id),
        seller_id=str(row.seller_id),
        seller_is_frozen=bool(row.seller_is_frozen),
        price_cents=row.price_cents,
        quantity=row.quantity,
        is_active=bool(row.is_active),
        expires_at=row.expires_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingRepository:
    """Concrete implementation of ListingInventoryProtocol."""

    async def get_for_purchase(
        self, db: AsyncSession, listing_id: str
    ) -> ListingForPurchase:
        with translate_db_errors():
            result = await db.execute(_GET_FOR_PURCHASE_SQL, {"listing_id": listing_id})
            row = result.fetchone()
        if row is None:
            raise ListingNotFoundError(listing_id)
        return _row_to_purchase_view(row)

    async def decrement_quantity(
        self, db: AsyncSession, listing_id: str, seller_id: str, new_quantity: int
    ) -> None:
        """Write the post-purchase quantity computed under the row lock."""
        if new_quantity < 0:
            raise InvalidInputError(f"listing quantity cannot go negative ({new_quantity})")
        with translate_db_errors():
            result = await db.execute(
                _DECREMENT_QUANTITY_SQL,
                {"listing_id": listing_id, "seller_id": seller_id, "new_quantity": new_quantity},
            )
            row = result.fetchone()
        if row is None:
            # listing vanished or ownership changed under us
            raise ListingNotFoundError(listing_id)

    async def restock(self, db: AsyncSession, listing_id: str, quantity: int) -> None:
        """Return units of a cancelled order to the listing."""
        if quantity < 1:
            raise InvalidInputError(f"restock quantity must be >= 1, got {quantity}")
        with translate_db_errors():
            result = await db.execute(
                _RESTOCK_SQL, {"listing_id": listing_id, "quantity": quantity}
            )
            row = result.fetchone()
        if row is None:
            raise ListingNotFoundError(listing_id)

"""Listing inventory Protocol — only what the order flow needs from listings."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_listing.domain.models import ListingForPurchase


class ListingInventoryProtocol(Protocol):
    async def get_for_purchase(
        self, db: AsyncSession, listing_id: str
    ) -> ListingForPurchase: ...

    async def decrement_quantity(
        self, db: AsyncSession, listing_id: str, seller_id: str, new_quantity: int
    ) -> None: ...

    async def restock(self, db: AsyncSession, listing_id: str, quantity: int) -> None: ...

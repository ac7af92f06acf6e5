"""Order persistence Protocols.

Split by consumer: the purchase flow only inserts, the lifecycle workflow
locks and updates, the admin surface lists and deletes.
"""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_order.domain.models import Order


class OrderWriterProtocol(Protocol):
    async def create(self, db: AsyncSession, order: Order) -> Order: ...


class OrderLockingProtocol(Protocol):
    async def get_for_update(self, db: AsyncSession, order_id: str) -> Order | None: ...

    async def update(self, db: AsyncSession, order: Order) -> None: ...


class OrderRepositoryProtocol(OrderWriterProtocol, OrderLockingProtocol, Protocol):
    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None: ...

    async def list_all(self, db: AsyncSession) -> list[Order]: ...

    async def delete(self, db: AsyncSession, order_id: str) -> bool: ...

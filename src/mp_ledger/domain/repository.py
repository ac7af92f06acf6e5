"""Ledger repository Protocol — append-only contract.

There is deliberately no update or delete method: corrections are new
REVERSAL entries. Unit tests inject a fake that conforms to this Protocol.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_ledger.domain.models import BalanceCalculation, LedgerEntry, NewLedgerEntry


class LedgerRepositoryProtocol(Protocol):
    async def append(self, db: AsyncSession, entry: NewLedgerEntry) -> LedgerEntry: ...

    async def get_by_id(self, db: AsyncSession, entry_id: int) -> LedgerEntry | None: ...

    async def get_by_order(self, db: AsyncSession, order_id: str) -> list[LedgerEntry]: ...

    async def get_by_order_and_type(
        self, db: AsyncSession, order_id: str, entry_type: str
    ) -> list[LedgerEntry]: ...

    async def count_by_order_and_type(
        self, db: AsyncSession, order_id: str, entry_type: str
    ) -> int: ...

    async def compute_balance(self, db: AsyncSession, order_id: str) -> BalanceCalculation: ...

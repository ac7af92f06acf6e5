"""LedgerService — business rules layered over the append-only store.

Every method takes the caller's session: these operations never open or
commit a scope themselves. Payout / refund / reversal must be called from a
unit of work that already holds the order-row lock (see
OrderLifecycleService); the balance check here is read-then-write and is
only race-free under that lock.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.cents import require_positive_cents
from src.mp_common.enums import ActorRole, LedgerEntryType, enum_value
from src.mp_common.errors import (
    InsufficientEscrowError,
    InvalidInputError,
    LedgerEntryNotFoundError,
)
from src.mp_ledger.domain.models import BalanceCalculation, LedgerEntry, NewLedgerEntry
from src.mp_ledger.domain.repository import LedgerRepositoryProtocol
from src.mp_ledger.infrastructure.persistence import LedgerRepository

_module_logger = logging.getLogger(__name__)

DEFAULT_PAYOUT_NOTES = "Order completed - payout to seller"
DEFAULT_REFUND_NOTES = "Order cancelled - refund to buyer"


class LedgerService:
    def __init__(
        self,
        repo: LedgerRepositoryProtocol | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()
        self._logger = logger or _module_logger

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def record_escrow(
        self, db: AsyncSession, order_id: str, amount: int, buyer_id: str
    ) -> LedgerEntry:
        """Money entering the platform's hold, attributed to the buyer."""
        require_positive_cents(amount, "escrow amount")
        entry = await self._repo.append(
            db,
            NewLedgerEntry(
                order_id=order_id,
                entry_type=LedgerEntryType.ESCROW.value,
                amount=amount,
                actor_id=buyer_id,
                actor_type=ActorRole.BUYER.value,
            ),
        )
        self._logger.info(
            "Escrow entry created: order=%s amount=%d entry=%d", order_id, amount, entry.id
        )
        return entry

    async def record_payout(
        self, db: AsyncSession, order_id: str, amount: int
    ) -> LedgerEntry:
        """Release held funds to the seller."""
        require_positive_cents(amount, "payout amount")
        await self._ensure_escrow_covers(db, order_id, amount)
        entry = await self._repo.append(
            db,
            NewLedgerEntry(
                order_id=order_id,
                entry_type=LedgerEntryType.PAYOUT.value,
                amount=amount,
                actor_type=ActorRole.SYSTEM.value,
                notes=DEFAULT_PAYOUT_NOTES,
            ),
        )
        self._logger.info(
            "Payout entry created: order=%s amount=%d entry=%d", order_id, amount, entry.id
        )
        return entry

    async def record_refund(
        self, db: AsyncSession, order_id: str, amount: int, notes: str | None = None
    ) -> LedgerEntry:
        """Return held funds to the buyer."""
        require_positive_cents(amount, "refund amount")
        await self._ensure_escrow_covers(db, order_id, amount)
        notes = notes.strip() if notes and notes.strip() else DEFAULT_REFUND_NOTES
        entry = await self._repo.append(
            db,
            NewLedgerEntry(
                order_id=order_id,
                entry_type=LedgerEntryType.REFUND.value,
                amount=amount,
                actor_type=ActorRole.SYSTEM.value,
                notes=notes,
            ),
        )
        self._logger.info(
            "Refund entry created: order=%s amount=%d entry=%d notes=%r",
            order_id,
            amount,
            entry.id,
            notes,
        )
        return entry

    async def record_reversal(
        self, db: AsyncSession, order_id: str, amount: int, notes: str, actor_id: str
    ) -> LedgerEntry:
        """Correct history by appending, never by mutating. Notes are mandatory."""
        require_positive_cents(amount, "reversal amount")
        if not notes or not notes.strip():
            raise InvalidInputError("reversal entries must include notes explaining the correction")
        entry = await self._repo.append(
            db,
            NewLedgerEntry(
                order_id=order_id,
                entry_type=LedgerEntryType.REVERSAL.value,
                amount=amount,
                actor_id=actor_id,
                actor_type=ActorRole.ADMIN.value,
                notes=notes.strip(),
            ),
        )
        self._logger.info(
            "Reversal entry created: order=%s amount=%d entry=%d notes=%r",
            order_id,
            amount,
            entry.id,
            notes,
        )
        return entry

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def compute_balance(self, db: AsyncSession, order_id: str) -> BalanceCalculation:
        return await self._repo.compute_balance(db, order_id)

    async def get_order_ledger(self, db: AsyncSession, order_id: str) -> list[LedgerEntry]:
        return await self._repo.get_by_order(db, order_id)

    async def get_entries_by_type(
        self, db: AsyncSession, order_id: str, entry_type: str
    ) -> list[LedgerEntry]:
        validate_entry_type(entry_type)
        return await self._repo.get_by_order_and_type(db, order_id, entry_type)

    async def get_entry(self, db: AsyncSession, entry_id: int) -> LedgerEntry:
        entry = await self._repo.get_by_id(db, entry_id)
        if entry is None:
            raise LedgerEntryNotFoundError(entry_id)
        return entry

    async def has_escrow_entry(self, db: AsyncSession, order_id: str) -> bool:
        return await self._has_entry(db, order_id, LedgerEntryType.ESCROW)

    async def has_payout_entry(self, db: AsyncSession, order_id: str) -> bool:
        return await self._has_entry(db, order_id, LedgerEntryType.PAYOUT)

    async def has_refund_entry(self, db: AsyncSession, order_id: str) -> bool:
        return await self._has_entry(db, order_id, LedgerEntryType.REFUND)

    # ------------------------------------------------------------------

    async def _has_entry(
        self, db: AsyncSession, order_id: str, entry_type: LedgerEntryType
    ) -> bool:
        count = await self._repo.count_by_order_and_type(db, order_id, entry_type.value)
        return count > 0

    async def _ensure_escrow_covers(self, db: AsyncSession, order_id: str, amount: int) -> None:
        balance = await self._repo.compute_balance(db, order_id)
        if balance.escrow_balance < amount:
            raise InsufficientEscrowError(amount, balance.escrow_balance)


def validate_entry_type(entry_type: str) -> None:
    """Raise InvalidInputError unless `entry_type` names a LedgerEntryType."""
    if enum_value(entry_type) not in {t.value for t in LedgerEntryType}:
        raise InvalidInputError(f"invalid entry type: {entry_type}")

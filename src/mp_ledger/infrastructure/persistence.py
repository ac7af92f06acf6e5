"""LedgerRepository — concrete implementation of LedgerRepositoryProtocol.

`append` is the ONLY write statement. The table additionally carries a
trigger that rejects UPDATE/DELETE (see alembic 005).

Transaction ownership: the CALLER passes the session of its unit of work;
this class never commits.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.cents import require_positive_cents
from src.mp_common.db_errors import translate_db_errors
from src.mp_common.enums import ActorRole, LedgerEntryType, enum_value
from src.mp_common.errors import InternalError, InvalidInputError
from src.mp_ledger.domain.models import BalanceCalculation, LedgerEntry, NewLedgerEntry

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, order_id, entry_type, amount, actor_id, actor_type, notes, created_at
"""

_INSERT_LEDGER_SQL = text(f"""
    INSERT INTO ledger_entries
        (order_id, entry_type, amount, actor_id, actor_type, notes)
    VALUES
        (:order_id, :entry_type, :amount, :actor_id, :actor_type, :notes)
    RETURNING {_SELECT_COLUMNS}
""")

_GET_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM ledger_entries
    WHERE id = :id
""")

_GET_BY_ORDER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM ledger_entries
    WHERE order_id = :order_id
    ORDER BY created_at ASC, id ASC
""")

_GET_BY_ORDER_AND_TYPE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM ledger_entries
    WHERE order_id = :order_id AND entry_type = :entry_type
    ORDER BY created_at ASC, id ASC
""")

_COUNT_BY_ORDER_AND_TYPE_SQL = text("""
    SELECT COUNT(*)
    FROM ledger_entries
    WHERE order_id = :order_id AND entry_type = :entry_type
""")

_BALANCE_SQL = text("""
    SELECT
        COALESCE(SUM(CASE WHEN entry_type = 'ESCROW'   THEN amount ELSE 0 END), 0) AS total_escrow,
        COALESCE(SUM(CASE WHEN entry_type = 'PAYOUT'   THEN amount ELSE 0 END), 0) AS total_payout,
        COALESCE(SUM(CASE WHEN entry_type = 'REFUND'   THEN amount ELSE 0 END), 0) AS total_refund,
        COALESCE(SUM(CASE WHEN entry_type = 'REVERSAL' THEN amount ELSE 0 END), 0) AS total_reversal
    FROM ledger_entries
    WHERE order_id = :order_id
""")

_ENTRY_TYPES = frozenset(t.value for t in LedgerEntryType)
_ACTOR_ROLES = frozenset(r.value for r in ActorRole)


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_entry(row: Any) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        order_id=str(row.order_id),
        entry_type=row.entry_type,
        amount=row.amount,
        actor_id=str(row.actor_id) if row.actor_id is not None else None,
        actor_type=row.actor_type,
        notes=row.notes,
        created_at=row.created_at,
    )


def validate_new_entry(entry: NewLedgerEntry) -> tuple[str, str | None]:
    """Enum membership and positive amount; raises InvalidInputError.

    Returns the normalized (entry_type, actor_type) strings.
    """
    entry_type = enum_value(entry.entry_type)
    if entry_type not in _ENTRY_TYPES:
        raise InvalidInputError(f"unknown ledger entry type {entry_type!r}")
    actor_type = enum_value(entry.actor_type) if entry.actor_type is not None else None
    if actor_type is not None and actor_type not in _ACTOR_ROLES:
        raise InvalidInputError(f"unknown actor role {actor_type!r}")
    require_positive_cents(entry.amount)
    return entry_type, actor_type


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class LedgerRepository:
    """Append-only ledger storage backed by PostgreSQL."""

    async def append(self, db: AsyncSession, entry: NewLedgerEntry) -> LedgerEntry:
        entry_type, actor_type = validate_new_entry(entry)
        with translate_db_errors():
            result = await db.execute(
                _INSERT_LEDGER_SQL,
                {
                    "order_id": entry.order_id,
                    "entry_type": entry_type,
                    "amount": entry.amount,
                    "actor_id": entry.actor_id,
                    "actor_type": actor_type,
                    "notes": entry.notes,
                },
            )
            row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows")
        return _row_to_entry(row)

    async def get_by_id(self, db: AsyncSession, entry_id: int) -> LedgerEntry | None:
        with translate_db_errors():
            result = await db.execute(_GET_BY_ID_SQL, {"id": entry_id})
            row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def get_by_order(self, db: AsyncSession, order_id: str) -> list[LedgerEntry]:
        with translate_db_errors():
            result = await db.execute(_GET_BY_ORDER_SQL, {"order_id": order_id})
            rows = result.fetchall()
        return [_row_to_entry(row) for row in rows]

    async def get_by_order_and_type(
        self, db: AsyncSession, order_id: str, entry_type: str
    ) -> list[LedgerEntry]:
        with translate_db_errors():
            result = await db.execute(
                _GET_BY_ORDER_AND_TYPE_SQL,
                {"order_id": order_id, "entry_type": enum_value(entry_type)},
            )
            rows = result.fetchall()
        return [_row_to_entry(row) for row in rows]

    async def count_by_order_and_type(
        self, db: AsyncSession, order_id: str, entry_type: str
    ) -> int:
        with translate_db_errors():
            result = await db.execute(
                _COUNT_BY_ORDER_AND_TYPE_SQL,
                {"order_id": order_id, "entry_type": enum_value(entry_type)},
            )
            count = result.scalar_one()
        return int(count)

    async def compute_balance(self, db: AsyncSession, order_id: str) -> BalanceCalculation:
        with translate_db_errors():
            result = await db.execute(_BALANCE_SQL, {"order_id": order_id})
            row = result.fetchone()
        if row is None:
            return BalanceCalculation(order_id=order_id)
        return BalanceCalculation(
            order_id=order_id,
            total_escrow=int(row.total_escrow),
            total_payout=int(row.total_payout),
            total_refund=int(row.total_refund),
            total_reversal=int(row.total_reversal),
        )

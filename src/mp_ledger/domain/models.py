"""Domain models for mp_ledger — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LedgerEntry:
    """Write-once money movement tied to one order.

    `amount` is always positive; direction is implied by `entry_type`.
    """

    id: int                          # BIGSERIAL, monotonic
    order_id: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # cents, > 0
    actor_id: str | None = None
    actor_type: str | None = None    # ActorRole value
    notes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class NewLedgerEntry:
    """Input to `append`: everything except the store-assigned id and timestamp."""

    order_id: str
    entry_type: str
    amount: int
    actor_id: str | None = None
    actor_type: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class BalanceCalculation:
    order_id: str
    total_escrow: int = 0
    total_payout: int = 0
    total_refund: int = 0
    total_reversal: int = 0

    @property
    def escrow_balance(self) -> int:
        """> 0: funds still held, 0: fully disbursed."""
        return self.total_escrow - self.total_payout - self.total_refund - self.total_reversal

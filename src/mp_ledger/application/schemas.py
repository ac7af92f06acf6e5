from datetime import datetime

from pydantic import BaseModel

from src.mp_common.cents import cents_to_display
from src.mp_ledger.domain.models import BalanceCalculation, LedgerEntry


class LedgerEntryResponse(BaseModel):
    id: int
    order_id: str
    entry_type: str
    amount_cents: int
    amount_display: str
    actor_id: str | None = None
    actor_type: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, entry: LedgerEntry) -> "LedgerEntryResponse":
        return cls(
            id=entry.id,
            order_id=entry.order_id,
            entry_type=entry.entry_type,
            amount_cents=entry.amount,
            amount_display=cents_to_display(entry.amount),
            actor_id=entry.actor_id,
            actor_type=entry.actor_type,
            notes=entry.notes,
            created_at=entry.created_at,
        )


class LedgerListResponse(BaseModel):
    items: list[LedgerEntryResponse]


class BalanceResponse(BaseModel):
    order_id: str
    total_escrow: int
    total_payout: int
    total_refund: int
    total_reversal: int
    escrow_balance: int
    escrow_balance_display: str

    @classmethod
    def from_domain(cls, balance: BalanceCalculation) -> "BalanceResponse":
        return cls(
            order_id=balance.order_id,
            total_escrow=balance.total_escrow,
            total_payout=balance.total_payout,
            total_refund=balance.total_refund,
            total_reversal=balance.total_reversal,
            escrow_balance=balance.escrow_balance,
            escrow_balance_display=cents_to_display(balance.escrow_balance),
        )

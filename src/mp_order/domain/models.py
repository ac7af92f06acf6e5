"""Order domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime

from src.mp_common.enums import OrderState


@dataclass
class Order:
    listing_id: str
    buyer_id: str
    seller_id: str
    quantity: int  # >= 1
    amount: int  # cents, unit price x quantity at purchase time; never changes
    state: str = OrderState.PENDING_PAYMENT.value
    seller_respond_by: datetime | None = None
    review_ends_at: datetime | None = None
    # Assigned by the database on insert
    id: str | None = None
    created_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES


TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderState.COMPLETED.value, OrderState.CANCELLED.value, OrderState.REFUNDED.value}
)

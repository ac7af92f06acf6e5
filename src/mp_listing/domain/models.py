"""Domain models for mp_listing — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ListingForPurchase:
    """Listing row joined with its seller's standing, read under the row lock."""

    id: str
    seller_id: str
    seller_is_frozen: bool
    price_cents: int
    quantity: int
    is_active: bool
    expires_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

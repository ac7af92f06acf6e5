from datetime import datetime

from src.mp_common.errors import InsufficientQuantityError, ListingNotAvailableError
from src.mp_listing.domain.models import ListingForPurchase


def check_listing_available(listing: ListingForPurchase, now: datetime) -> None:
    """Inactive or expired listings cannot be purchased."""
    if not listing.is_active:
        raise ListingNotAvailableError(listing.id, "listing is inactive")
    if listing.is_expired(now):
        raise ListingNotAvailableError(listing.id, "listing has expired")


def check_sufficient_quantity(listing: ListingForPurchase, requested: int) -> None:
    if listing.quantity < requested:
        raise InsufficientQuantityError(requested, listing.quantity)

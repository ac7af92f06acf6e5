"""Integer arithmetic utilities for cents-based money.

All prices, amounts, and balances use int (cents). No float, no Decimal.
"""

from src.mp_common.errors import InvalidInputError


def require_positive_cents(amount: int, what: str = "amount") -> None:
    """Reject zero, negative and non-integer money values."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidInputError(f"{what} must be a positive number of cents, got {amount!r}")


def order_amount(unit_price_cents: int, quantity: int) -> int:
    """Total charged for `quantity` units at `unit_price_cents` each."""
    return unit_price_cents * quantity


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 2000 -> '$20.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"

from src.mp_common.errors import InvalidInputError

MAX_ORDER_QUANTITY = 10_000


def check_order_quantity(quantity: int) -> None:
    """Raise InvalidInputError if quantity is not an int in [1, MAX_ORDER_QUANTITY]."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInputError(f"quantity must be an integer, got {quantity!r}")
    if not (1 <= quantity <= MAX_ORDER_QUANTITY):
        raise InvalidInputError(f"quantity {quantity} must be in [1, {MAX_ORDER_QUANTITY}]")

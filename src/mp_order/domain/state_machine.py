"""Order lifecycle transitions.

    pending_payment      -> awaiting_fulfillment | cancelled
    awaiting_fulfillment -> in_review | cancelled
    in_review            -> completed | refunded
"""
from src.mp_common.enums import OrderState, enum_value
from src.mp_common.errors import InvalidInputError, InvalidStateTransitionError

_S = OrderState

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    _S.PENDING_PAYMENT.value: frozenset(
        {_S.AWAITING_FULFILLMENT.value, _S.CANCELLED.value}
    ),
    _S.AWAITING_FULFILLMENT.value: frozenset({_S.IN_REVIEW.value, _S.CANCELLED.value}),
    _S.IN_REVIEW.value: frozenset({_S.COMPLETED.value, _S.REFUNDED.value}),
    _S.COMPLETED.value: frozenset(),
    _S.CANCELLED.value: frozenset(),
    _S.REFUNDED.value: frozenset(),
}


def parse_state(value: "str | OrderState") -> str:
    """Normalize to the stored string; InvalidInputError for unknown states."""
    state = enum_value(value)
    if state not in ALLOWED_TRANSITIONS:
        raise InvalidInputError(f"unknown order state {state!r}")
    return state


def can_transition(current: str, target: str) -> bool:
    return enum_value(target) in ALLOWED_TRANSITIONS.get(enum_value(current), frozenset())


def check_transition(order_id: str, current: str, target: "str | OrderState") -> str:
    """Return the normalized target state or raise InvalidStateTransitionError."""
    target_value = enum_value(target)
    if not can_transition(current, target_value):
        raise InvalidStateTransitionError(order_id, current, target_value)
    return target_value

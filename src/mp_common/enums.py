"""Global enums — must match DB CHECK constraints exactly.

Ref: alembic/versions/003_create_listings.py, 004_create_orders.py, 005_create_ledger_entries.py
"""

from enum import Enum


class ListingCategory(str, Enum):
    PRODUCT = "product"
    EXPERIENCE = "experience"


class OrderState(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    AWAITING_FULFILLMENT = "awaiting_fulfillment"
    IN_REVIEW = "in_review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class LedgerEntryType(str, Enum):
    # Money entering the platform's hold
    ESCROW = "ESCROW"
    # Money leaving the hold (to seller / back to buyer)
    PAYOUT = "PAYOUT"
    REFUND = "REFUND"
    # Administrative correction, never a mutation of history
    REVERSAL = "REVERSAL"


class ActorRole(str, Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"
    SYSTEM = "SYSTEM"
    ADMIN = "ADMIN"


def enum_value(value: "str | Enum") -> str:
    """Plain string for an enum member or a raw value (DB params, set lookups)."""
    return value.value if isinstance(value, Enum) else value

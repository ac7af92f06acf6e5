"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User standing
  2xxx: Listing / inventory
  3xxx: Order
  4xxx: Ledger / escrow
  9xxx: Generic (input, conflict, internal)

Callers branch on the exception class (or `code`), never on `message`.
"""

from src.mp_common.enums import ActorRole


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    """Any referenced row (user, listing, order, ledger entry) is absent."""


class AccountFrozenError(AppError):
    """A suspended account tried to take part in a purchase.

    `role` tells buyer and seller variants apart.
    """

    def __init__(self, code: int, message: str, http_status: int, role: ActorRole) -> None:
        self.role = role
        super().__init__(code, message, http_status)


# --- 1xxx: User standing ---

class BuyerFrozenError(AccountFrozenError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1001, f"Buyer account is frozen: {user_id}", 403, ActorRole.BUYER)


class SellerFrozenError(AccountFrozenError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1002, f"Seller account is frozen: {user_id}", 422, ActorRole.SELLER)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1003, f"User not found: {user_id}", 404)


# --- 2xxx: Listing ---

class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(2001, f"Listing not found: {listing_id}", 404)


class InsufficientQuantityError(AppError):
    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            2002,
            f"Insufficient quantity: requested {requested}, available {available}",
            422,
        )


class ListingNotAvailableError(AppError):
    def __init__(self, listing_id: str, reason: str) -> None:
        super().__init__(2003, f"Listing {listing_id} is not available: {reason}", 422)


# --- 3xxx: Order ---

class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__(3001, f"Order not found: {order_id}", 404)


class SelfPurchaseError(AppError):
    def __init__(self) -> None:
        super().__init__(3002, "Sellers cannot purchase their own listing", 422)


class InvalidStateTransitionError(AppError):
    def __init__(
        self, order_id: str, current: str, target: str, reason: str | None = None
    ) -> None:
        message = f"Order {order_id} cannot move from {current} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(3003, message, 409)


# --- 4xxx: Ledger ---

class InsufficientEscrowError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            4001,
            f"Insufficient escrow balance: required {required} cents, available {available} cents",
            422,
        )


class LedgerEntryNotFoundError(NotFoundError):
    def __init__(self, entry_id: int) -> None:
        super().__init__(4002, f"Ledger entry not found: {entry_id}", 404)


# --- 9xxx: Generic ---

class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, f"Invalid input: {detail}", 422)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ConflictError(AppError):
    def __init__(self, detail: str = "Resource conflict") -> None:
        super().__init__(9003, detail, 409)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(9004, detail, 403)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(9005, "Invalid or expired token", 401)

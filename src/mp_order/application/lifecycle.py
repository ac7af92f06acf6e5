"""OrderLifecycleService — post-purchase workflow steps.

Every step runs in its own unit of work and starts with the order-row
locking read, so payout / refund / reversal for one order never race each
other's balance checks. The caller's id is checked against the order's
buyer and seller before the state machine is consulted:

    confirm_payment      buyer, admin
    confirm_fulfillment  seller
    complete_order       buyer, seller once the review window has closed; admin any time
    cancel_order         buyer, admin
    refund_order         admin
"""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.datetime_utils import deadline_after, utc_now
from src.mp_common.enums import ActorRole, OrderState
from src.mp_common.errors import (
    InsufficientEscrowError,
    InvalidStateTransitionError,
    OrderNotFoundError,
)
from src.mp_common.ids import require_uuid
from src.mp_common.unit_of_work import SessionFactory, run_atomic
from src.mp_ledger.application.service import LedgerService
from src.mp_ledger.domain.models import LedgerEntry
from src.mp_listing.domain.repository import ListingInventoryProtocol
from src.mp_listing.infrastructure.persistence import ListingRepository
from src.mp_order.domain.models import Order
from src.mp_order.domain.repository import OrderLockingProtocol
from src.mp_order.domain.state_machine import check_transition
from src.mp_order.infrastructure.persistence import OrderRepository
from src.mp_risk.rules.order_access import check_order_actor

_module_logger = logging.getLogger(__name__)

_B, _S, _A = ActorRole.BUYER, ActorRole.SELLER, ActorRole.ADMIN

Step = Callable[[AsyncSession, Order], Awaitable[None]]


class OrderLifecycleService:
    def __init__(
        self,
        session_factory: SessionFactory,
        orders: OrderLockingProtocol | None = None,
        listings: ListingInventoryProtocol | None = None,
        ledger: LedgerService | None = None,
        seller_response_hours: int = 48,
        review_window_hours: int = 72,
        logger: logging.Logger | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._orders: OrderLockingProtocol = orders or OrderRepository()
        self._listings: ListingInventoryProtocol = listings or ListingRepository()
        self._ledger = ledger or LedgerService()
        self._seller_response_hours = seller_response_hours
        self._review_window_hours = review_window_hours
        self._logger = logger or _module_logger

    async def confirm_payment(
        self, order_id: str, actor_id: str, is_admin: bool = False
    ) -> Order:
        """pending_payment -> awaiting_fulfillment; the escrow must already be recorded."""

        async def _step(db: AsyncSession, order: Order) -> None:
            if not await self._ledger.has_escrow_entry(db, order_id):
                raise InsufficientEscrowError(order.amount, 0)
            order.seller_respond_by = deadline_after(self._seller_response_hours)

        return await self._transition(
            order_id, OrderState.AWAITING_FULFILLMENT, _step,
            "confirm payment", actor_id, (_B, _A), is_admin,
        )

    async def confirm_fulfillment(self, order_id: str, seller_id: str) -> Order:
        """awaiting_fulfillment -> in_review; only the order's seller may confirm."""

        async def _step(db: AsyncSession, order: Order) -> None:
            order.review_ends_at = deadline_after(self._review_window_hours)

        return await self._transition(
            order_id, OrderState.IN_REVIEW, _step, "confirm fulfillment", seller_id, (_S,)
        )

    async def complete_order(
        self, order_id: str, actor_id: str, is_admin: bool = False
    ) -> Order:
        """in_review -> completed; the remaining escrow is paid out to the seller.

        Buyer and seller can only complete once `review_ends_at` has passed;
        an admin may close the review early.
        """

        async def _step(db: AsyncSession, order: Order) -> None:
            if not is_admin and order.review_ends_at is not None:
                if utc_now() < order.review_ends_at:
                    raise InvalidStateTransitionError(
                        order_id,
                        order.state,
                        OrderState.COMPLETED.value,
                        f"review window open until {order.review_ends_at.isoformat()}",
                    )
            balance = await self._ledger.compute_balance(db, order_id)
            if balance.escrow_balance > 0:
                await self._ledger.record_payout(db, order_id, balance.escrow_balance)

        return await self._transition(
            order_id, OrderState.COMPLETED, _step,
            "complete", actor_id, (_B, _S, _A), is_admin,
        )

    async def cancel_order(
        self,
        order_id: str,
        actor_id: str,
        notes: str | None = None,
        is_admin: bool = False,
    ) -> Order:
        """Cancel before review: refund the buyer and return units to the listing."""

        async def _step(db: AsyncSession, order: Order) -> None:
            balance = await self._ledger.compute_balance(db, order_id)
            if balance.escrow_balance > 0:
                await self._ledger.record_refund(db, order_id, balance.escrow_balance, notes)
            await self._listings.restock(db, order.listing_id, order.quantity)

        return await self._transition(
            order_id, OrderState.CANCELLED, _step, "cancel", actor_id, (_B, _A), is_admin
        )

    async def refund_order(
        self,
        order_id: str,
        actor_id: str,
        notes: str | None = None,
        is_admin: bool = False,
    ) -> Order:
        """in_review -> refunded; the remaining escrow goes back to the buyer."""

        async def _step(db: AsyncSession, order: Order) -> None:
            balance = await self._ledger.compute_balance(db, order_id)
            if balance.escrow_balance > 0:
                await self._ledger.record_refund(db, order_id, balance.escrow_balance, notes)

        return await self._transition(
            order_id, OrderState.REFUNDED, _step, "refund", actor_id, (_A,), is_admin
        )

    async def record_reversal(
        self, order_id: str, amount: int, notes: str, admin_id: str
    ) -> LedgerEntry:
        """Administrative correction; the order's state is left untouched."""
        order_id = require_uuid(order_id, OrderNotFoundError)

        async def _reverse(db: AsyncSession) -> LedgerEntry:
            await self._lock(db, order_id)
            return await self._ledger.record_reversal(db, order_id, amount, notes, admin_id)

        return await run_atomic(self._session_factory, _reverse)

    # ------------------------------------------------------------------

    async def _lock(self, db: AsyncSession, order_id: str) -> Order:
        order = await self._orders.get_for_update(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def _transition(
        self,
        order_id: str,
        target: OrderState,
        step: Step,
        action: str,
        actor_id: str,
        allowed: tuple[ActorRole, ...],
        is_admin: bool = False,
    ) -> Order:
        order_id = require_uuid(order_id, OrderNotFoundError)

        async def _body(db: AsyncSession) -> tuple[Order, str]:
            order = await self._lock(db, order_id)
            check_order_actor(
                action, actor_id, order.buyer_id, order.seller_id, allowed, is_admin
            )
            previous = order.state
            new_state = check_transition(order_id, previous, target)
            await step(db, order)
            order.state = new_state
            await self._orders.update(db, order)
            return order, previous

        order, previous = await run_atomic(self._session_factory, _body)
        self._logger.info(
            "Order %s: %s -> %s (by %s)", order_id, previous, order.state, actor_id
        )
        return order

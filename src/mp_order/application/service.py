"""OrderService — the order transaction coordinator.

`create_order` composes the inventory guard, the standing guard, the order
table and the ledger into one unit of work:

    lock listing + seller -> validate -> lock buyer standing
      -> decrement quantity -> insert order -> append ESCROW -> commit

A failure at any step rolls the whole scope back; no decrement, order or
escrow entry from a failed attempt is ever visible.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.cents import order_amount
from src.mp_common.datetime_utils import utc_now
from src.mp_common.enums import ActorRole, OrderState
from src.mp_common.errors import (
    AppError,
    ListingNotFoundError,
    OrderNotFoundError,
    SellerFrozenError,
    UserNotFoundError,
)
from src.mp_common.ids import require_uuid
from src.mp_common.unit_of_work import SessionFactory, run_atomic, run_read
from src.mp_ledger.application.service import LedgerService
from src.mp_ledger.domain.models import BalanceCalculation, LedgerEntry
from src.mp_listing.domain.repository import ListingInventoryProtocol
from src.mp_listing.infrastructure.persistence import ListingRepository
from src.mp_order.domain.models import Order
from src.mp_order.domain.repository import OrderRepositoryProtocol
from src.mp_order.domain.state_machine import parse_state
from src.mp_order.infrastructure.persistence import OrderRepository
from src.mp_risk.rules.listing_availability import (
    check_listing_available,
    check_sufficient_quantity,
)
from src.mp_risk.rules.order_limit import check_order_quantity
from src.mp_risk.rules.self_purchase import check_not_self_purchase
from src.mp_user.application.guard import UserStandingGuard

_module_logger = logging.getLogger(__name__)


class OrderService:
    def __init__(
        self,
        session_factory: SessionFactory,
        listings: ListingInventoryProtocol | None = None,
        standing: UserStandingGuard | None = None,
        orders: OrderRepositoryProtocol | None = None,
        ledger: LedgerService | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._listings: ListingInventoryProtocol = listings or ListingRepository()
        self._standing = standing or UserStandingGuard()
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()
        self._ledger = ledger or LedgerService()
        self._logger = logger or _module_logger

    # ------------------------------------------------------------------
    # Purchase
    # ------------------------------------------------------------------

    async def create_order(self, buyer_id: str, listing_id: str, quantity: int) -> Order:
        check_order_quantity(quantity)
        buyer_id = require_uuid(buyer_id, UserNotFoundError)
        listing_id = require_uuid(listing_id, ListingNotFoundError)

        async def _purchase(db: AsyncSession) -> Order:
            return await self._purchase(db, buyer_id, listing_id, quantity)

        try:
            order = await run_atomic(self._session_factory, _purchase)
        except AppError as exc:
            self._logger.warning(
                "Purchase rejected: code=%d listing=%s buyer=%s (%s)",
                exc.code,
                listing_id,
                buyer_id,
                exc.message,
            )
            raise
        self._logger.info(
            "Order created: order=%s buyer=%s seller=%s quantity=%d amount=%d",
            order.id,
            order.buyer_id,
            order.seller_id,
            order.quantity,
            order.amount,
        )
        return order

    async def _purchase(
        self, db: AsyncSession, buyer_id: str, listing_id: str, quantity: int
    ) -> Order:
        listing = await self._listings.get_for_purchase(db, listing_id)

        check_not_self_purchase(buyer_id, listing.seller_id)
        check_listing_available(listing, utc_now())
        check_sufficient_quantity(listing, quantity)
        if listing.seller_is_frozen:
            raise SellerFrozenError(listing.seller_id)
        await self._standing.assert_not_frozen(db, buyer_id, ActorRole.BUYER, lock=True)

        # price as observed under the listing lock
        amount = order_amount(listing.price_cents, quantity)

        await self._listings.decrement_quantity(
            db, listing.id, listing.seller_id, listing.quantity - quantity
        )
        order = await self._orders.create(
            db,
            Order(
                listing_id=listing.id,
                buyer_id=buyer_id,
                seller_id=listing.seller_id,
                quantity=quantity,
                amount=amount,
                state=OrderState.PENDING_PAYMENT.value,
            ),
        )
        await self._ledger.record_escrow(db, str(order.id), amount, buyer_id)
        return order

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_all(self) -> list[Order]:
        """All orders, newest first."""
        return await run_read(self._session_factory, self._orders.list_all)

    async def get_by_id(self, order_id: str) -> Order:
        order_id = require_uuid(order_id, OrderNotFoundError)

        async def _get(db: AsyncSession) -> Order:
            return await self._require(db, order_id)

        return await run_read(self._session_factory, _get)

    async def get_ledger(self, order_id: str) -> list[LedgerEntry]:
        order_id = require_uuid(order_id, OrderNotFoundError)

        async def _ledger(db: AsyncSession) -> list[LedgerEntry]:
            await self._require(db, order_id)
            return await self._ledger.get_order_ledger(db, order_id)

        return await run_read(self._session_factory, _ledger)

    async def get_balance(self, order_id: str) -> BalanceCalculation:
        order_id = require_uuid(order_id, OrderNotFoundError)

        async def _balance(db: AsyncSession) -> BalanceCalculation:
            await self._require(db, order_id)
            return await self._ledger.compute_balance(db, order_id)

        return await run_read(self._session_factory, _balance)

    # ------------------------------------------------------------------
    # Administrative correction
    # ------------------------------------------------------------------

    async def update_administrative(
        self,
        order_id: str,
        state: str | None = None,
        seller_respond_by: datetime | None = None,
        review_ends_at: datetime | None = None,
    ) -> Order:
        """Overwrite the supplied fields without consulting the state machine."""
        order_id = require_uuid(order_id, OrderNotFoundError)
        new_state = parse_state(state) if state is not None else None

        async def _update(db: AsyncSession) -> Order:
            order = await self._orders.get_for_update(db, order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            if new_state is not None:
                order.state = new_state
            if seller_respond_by is not None:
                order.seller_respond_by = seller_respond_by
            if review_ends_at is not None:
                order.review_ends_at = review_ends_at
            await self._orders.update(db, order)
            return order

        order = await run_atomic(self._session_factory, _update)
        self._logger.info("Order updated administratively: order=%s state=%s", order.id, order.state)
        return order

    async def delete(self, order_id: str) -> None:
        """Orders with ledger entries are protected by the foreign key (ConflictError)."""
        order_id = require_uuid(order_id, OrderNotFoundError)

        async def _delete(db: AsyncSession) -> None:
            if not await self._orders.delete(db, order_id):
                raise OrderNotFoundError(order_id)

        await run_atomic(self._session_factory, _delete)
        self._logger.info("Order deleted: order=%s", order_id)

    # ------------------------------------------------------------------

    async def _require(self, db: AsyncSession, order_id: str) -> Order:
        order = await self._orders.get_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

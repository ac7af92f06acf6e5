"""mp_order REST API — purchase, lifecycle, ledger views and admin correction.

All routes require a bearer token; PUT / DELETE and reversals need the admin role.
Lifecycle steps pass the caller through; the service matches it against the
order's buyer and seller.
Services are built once by `create_app` and read from `app.state`.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.mp_common.response import ApiResponse, success_response
from src.mp_gateway.auth.dependencies import Actor, get_current_actor, require_admin
from src.mp_ledger.application.schemas import (
    BalanceResponse,
    LedgerEntryResponse,
    LedgerListResponse,
)
from src.mp_order.application.lifecycle import OrderLifecycleService
from src.mp_order.application.schemas import (
    CreateOrderRequest,
    OrderListResponse,
    OrderNotesRequest,
    OrderResponse,
    ReversalRequest,
    UpdateOrderRequest,
)
from src.mp_order.application.service import OrderService
from src.mp_order.domain.models import Order

router = APIRouter(prefix="/orders", tags=["orders"])


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_lifecycle_service(request: Request) -> OrderLifecycleService:
    return request.app.state.lifecycle_service


OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
LifecycleDep = Annotated[OrderLifecycleService, Depends(get_lifecycle_service)]
ActorDep = Annotated[Actor, Depends(get_current_actor)]
AdminDep = Annotated[Actor, Depends(require_admin)]


def _order_envelope(order: Order, request: Request) -> ApiResponse:
    return success_response(OrderResponse.from_domain(order).model_dump(mode="json"), request)


# ---------------------------------------------------------------------------
# Purchase and reads
# ---------------------------------------------------------------------------


@router.post("", status_code=201)
async def create_order(
    body: CreateOrderRequest,
    actor: ActorDep,
    service: OrderServiceDep,
    request: Request,
) -> ApiResponse:
    order = await service.create_order(actor.user_id, body.listing_id, body.quantity)
    return _order_envelope(order, request)


@router.get("")
async def list_orders(actor: ActorDep, service: OrderServiceDep, request: Request) -> ApiResponse:
    orders = await service.get_all()
    data = OrderListResponse(
        items=[OrderResponse.from_domain(o) for o in orders], total=len(orders)
    )
    return success_response(data.model_dump(mode="json"), request)


@router.get("/{order_id}")
async def get_order(
    order_id: str, actor: ActorDep, service: OrderServiceDep, request: Request
) -> ApiResponse:
    return _order_envelope(await service.get_by_id(order_id), request)


@router.get("/{order_id}/ledger")
async def get_order_ledger(
    order_id: str, actor: ActorDep, service: OrderServiceDep, request: Request
) -> ApiResponse:
    entries = await service.get_ledger(order_id)
    data = LedgerListResponse(items=[LedgerEntryResponse.from_domain(e) for e in entries])
    return success_response(data.model_dump(mode="json"), request)


@router.get("/{order_id}/balance")
async def get_order_balance(
    order_id: str, actor: ActorDep, service: OrderServiceDep, request: Request
) -> ApiResponse:
    balance = await service.get_balance(order_id)
    return success_response(BalanceResponse.from_domain(balance).model_dump(mode="json"), request)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@router.post("/{order_id}/confirm-payment")
async def confirm_payment(
    order_id: str, actor: ActorDep, lifecycle: LifecycleDep, request: Request
) -> ApiResponse:
    order = await lifecycle.confirm_payment(order_id, actor.user_id, actor.is_admin)
    return _order_envelope(order, request)


@router.post("/{order_id}/fulfill")
async def confirm_fulfillment(
    order_id: str, actor: ActorDep, lifecycle: LifecycleDep, request: Request
) -> ApiResponse:
    return _order_envelope(await lifecycle.confirm_fulfillment(order_id, actor.user_id), request)


@router.post("/{order_id}/complete")
async def complete_order(
    order_id: str, actor: ActorDep, lifecycle: LifecycleDep, request: Request
) -> ApiResponse:
    order = await lifecycle.complete_order(order_id, actor.user_id, actor.is_admin)
    return _order_envelope(order, request)


@router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    actor: ActorDep,
    lifecycle: LifecycleDep,
    request: Request,
    body: OrderNotesRequest | None = None,
) -> ApiResponse:
    order = await lifecycle.cancel_order(
        order_id, actor.user_id, notes=body.notes if body else None, is_admin=actor.is_admin
    )
    return _order_envelope(order, request)


@router.post("/{order_id}/refund")
async def refund_order(
    order_id: str,
    actor: ActorDep,
    lifecycle: LifecycleDep,
    request: Request,
    body: OrderNotesRequest | None = None,
) -> ApiResponse:
    order = await lifecycle.refund_order(
        order_id, actor.user_id, notes=body.notes if body else None, is_admin=actor.is_admin
    )
    return _order_envelope(order, request)


@router.post("/{order_id}/reversals", status_code=201)
async def record_reversal(
    order_id: str,
    body: ReversalRequest,
    admin: AdminDep,
    lifecycle: LifecycleDep,
    request: Request,
) -> ApiResponse:
    entry = await lifecycle.record_reversal(order_id, body.amount_cents, body.notes, admin.user_id)
    return success_response(LedgerEntryResponse.from_domain(entry).model_dump(mode="json"), request)


# ---------------------------------------------------------------------------
# Administrative correction
# ---------------------------------------------------------------------------


@router.put("/{order_id}")
async def update_order(
    order_id: str,
    body: UpdateOrderRequest,
    admin: AdminDep,
    service: OrderServiceDep,
    request: Request,
) -> ApiResponse:
    order = await service.update_administrative(
        order_id,
        state=body.state,
        seller_respond_by=body.seller_respond_by,
        review_ends_at=body.review_ends_at,
    )
    return _order_envelope(order, request)


@router.delete("/{order_id}")
async def delete_order(
    order_id: str, admin: AdminDep, service: OrderServiceDep, request: Request
) -> ApiResponse:
    await service.delete(order_id)
    return success_response({"order_id": order_id, "deleted": True}, request)

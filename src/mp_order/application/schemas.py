from datetime import datetime

from pydantic import AwareDatetime, BaseModel

from src.mp_common.cents import cents_to_display
from src.mp_order.domain.models import Order


class CreateOrderRequest(BaseModel):
    listing_id: str
    # range checked by the coordinator so the error uses the AppError envelope
    quantity: int


class UpdateOrderRequest(BaseModel):
    state: str | None = None
    seller_respond_by: AwareDatetime | None = None
    review_ends_at: AwareDatetime | None = None


class OrderNotesRequest(BaseModel):
    notes: str | None = None


class ReversalRequest(BaseModel):
    amount_cents: int
    notes: str


class OrderResponse(BaseModel):
    id: str
    listing_id: str
    buyer_id: str
    seller_id: str
    quantity: int
    amount_cents: int
    amount_display: str
    state: str
    seller_respond_by: datetime | None = None
    review_ends_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            listing_id=order.listing_id,
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            quantity=order.quantity,
            amount_cents=order.amount,
            amount_display=cents_to_display(order.amount),
            state=order.state,
            seller_respond_by=order.seller_respond_by,
            review_ends_at=order.review_ends_at,
            created_at=order.created_at,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int

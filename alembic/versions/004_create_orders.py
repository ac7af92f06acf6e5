"""004: create orders table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            listing_id          UUID            NOT NULL REFERENCES listings(id),
            buyer_id            UUID            NOT NULL REFERENCES users(id),
            seller_id           UUID            NOT NULL REFERENCES users(id),
            quantity            INT             NOT NULL,
            amount_cents        BIGINT          NOT NULL,
            state               VARCHAR(30)     NOT NULL DEFAULT 'pending_payment',
            seller_respond_by   TIMESTAMPTZ,
            review_ends_at      TIMESTAMPTZ,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_quantity_gte_1 CHECK (quantity >= 1),
            CONSTRAINT ck_orders_amount_gt_0 CHECK (amount_cents > 0),
            CONSTRAINT ck_orders_state CHECK (
                state IN (
                    'pending_payment', 'awaiting_fulfillment', 'in_review',
                    'completed', 'cancelled', 'refunded'
                )
            ),
            CONSTRAINT ck_orders_no_self_purchase CHECK (buyer_id <> seller_id)
        );
    """)
    op.execute("CREATE INDEX idx_orders_buyer ON orders (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_seller ON orders (seller_id, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_listing ON orders (listing_id);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
        BEFORE UPDATE ON orders
        FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")

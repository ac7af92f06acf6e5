"""003: create listings table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            seller_id           UUID            NOT NULL REFERENCES users(id),
            title               VARCHAR(200)    NOT NULL,
            description         TEXT,
            category            VARCHAR(20)     NOT NULL,
            price_cents         BIGINT          NOT NULL,
            quantity            INT             NOT NULL DEFAULT 1,
            pickup_instructions TEXT,
            expires_at          TIMESTAMPTZ,
            is_active           BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_category CHECK (category IN ('product', 'experience')),
            CONSTRAINT ck_listings_price_gt_0 CHECK (price_cents > 0),
            CONSTRAINT ck_listings_quantity_gte_0 CHECK (quantity >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller_id);")
    op.execute("""
        CREATE INDEX idx_listings_active
        ON listings (created_at DESC)
        WHERE is_active;
    """)
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
        BEFORE UPDATE ON listings
        FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")

"""005: create ledger_entries table

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE ledger_entries (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        UUID            NOT NULL REFERENCES orders(id) ON DELETE RESTRICT,
            entry_type      VARCHAR(20)     NOT NULL,
            amount          BIGINT          NOT NULL,
            actor_id        UUID,
            actor_type      VARCHAR(20),
            notes           TEXT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_ledger_entry_type CHECK (
                entry_type IN ('ESCROW', 'PAYOUT', 'REFUND', 'REVERSAL')
            ),
            CONSTRAINT ck_ledger_actor_type CHECK (
                actor_type IS NULL OR actor_type IN ('BUYER', 'SELLER', 'SYSTEM', 'ADMIN')
            ),
            CONSTRAINT ck_ledger_amount_gt_0 CHECK (amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_ledger_order_time ON ledger_entries (order_id, created_at, id);")
    op.execute("CREATE INDEX idx_ledger_order_type ON ledger_entries (order_id, entry_type);")
    op.execute("""
        CREATE TRIGGER trg_ledger_append_only
        BEFORE UPDATE OR DELETE ON ledger_entries
        FOR EACH ROW EXECUTE FUNCTION fn_ledger_append_only();
    """)
    op.execute("COMMENT ON TABLE ledger_entries IS 'Escrow ledger: append-only, amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_entries CASCADE;")

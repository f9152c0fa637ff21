"""005: create auction_results table

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
        CREATE TABLE auction_results (
            id                      VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            auction_id              VARCHAR(64)     NOT NULL REFERENCES auctions(id) ON DELETE CASCADE,
            item_id                 VARCHAR(64)     NOT NULL REFERENCES items(id) ON DELETE CASCADE,
            bid_id                  VARCHAR(64)     NOT NULL,
            winner_name             VARCHAR(100)    NOT NULL,
            quantity_requested      INT             NOT NULL,
            quantity_won            INT             NOT NULL,
            original_bid_per_unit   BIGINT          NOT NULL,
            price_per_unit_paid     BIGINT          NOT NULL,
            winning_amount          BIGINT          NOT NULL,
            refund_amount           BIGINT          NOT NULL,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_results_auction_item_winner UNIQUE (auction_id, item_id, winner_name),
            CONSTRAINT ck_results_quantity CHECK (
                quantity_won > 0 AND quantity_won <= quantity_requested
            ),
            CONSTRAINT ck_results_paid_lte_bid CHECK (price_per_unit_paid <= original_bid_per_unit),
            CONSTRAINT ck_results_refund_gte_0 CHECK (refund_amount >= 0),
            CONSTRAINT ck_results_winning_amount CHECK (
                winning_amount = quantity_won * price_per_unit_paid
            )
        );
    """)
    op.execute("CREATE INDEX idx_results_auction ON auction_results (auction_id, item_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS auction_results CASCADE;")

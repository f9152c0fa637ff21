"""004: create bids and bidder_registrations tables

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
        CREATE TABLE bids (
            id                  VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            auction_id          VARCHAR(64)     NOT NULL REFERENCES auctions(id) ON DELETE CASCADE,
            item_id             VARCHAR(64)     NOT NULL REFERENCES items(id) ON DELETE CASCADE,
            bidder_name         VARCHAR(100)    NOT NULL,
            bidder_email        VARCHAR(255),
            quantity_requested  INT             NOT NULL,
            price_per_unit      BIGINT          NOT NULL,
            bid_amount          BIGINT          NOT NULL,
            submitted_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_bids_auction_item_bidder  UNIQUE (auction_id, item_id, bidder_name),
            CONSTRAINT ck_bids_quantity_gt_0        CHECK (quantity_requested > 0),
            CONSTRAINT ck_bids_price_gt_0           CHECK (price_per_unit > 0),
            CONSTRAINT ck_bids_amount_consistency   CHECK (bid_amount = quantity_requested * price_per_unit)
        );
    """)
    op.execute("CREATE INDEX idx_bids_auction_bidder ON bids (auction_id, bidder_name);")
    op.execute("CREATE INDEX idx_bids_item_priority ON bids (item_id, price_per_unit DESC, submitted_at);")
    op.execute("""
        CREATE TRIGGER trg_bids_updated_at
            BEFORE UPDATE ON bids
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE bidder_registrations (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            auction_id      VARCHAR(64)     NOT NULL REFERENCES auctions(id) ON DELETE CASCADE,
            bidder_name     VARCHAR(100)    NOT NULL,
            bidder_email    VARCHAR(255),
            status          VARCHAR(20)     NOT NULL DEFAULT 'bidding',
            registered_at   TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            completed_at    TIMESTAMPTZ,
            CONSTRAINT uq_registrations_name    UNIQUE (auction_id, bidder_name),
            CONSTRAINT uq_registrations_email   UNIQUE (auction_id, bidder_email),
            CONSTRAINT ck_registrations_status  CHECK (status IN ('bidding', 'complete'))
        );
    """)
    op.execute("COMMENT ON TABLE bids IS 'Bid ledger: one live bid per (auction, item, bidder); resubmission overwrites';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bidder_registrations CASCADE;")
    op.execute("DROP TABLE IF EXISTS bids CASCADE;")

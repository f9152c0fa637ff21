"""003: create collections and items tables

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
        CREATE TABLE collections (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            auction_id      VARCHAR(64)     NOT NULL REFERENCES auctions(id) ON DELETE CASCADE,
            name            VARCHAR(200)    NOT NULL,
            description     TEXT,
            sort_order      INT             NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_collections_sort_order_gte_0 CHECK (sort_order >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_collections_auction ON collections (auction_id, sort_order);")
    op.execute("""
        CREATE TRIGGER trg_collections_updated_at
            BEFORE UPDATE ON collections
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE items (
            id              VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            collection_id   VARCHAR(64)     NOT NULL REFERENCES collections(id) ON DELETE CASCADE,
            name            VARCHAR(200)    NOT NULL,
            description     TEXT,
            starting_bid    BIGINT          NOT NULL,
            inventory       INT             NOT NULL,
            sort_order      INT             NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_items_starting_bid_gt_0   CHECK (starting_bid > 0),
            CONSTRAINT ck_items_inventory_gte_1     CHECK (inventory >= 1),
            CONSTRAINT ck_items_sort_order_gte_0    CHECK (sort_order >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_items_collection ON items (collection_id, sort_order);")
    op.execute("""
        CREATE TRIGGER trg_items_updated_at
            BEFORE UPDATE ON items
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS items CASCADE;")
    op.execute("DROP TABLE IF EXISTS collections CASCADE;")

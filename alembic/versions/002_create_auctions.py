"""002: create auctions table and slug generator

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE auctions (
            id                      VARCHAR(64)     PRIMARY KEY DEFAULT gen_random_uuid()::text,
            name                    VARCHAR(200)    NOT NULL,
            description             TEXT,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'draft',
            max_budget_per_bidder   BIGINT          NOT NULL,
            slug                    VARCHAR(255)    NOT NULL,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            closed_at               TIMESTAMPTZ,
            CONSTRAINT uq_auctions_slug             UNIQUE (slug),
            CONSTRAINT ck_auctions_budget_gt_0      CHECK (max_budget_per_bidder > 0),
            CONSTRAINT ck_auctions_status CHECK (
                status IN ('draft', 'active', 'paused', 'closed')
            ),
            CONSTRAINT ck_auctions_closed_at CHECK (
                (status = 'closed') = (closed_at IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_auctions_status ON auctions (status);")
    op.execute("""
        CREATE TRIGGER trg_auctions_updated_at
            BEFORE UPDATE ON auctions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    # "Spring Sale 2026!" -> "spring-sale-2026", then "-2", "-3" ... on collision
    op.execute("""
        CREATE OR REPLACE FUNCTION generate_auction_slug(p_name TEXT)
        RETURNS TEXT AS $$
        DECLARE
            base_slug   TEXT;
            candidate   TEXT;
            n           INT := 1;
        BEGIN
            base_slug := trim(BOTH '-' FROM regexp_replace(lower(p_name), '[^a-z0-9]+', '-', 'g'));
            IF base_slug = '' THEN
                base_slug := 'auction';
            END IF;
            candidate := base_slug;
            WHILE EXISTS (SELECT 1 FROM auctions WHERE slug = candidate) LOOP
                n := n + 1;
                candidate := base_slug || '-' || n;
            END LOOP;
            RETURN candidate;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("COMMENT ON TABLE auctions IS 'Quantity auctions: lifecycle status, per-bidder budget, routing slug';")


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS generate_auction_slug(TEXT);")
    op.execute("DROP TABLE IF EXISTS auctions CASCADE;")

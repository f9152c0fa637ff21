"""BidRepository — concrete implementation of BidRepositoryProtocol.

Raw text() SQL only. The bid upsert is a single INSERT ... ON CONFLICT statement,
so concurrent resubmissions of the same (auction, item, bidder) never produce
duplicates; the last commit wins.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_bidding.domain.models import Bid, BidderActivity, BidderRegistration

# ---------------------------------------------------------------------------
# SQL: bids
# ---------------------------------------------------------------------------

_BID_COLUMNS = """
    id, auction_id, item_id, bidder_name, bidder_email, quantity_requested,
    price_per_unit, bid_amount, submitted_at, created_at, updated_at
"""

# clock_timestamp(): the moment this statement ran, not the transaction start.
_UPSERT_BID_SQL = text(f"""
    INSERT INTO bids (
        auction_id, item_id, bidder_name, bidder_email,
        quantity_requested, price_per_unit, bid_amount, submitted_at
    ) VALUES (
        :auction_id, :item_id, :bidder_name, :bidder_email,
        :quantity, :price_per_unit, :bid_amount, clock_timestamp()
    )
    ON CONFLICT (auction_id, item_id, bidder_name) DO UPDATE
    SET bidder_email = COALESCE(EXCLUDED.bidder_email, bids.bidder_email),
        quantity_requested = EXCLUDED.quantity_requested,
        price_per_unit = EXCLUDED.price_per_unit,
        bid_amount = EXCLUDED.bid_amount,
        submitted_at = EXCLUDED.submitted_at
    RETURNING {_BID_COLUMNS}
""")

_DELETE_BID_SQL = text("""
    DELETE FROM bids
    WHERE auction_id = :auction_id AND item_id = :item_id AND bidder_name = :bidder_name
    RETURNING id
""")

_COMMITTED_AMOUNT_SQL = text("""
    SELECT COALESCE(SUM(bid_amount), 0) AS committed
    FROM bids
    WHERE auction_id = :auction_id
      AND bidder_name = :bidder_name
      AND item_id <> :exclude_item_id
""")

_LIST_BIDS_SQL = text(f"""
    SELECT {_BID_COLUMNS}
    FROM bids
    WHERE auction_id = :auction_id
    ORDER BY item_id, price_per_unit DESC, submitted_at, id
""")

_LIST_BIDDER_BIDS_SQL = text(f"""
    SELECT {_BID_COLUMNS}
    FROM bids
    WHERE auction_id = :auction_id AND bidder_name = :bidder_name
    ORDER BY submitted_at, id
""")

_DELETE_BIDS_SQL = text("DELETE FROM bids WHERE auction_id = :auction_id")

# ---------------------------------------------------------------------------
# SQL: bidder registrations
# ---------------------------------------------------------------------------

_REGISTRATION_COLUMNS = """
    id, auction_id, bidder_name, bidder_email, status, registered_at, completed_at
"""

# DO UPDATE (not DO NOTHING) so the row is always returned and row-locked until
# commit: concurrent submissions of one bidder serialize here.
_UPSERT_REGISTRATION_SQL = text(f"""
    INSERT INTO bidder_registrations (auction_id, bidder_name, bidder_email)
    VALUES (:auction_id, :bidder_name, :bidder_email)
    ON CONFLICT (auction_id, bidder_name) DO UPDATE
    SET bidder_email = COALESCE(EXCLUDED.bidder_email, bidder_registrations.bidder_email)
    RETURNING {_REGISTRATION_COLUMNS}
""")

_FIND_REGISTRATION_BY_EMAIL_SQL = text(f"""
    SELECT {_REGISTRATION_COLUMNS}
    FROM bidder_registrations
    WHERE auction_id = :auction_id AND bidder_email = :bidder_email
""")

_COMPLETE_REGISTRATION_SQL = text(f"""
    UPDATE bidder_registrations
    SET status = 'complete', completed_at = NOW()
    WHERE auction_id = :auction_id AND bidder_name = :bidder_name
    RETURNING {_REGISTRATION_COLUMNS}
""")

_LIST_REGISTRATIONS_SQL = text(f"""
    SELECT {_REGISTRATION_COLUMNS}
    FROM bidder_registrations
    WHERE auction_id = :auction_id
    ORDER BY registered_at, id
""")

_LIST_BIDDER_ACTIVITY_SQL = text("""
    SELECT r.id, r.auction_id, r.bidder_name, r.bidder_email, r.status,
           r.registered_at, r.completed_at,
           COUNT(b.id) AS total_bids,
           COALESCE(SUM(b.bid_amount), 0) AS total_bid_amount,
           COUNT(DISTINCT b.item_id) AS items_bid_on,
           MAX(b.submitted_at) AS last_bid_at
    FROM bidder_registrations r
    LEFT JOIN bids b
      ON b.auction_id = r.auction_id AND b.bidder_name = r.bidder_name
    WHERE r.auction_id = :auction_id
    GROUP BY r.id
    ORDER BY r.registered_at, r.id
""")

_DELETE_REGISTRATIONS_SQL = text(
    "DELETE FROM bidder_registrations WHERE auction_id = :auction_id"
)

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_bid(row: Any) -> Bid:
    return Bid(
        id=row.id,
        auction_id=row.auction_id,
        item_id=row.item_id,
        bidder_name=row.bidder_name,
        bidder_email=row.bidder_email,
        quantity_requested=row.quantity_requested,
        price_per_unit=row.price_per_unit,
        bid_amount=row.bid_amount,
        submitted_at=row.submitted_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_registration(row: Any) -> BidderRegistration:
    return BidderRegistration(
        id=row.id,
        auction_id=row.auction_id,
        bidder_name=row.bidder_name,
        bidder_email=row.bidder_email,
        status=row.status,
        registered_at=row.registered_at,
        completed_at=row.completed_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BidRepository:
    """Concrete repository for bids and bidder registrations."""

    # --- bids ---

    async def upsert_bid(
        self,
        db: AsyncSession,
        auction_id: str,
        item_id: str,
        bidder_name: str,
        bidder_email: str | None,
        quantity: int,
        price_per_unit: int,
    ) -> Bid:
        result = await db.execute(
            _UPSERT_BID_SQL,
            {
                "auction_id": auction_id,
                "item_id": item_id,
                "bidder_name": bidder_name,
                "bidder_email": bidder_email,
                "quantity": quantity,
                "price_per_unit": price_per_unit,
                "bid_amount": quantity * price_per_unit,
            },
        )
        return _row_to_bid(result.fetchone())

    async def delete_bid(
        self, db: AsyncSession, auction_id: str, item_id: str, bidder_name: str
    ) -> bool:
        result = await db.execute(
            _DELETE_BID_SQL,
            {"auction_id": auction_id, "item_id": item_id, "bidder_name": bidder_name},
        )
        return result.fetchone() is not None

    async def committed_amount(
        self, db: AsyncSession, auction_id: str, bidder_name: str, exclude_item_id: str
    ) -> int:
        """Sum of the bidder's live bid amounts on every item except `exclude_item_id`."""
        result = await db.execute(
            _COMMITTED_AMOUNT_SQL,
            {
                "auction_id": auction_id,
                "bidder_name": bidder_name,
                "exclude_item_id": exclude_item_id,
            },
        )
        return int(result.scalar_one())

    async def list_bids(self, db: AsyncSession, auction_id: str) -> list[Bid]:
        result = await db.execute(_LIST_BIDS_SQL, {"auction_id": auction_id})
        return [_row_to_bid(row) for row in result.fetchall()]

    async def list_bidder_bids(
        self, db: AsyncSession, auction_id: str, bidder_name: str
    ) -> list[Bid]:
        result = await db.execute(
            _LIST_BIDDER_BIDS_SQL, {"auction_id": auction_id, "bidder_name": bidder_name}
        )
        return [_row_to_bid(row) for row in result.fetchall()]

    async def delete_bids(self, db: AsyncSession, auction_id: str) -> int:
        result = await db.execute(_DELETE_BIDS_SQL, {"auction_id": auction_id})
        return result.rowcount

    # --- registrations ---

    async def register_bidder(
        self, db: AsyncSession, auction_id: str, bidder_name: str, bidder_email: str | None
    ) -> BidderRegistration:
        result = await db.execute(
            _UPSERT_REGISTRATION_SQL,
            {
                "auction_id": auction_id,
                "bidder_name": bidder_name,
                "bidder_email": bidder_email,
            },
        )
        return _row_to_registration(result.fetchone())

    async def find_registration_by_email(
        self, db: AsyncSession, auction_id: str, bidder_email: str
    ) -> BidderRegistration | None:
        result = await db.execute(
            _FIND_REGISTRATION_BY_EMAIL_SQL,
            {"auction_id": auction_id, "bidder_email": bidder_email},
        )
        row = result.fetchone()
        return _row_to_registration(row) if row else None

    async def complete_registration(
        self, db: AsyncSession, auction_id: str, bidder_name: str
    ) -> BidderRegistration | None:
        result = await db.execute(
            _COMPLETE_REGISTRATION_SQL,
            {"auction_id": auction_id, "bidder_name": bidder_name},
        )
        row = result.fetchone()
        return _row_to_registration(row) if row else None

    async def list_registrations(
        self, db: AsyncSession, auction_id: str
    ) -> list[BidderRegistration]:
        result = await db.execute(_LIST_REGISTRATIONS_SQL, {"auction_id": auction_id})
        return [_row_to_registration(row) for row in result.fetchall()]

    async def list_bidder_activity(
        self, db: AsyncSession, auction_id: str
    ) -> list[BidderActivity]:
        result = await db.execute(_LIST_BIDDER_ACTIVITY_SQL, {"auction_id": auction_id})
        return [
            BidderActivity(
                registration=_row_to_registration(row),
                total_bids=row.total_bids,
                total_bid_amount=int(row.total_bid_amount),
                items_bid_on=row.items_bid_on,
                last_bid_at=row.last_bid_at,
            )
            for row in result.fetchall()
        ]

    async def delete_registrations(self, db: AsyncSession, auction_id: str) -> int:
        result = await db.execute(_DELETE_REGISTRATIONS_SQL, {"auction_id": auction_id})
        return result.rowcount

"""ResultRepository — writes and reads auction_results.

replace_results deletes every row of the auction and inserts the new set in the
caller's transaction, so a close or recalculation either replaces the whole
result set or leaves the previous one untouched.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_allocation.domain.models import ItemAllocation
from src.qa_closing.domain.models import AuctionResult

_RESULT_COLUMNS = """
    id, auction_id, item_id, bid_id, winner_name, quantity_requested, quantity_won,
    original_bid_per_unit, price_per_unit_paid, winning_amount, refund_amount, created_at
"""

_DELETE_RESULTS_SQL = text("DELETE FROM auction_results WHERE auction_id = :auction_id")

_INSERT_RESULT_SQL = text(f"""
    INSERT INTO auction_results (
        auction_id, item_id, bid_id, winner_name, quantity_requested, quantity_won,
        original_bid_per_unit, price_per_unit_paid, winning_amount, refund_amount
    ) VALUES (
        :auction_id, :item_id, :bid_id, :winner_name, :quantity_requested, :quantity_won,
        :original_bid_per_unit, :price_per_unit_paid, :winning_amount, :refund_amount
    )
    RETURNING {_RESULT_COLUMNS}
""")

_LIST_RESULTS_SQL = text(f"""
    SELECT {_RESULT_COLUMNS}
    FROM auction_results
    WHERE auction_id = :auction_id
    ORDER BY item_id, original_bid_per_unit DESC, winner_name
""")


def _row_to_result(row: Any) -> AuctionResult:
    return AuctionResult(
        id=row.id,
        auction_id=row.auction_id,
        item_id=row.item_id,
        bid_id=row.bid_id,
        winner_name=row.winner_name,
        quantity_requested=row.quantity_requested,
        quantity_won=row.quantity_won,
        original_bid_per_unit=row.original_bid_per_unit,
        price_per_unit_paid=row.price_per_unit_paid,
        winning_amount=row.winning_amount,
        refund_amount=row.refund_amount,
        created_at=row.created_at,
    )


class ResultRepository:
    async def replace_results(
        self, db: AsyncSession, auction_id: str, allocations: list[ItemAllocation]
    ) -> list[AuctionResult]:
        await db.execute(_DELETE_RESULTS_SQL, {"auction_id": auction_id})
        written: list[AuctionResult] = []
        for item in allocations:
            for a in item.allocations:
                result = await db.execute(
                    _INSERT_RESULT_SQL,
                    {
                        "auction_id": auction_id,
                        "item_id": item.item_id,
                        "bid_id": a.bid_id,
                        "winner_name": a.bidder_name,
                        "quantity_requested": a.quantity_requested,
                        "quantity_won": a.quantity_won,
                        "original_bid_per_unit": a.original_bid_per_unit,
                        "price_per_unit_paid": a.price_per_unit_paid,
                        "winning_amount": a.winning_amount,
                        "refund_amount": a.refund_amount,
                    },
                )
                written.append(_row_to_result(result.fetchone()))
        return written

    async def list_results(self, db: AsyncSession, auction_id: str) -> list[AuctionResult]:
        result = await db.execute(_LIST_RESULTS_SQL, {"auction_id": auction_id})
        return [_row_to_result(row) for row in result.fetchall()]

    async def delete_results(self, db: AsyncSession, auction_id: str) -> int:
        result = await db.execute(_DELETE_RESULTS_SQL, {"auction_id": auction_id})
        return result.rowcount

"""AuctionCloserService — close, recalculate, reset.

Every operation is one transaction that starts by taking the auction row
FOR UPDATE. Bid submission holds FOR SHARE on the same row, so the ledger
snapshot read here cannot change until we commit. Status writes are guarded
by the expected status; any failure rolls back everything, including the
result rows.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_allocation.domain.invariants import verify_allocations
from src.qa_allocation.domain.models import ItemAllocation
from src.qa_auction.domain.models import Auction, Item
from src.qa_auction.domain.repository import AuctionRepositoryProtocol
from src.qa_auction.domain.slug import new_epoch_slug
from src.qa_auction.domain.state_machine import transition
from src.qa_auction.infrastructure.persistence import AuctionRepository
from src.qa_bidding.domain.repository import BidRepositoryProtocol
from src.qa_bidding.infrastructure.persistence import BidRepository
from src.qa_closing.application.schemas import (
    ClearingResponse,
    ItemClearingResponse,
    ResetAuctionResponse,
)
from src.qa_closing.domain.repository import ResultRepositoryProtocol
from src.qa_closing.domain.snapshot import allocate_snapshot, group_bids
from src.qa_closing.infrastructure.persistence import ResultRepository
from src.qa_common.cents import cents_to_display
from src.qa_common.datetime_utils import iso_or_none
from src.qa_common.enums import AuctionStatus, LifecycleAction
from src.qa_common.errors import (
    AuctionNotClosedError,
    AuctionNotFoundError,
    ConcurrentModificationError,
    ResetNotConfirmedError,
)

logger = logging.getLogger(__name__)


class AuctionCloserService:
    def __init__(
        self,
        auction_repo: AuctionRepositoryProtocol | None = None,
        bid_repo: BidRepositoryProtocol | None = None,
        result_repo: ResultRepositoryProtocol | None = None,
    ) -> None:
        self._auctions: AuctionRepositoryProtocol = auction_repo or AuctionRepository()
        self._bids: BidRepositoryProtocol = bid_repo or BidRepository()
        self._results: ResultRepositoryProtocol = result_repo or ResultRepository()

    async def close_auction(self, db: AsyncSession, auction_id: str) -> ClearingResponse:
        try:
            auction = await self._lock_auction(db, auction_id)
            expected, target = transition(auction.status, LifecycleAction.CLOSE)
            items, allocations = await self._allocate(db, auction)
            await self._results.replace_results(db, auction_id, allocations)
            closed = await self._auctions.transition_status(db, auction_id, expected, target)
            if closed is None:
                raise ConcurrentModificationError(auction_id, expected)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Close failed: auction=%s", auction_id)
            raise

        response = _clearing_response(closed, items, allocations)
        logger.info(
            "Auction closed: id=%s items=%d units_sold=%d revenue=%d refunds=%d",
            auction_id,
            len(items),
            response.total_units_sold,
            response.total_revenue_cents,
            response.total_refunds_cents,
        )
        return response

    async def recalculate_results(
        self, db: AsyncSession, auction_id: str
    ) -> ClearingResponse:
        """Re-run allocation over the unchanged ledger; same input, same rows."""
        try:
            auction = await self._lock_auction(db, auction_id)
            if auction.status != AuctionStatus.CLOSED:
                raise AuctionNotClosedError(auction_id, auction.status)
            items, allocations = await self._allocate(db, auction)
            await self._results.replace_results(db, auction_id, allocations)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        response = _clearing_response(auction, items, allocations)
        logger.info(
            "Results recalculated: id=%s items=%d units_sold=%d revenue=%d",
            auction_id,
            len(items),
            response.total_units_sold,
            response.total_revenue_cents,
        )
        return response

    async def reset_auction(
        self, db: AsyncSession, auction_id: str, confirm: bool
    ) -> ResetAuctionResponse:
        """Wipe bids, registrations and results; start a fresh epoch in draft."""
        if not confirm:
            raise ResetNotConfirmedError()
        try:
            auction = await self._lock_auction(db, auction_id)
            expected, target = transition(auction.status, LifecycleAction.RESET)
            deleted_results = await self._results.delete_results(db, auction_id)
            deleted_bids = await self._bids.delete_bids(db, auction_id)
            deleted_registrations = await self._bids.delete_registrations(db, auction_id)
            reset = await self._auctions.transition_status(
                db, auction_id, expected, target, new_slug=new_epoch_slug()
            )
            if reset is None:
                raise ConcurrentModificationError(auction_id, expected)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Auction reset: id=%s slug=%s results=%d bids=%d registrations=%d",
            auction_id, reset.slug, deleted_results, deleted_bids, deleted_registrations,
        )
        return ResetAuctionResponse(
            auction_id=auction_id,
            status=reset.status,
            slug=reset.slug,
            deleted_results=deleted_results,
            deleted_bids=deleted_bids,
            deleted_registrations=deleted_registrations,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _lock_auction(self, db: AsyncSession, auction_id: str) -> Auction:
        auction = await self._auctions.get_auction_for_update(db, auction_id)
        if auction is None:
            raise AuctionNotFoundError(auction_id)
        return auction

    async def _allocate(
        self, db: AsyncSession, auction: Auction
    ) -> tuple[list[Item], list[ItemAllocation]]:
        items = await self._auctions.list_items(db, auction.id)
        bids_by_item = group_bids(await self._bids.list_bids(db, auction.id))
        allocations = allocate_snapshot(items, bids_by_item)
        verify_allocations(auction.id, allocations, bids_by_item, auction.max_budget_per_bidder)
        return items, allocations


def _clearing_response(
    auction: Auction, items: list[Item], allocations: list[ItemAllocation]
) -> ClearingResponse:
    revenue = sum(a.winning_amount for r in allocations for a in r.allocations)
    refunds = sum(a.refund_amount for r in allocations for a in r.allocations)
    return ClearingResponse(
        auction_id=auction.id,
        status=auction.status,
        closed_at=iso_or_none(auction.closed_at),
        total_units_sold=sum(r.quantity_allocated for r in allocations),
        total_revenue_cents=revenue,
        total_revenue_display=cents_to_display(revenue),
        total_refunds_cents=refunds,
        total_refunds_display=cents_to_display(refunds),
        items=[
            ItemClearingResponse.from_domain(item, result)
            for item, result in zip(items, allocations)
        ],
    )

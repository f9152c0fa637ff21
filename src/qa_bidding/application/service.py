"""BiddingApplicationService — the bid ledger.

submit_bid flow (single transaction):
  1. Read the auction FOR SHARE (a concurrent close holds FOR UPDATE and waits
     for us, or we wait for it and then see status=closed)
  2. status must be active
  3. item must belong to the auction
  4. 0 <= quantity <= inventory
  5. quantity 0 withdraws any existing bid and stops here
  6. price_per_unit >= starting_bid
  7. register the bidder (row lock serializes one bidder's submissions)
  8. committed amount on other items + this bid <= max_budget_per_bidder
  9. atomic upsert keyed by (auction, item, bidder)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_auction.domain.models import Auction
from src.qa_auction.domain.repository import AuctionRepositoryProtocol
from src.qa_auction.infrastructure.persistence import AuctionRepository
from src.qa_bidding.application.schemas import (
    BidderActivityResponse,
    BidderListResponse,
    BidderRegistrationResponse,
    BidListResponse,
    BidResponse,
    RegisterBidderRequest,
    SubmitBidRequest,
    SubmitBidResponse,
)
from src.qa_bidding.domain.models import BidderRegistration
from src.qa_bidding.domain.repository import BidRepositoryProtocol
from src.qa_bidding.infrastructure.persistence import BidRepository
from src.qa_common.cents import cents_to_display
from src.qa_common.enums import AuctionStatus, BidderStatus
from src.qa_common.errors import (
    AuctionNotFoundError,
    AuctionNotOpenError,
    BidBelowMinimumError,
    BidderEmailTakenError,
    BidderNotRegisteredError,
    BudgetExceededError,
    ItemNotFoundError,
    QuantityOutOfRangeError,
)

logger = logging.getLogger(__name__)


class BiddingApplicationService:
    def __init__(
        self,
        bid_repo: BidRepositoryProtocol | None = None,
        auction_repo: AuctionRepositoryProtocol | None = None,
    ) -> None:
        self._bids: BidRepositoryProtocol = bid_repo or BidRepository()
        self._auctions: AuctionRepositoryProtocol = auction_repo or AuctionRepository()

    async def submit_bid(
        self, db: AsyncSession, auction_id: str, req: SubmitBidRequest
    ) -> SubmitBidResponse:
        try:
            auction = await self._auctions.get_auction_for_share(db, auction_id)
            if auction is None:
                raise AuctionNotFoundError(auction_id)
            if auction.status != AuctionStatus.ACTIVE:
                raise AuctionNotOpenError(auction_id, auction.status)

            item = await self._auctions.get_item(db, req.item_id)
            if item is None or item.auction_id != auction_id:
                raise ItemNotFoundError(req.item_id)
            if not 0 <= req.quantity <= item.inventory:
                raise QuantityOutOfRangeError(req.quantity, item.inventory)

            if req.quantity == 0:
                removed = await self._bids.delete_bid(
                    db, auction_id, item.id, req.bidder_name
                )
                await db.commit()
                if removed:
                    logger.info(
                        "Bid withdrawn: auction=%s item=%s bidder=%s",
                        auction_id, item.id, req.bidder_name,
                    )
                return SubmitBidResponse(
                    item_id=item.id, bidder_name=req.bidder_name, bid_id=None, bid=None
                )

            if req.price_per_unit_cents < item.starting_bid:
                raise BidBelowMinimumError(req.price_per_unit_cents, item.starting_bid)

            await self._register(db, auction_id, req.bidder_name, req.bidder_email)

            committed = await self._bids.committed_amount(
                db, auction_id, req.bidder_name, exclude_item_id=item.id
            )
            total = committed + req.quantity * req.price_per_unit_cents
            if total > auction.max_budget_per_bidder:
                raise BudgetExceededError(total, auction.max_budget_per_bidder)

            bid = await self._bids.upsert_bid(
                db,
                auction_id,
                item.id,
                req.bidder_name,
                req.bidder_email,
                req.quantity,
                req.price_per_unit_cents,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Bid accepted: auction=%s item=%s bidder=%s qty=%d price=%d",
            auction_id, item.id, bid.bidder_name, bid.quantity_requested, bid.price_per_unit,
        )
        return SubmitBidResponse(
            item_id=item.id,
            bidder_name=bid.bidder_name,
            bid_id=bid.id,
            bid=BidResponse.from_domain(bid),
        )

    async def list_bidder_bids(
        self, db: AsyncSession, auction_id: str, bidder_name: str
    ) -> BidListResponse:
        auction = await self._require_auction(db, auction_id)
        bids = await self._bids.list_bidder_bids(db, auction_id, bidder_name)
        total = sum(b.bid_amount for b in bids)
        remaining = auction.max_budget_per_bidder - total
        return BidListResponse(
            auction_id=auction_id,
            bidder_name=bidder_name,
            total_bid_amount_cents=total,
            total_bid_amount_display=cents_to_display(total),
            budget_remaining_cents=remaining,
            budget_remaining_display=cents_to_display(remaining),
            items=[BidResponse.from_domain(b) for b in bids],
        )

    # ------------------------------------------------------------------
    # Bidder registrations
    # ------------------------------------------------------------------

    async def register_bidder(
        self, db: AsyncSession, auction_id: str, req: RegisterBidderRequest
    ) -> BidderRegistrationResponse:
        try:
            auction = await self._require_auction(db, auction_id)
            if auction.status == AuctionStatus.CLOSED:
                raise AuctionNotOpenError(auction_id, auction.status)
            registration = await self._register(
                db, auction_id, req.bidder_name, req.bidder_email
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return BidderRegistrationResponse.from_domain(registration)

    async def complete_bidder(
        self, db: AsyncSession, auction_id: str, bidder_name: str
    ) -> BidderRegistrationResponse:
        try:
            await self._require_auction(db, auction_id)
            registration = await self._bids.complete_registration(db, auction_id, bidder_name)
            if registration is None:
                raise BidderNotRegisteredError(bidder_name)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Bidder completed: auction=%s bidder=%s", auction_id, bidder_name)
        return BidderRegistrationResponse.from_domain(registration)

    async def list_bidders(self, db: AsyncSession, auction_id: str) -> BidderListResponse:
        await self._require_auction(db, auction_id)
        activity = await self._bids.list_bidder_activity(db, auction_id)
        return BidderListResponse(
            auction_id=auction_id,
            total_bidders=len(activity),
            completed_bidders=sum(
                1 for a in activity if a.registration.status == BidderStatus.COMPLETE
            ),
            items=[BidderActivityResponse.from_activity(a) for a in activity],
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_auction(self, db: AsyncSession, auction_id: str) -> Auction:
        auction = await self._auctions.get_auction(db, auction_id)
        if auction is None:
            raise AuctionNotFoundError(auction_id)
        return auction

    async def _register(
        self, db: AsyncSession, auction_id: str, bidder_name: str, bidder_email: str | None
    ) -> BidderRegistration:
        # DB UNIQUE (auction_id, bidder_email) is the final guard
        if bidder_email is not None:
            owner = await self._bids.find_registration_by_email(db, auction_id, bidder_email)
            if owner is not None and owner.bidder_name != bidder_name:
                raise BidderEmailTakenError(bidder_email)
        return await self._bids.register_bidder(db, auction_id, bidder_name, bidder_email)

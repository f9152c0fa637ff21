"""ResultsService — read-only results of a closed auction."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_auction.domain.repository import AuctionRepositoryProtocol
from src.qa_auction.infrastructure.persistence import AuctionRepository
from src.qa_bidding.domain.repository import BidRepositoryProtocol
from src.qa_bidding.infrastructure.persistence import BidRepository
from src.qa_closing.domain.repository import ResultRepositoryProtocol
from src.qa_closing.infrastructure.persistence import ResultRepository
from src.qa_common.datetime_utils import iso_or_none
from src.qa_common.enums import AuctionStatus
from src.qa_common.errors import (
    AuctionNotClosedError,
    AuctionNotFoundError,
    BidderNotRegisteredError,
)
from src.qa_results.application.schemas import AuctionResultsResponse, BidderSummaryResponse
from src.qa_results.domain.projection import AuctionResultsView, project_results


class ResultsService:
    def __init__(
        self,
        auction_repo: AuctionRepositoryProtocol | None = None,
        bid_repo: BidRepositoryProtocol | None = None,
        result_repo: ResultRepositoryProtocol | None = None,
    ) -> None:
        self._auctions: AuctionRepositoryProtocol = auction_repo or AuctionRepository()
        self._bids: BidRepositoryProtocol = bid_repo or BidRepository()
        self._results: ResultRepositoryProtocol = result_repo or ResultRepository()

    async def get_results(self, db: AsyncSession, auction_id: str) -> AuctionResultsResponse:
        auction = await self._auctions.get_auction(db, auction_id)
        if auction is None:
            raise AuctionNotFoundError(auction_id)
        view = await self._project(db, auction_id, auction.status, auction.max_budget_per_bidder)
        return AuctionResultsResponse.from_view(view, auction.name, iso_or_none(auction.closed_at))

    async def get_bidder_results(
        self, db: AsyncSession, auction_id: str, bidder_name: str
    ) -> BidderSummaryResponse:
        auction = await self._auctions.get_auction(db, auction_id)
        if auction is None:
            raise AuctionNotFoundError(auction_id)
        view = await self._project(db, auction_id, auction.status, auction.max_budget_per_bidder)
        for summary in view.bidders:
            if summary.bidder_name == bidder_name:
                return BidderSummaryResponse.from_domain(summary)
        raise BidderNotRegisteredError(bidder_name)

    async def _project(
        self, db: AsyncSession, auction_id: str, status: str, max_budget: int
    ) -> AuctionResultsView:
        if status != AuctionStatus.CLOSED:
            raise AuctionNotClosedError(auction_id, status)
        return project_results(
            auction_id,
            max_budget,
            items=await self._auctions.list_items(db, auction_id),
            bids=await self._bids.list_bids(db, auction_id),
            results=await self._results.list_results(db, auction_id),
            registrations=await self._bids.list_registrations(db, auction_id),
        )

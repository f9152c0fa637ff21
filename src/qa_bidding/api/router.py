"""qa_bidding REST endpoints (bidder side).

POST /auctions/{auction_id}/bids                           — submit / replace / withdraw (quantity 0)
GET  /auctions/{auction_id}/bids?bidder_name=              — a bidder's live bids
POST /auctions/{auction_id}/bidders                        — register a bidder
GET  /auctions/{auction_id}/bidders                        — registered bidders with bid stats
POST /auctions/{auction_id}/bidders/{bidder_name}/complete — mark bidding complete
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_bidding.application.schemas import RegisterBidderRequest, SubmitBidRequest
from src.qa_bidding.application.service import BiddingApplicationService
from src.qa_common.database import get_db_session
from src.qa_common.rate_limit import bid_rate_limit
from src.qa_common.response import ApiResponse, respond

router = APIRouter(tags=["bidding"])

_service = BiddingApplicationService()


@router.post(
    "/auctions/{auction_id}/bids",
    status_code=201,
    dependencies=[Depends(bid_rate_limit)],
)
async def submit_bid(
    auction_id: str,
    body: SubmitBidRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.submit_bid(db, auction_id, body)
    return respond(request, result.model_dump())


@router.get("/auctions/{auction_id}/bids")
async def list_bidder_bids(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    bidder_name: str = Query(..., min_length=1, max_length=100),
) -> ApiResponse:
    result = await _service.list_bidder_bids(db, auction_id, bidder_name.strip())
    return respond(request, result.model_dump())


@router.post("/auctions/{auction_id}/bidders", status_code=201)
async def register_bidder(
    auction_id: str,
    body: RegisterBidderRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.register_bidder(db, auction_id, body)
    return respond(request, result.model_dump())


@router.get("/auctions/{auction_id}/bidders")
async def list_bidders(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_bidders(db, auction_id)
    return respond(request, result.model_dump())


@router.post("/auctions/{auction_id}/bidders/{bidder_name}/complete")
async def complete_bidder(
    auction_id: str,
    bidder_name: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.complete_bidder(db, auction_id, bidder_name)
    return respond(request, result.model_dump())

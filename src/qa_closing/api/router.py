"""qa_closing REST endpoints.

POST /auctions/{auction_id}/close        — allocate every item and close (active only)
POST /auctions/{auction_id}/recalculate  — recompute results of a closed auction
POST /auctions/{auction_id}/reset        — body {"confirm": true}; back to draft
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_closing.application.schemas import ResetAuctionRequest
from src.qa_closing.application.service import AuctionCloserService
from src.qa_common.database import get_db_session
from src.qa_common.response import ApiResponse, respond

router = APIRouter(tags=["closing"])

_service = AuctionCloserService()


@router.post("/auctions/{auction_id}/close")
async def close_auction(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.close_auction(db, auction_id)
    return respond(request, result.model_dump())


@router.post("/auctions/{auction_id}/recalculate")
async def recalculate_results(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.recalculate_results(db, auction_id)
    return respond(request, result.model_dump())


@router.post("/auctions/{auction_id}/reset")
async def reset_auction(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: ResetAuctionRequest | None = None,
) -> ApiResponse:
    confirm = body.confirm if body is not None else False
    result = await _service.reset_auction(db, auction_id, confirm)
    return respond(request, result.model_dump())

"""qa_results REST endpoints.

GET /auctions/{auction_id}/results                        — full results (closed only)
GET /auctions/{auction_id}/results/bidders/{bidder_name}  — one bidder's summary
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_common.database import get_db_session
from src.qa_common.response import ApiResponse, respond
from src.qa_results.application.service import ResultsService

router = APIRouter(tags=["results"])

_service = ResultsService()


@router.get("/auctions/{auction_id}/results")
async def get_results(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_results(db, auction_id)
    return respond(request, result.model_dump())


@router.get("/auctions/{auction_id}/results/bidders/{bidder_name}")
async def get_bidder_results(
    auction_id: str,
    bidder_name: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_bidder_results(db, auction_id, bidder_name)
    return respond(request, result.model_dump())

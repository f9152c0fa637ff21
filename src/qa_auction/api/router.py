"""qa_auction REST endpoints (organizer side).

POST   /auctions                              — create (slug derived from name)
GET    /auctions                              — list, optional ?status=
GET    /auctions/by-slug/{slug}               — lookup by routing slug
GET    /auctions/{auction_id}                 — detail
PATCH  /auctions/{auction_id}                 — edit name/description/budget (draft only)
DELETE /auctions/{auction_id}                 — delete with everything it owns
POST   /auctions/{auction_id}/start|pause|resume
POST   /auctions/{auction_id}/collections     — add collection
GET    /auctions/{auction_id}/collections     — collections with their items
DELETE /collections/{collection_id}
POST   /collections/{collection_id}/items     — add item
POST   /collections/{collection_id}/items/import — bulk add from a text/csv body
PATCH  /items/{item_id}
DELETE /items/{item_id}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_auction.application.schemas import (
    CreateAuctionRequest,
    CreateCollectionRequest,
    CreateItemRequest,
    UpdateAuctionRequest,
    UpdateItemRequest,
)
from src.qa_auction.application.service import AuctionApplicationService
from src.qa_common.database import get_db_session
from src.qa_common.enums import AuctionStatus, LifecycleAction
from src.qa_common.response import ApiResponse, respond

router = APIRouter(tags=["auctions"])

_service = AuctionApplicationService()


# ---------------------------------------------------------------------------
# Auctions
# ---------------------------------------------------------------------------


@router.post("/auctions", status_code=201)
async def create_auction(
    body: CreateAuctionRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_auction(db, body)
    return respond(request, result.model_dump())


@router.get("/auctions")
async def list_auctions(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: AuctionStatus | None = Query(None, description="Filter by status"),
) -> ApiResponse:
    result = await _service.list_auctions(db, status.value if status else None)
    return respond(request, result.model_dump())


@router.get("/auctions/by-slug/{slug}")
async def get_auction_by_slug(
    slug: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_auction_by_slug(db, slug)
    return respond(request, result.model_dump())


@router.get("/auctions/{auction_id}")
async def get_auction(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_auction(db, auction_id)
    return respond(request, result.model_dump())


@router.patch("/auctions/{auction_id}")
async def update_auction(
    auction_id: str,
    body: UpdateAuctionRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_auction(db, auction_id, body)
    return respond(request, result.model_dump())


@router.delete("/auctions/{auction_id}")
async def delete_auction(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return respond(request, await _service.delete_auction(db, auction_id))


@router.post("/auctions/{auction_id}/start")
async def start_auction(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.change_status(db, auction_id, LifecycleAction.START)
    return respond(request, result.model_dump())


@router.post("/auctions/{auction_id}/pause")
async def pause_auction(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.change_status(db, auction_id, LifecycleAction.PAUSE)
    return respond(request, result.model_dump())


@router.post("/auctions/{auction_id}/resume")
async def resume_auction(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.change_status(db, auction_id, LifecycleAction.RESUME)
    return respond(request, result.model_dump())


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@router.post("/auctions/{auction_id}/collections", status_code=201)
async def create_collection(
    auction_id: str,
    body: CreateCollectionRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_collection(db, auction_id, body)
    return respond(request, result.model_dump())


@router.get("/auctions/{auction_id}/collections")
async def list_collections(
    auction_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_collections(db, auction_id)
    return respond(request, result.model_dump())


@router.delete("/collections/{collection_id}")
async def delete_collection(
    collection_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return respond(request, await _service.delete_collection(db, collection_id))


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@router.post("/collections/{collection_id}/items", status_code=201)
async def create_item(
    collection_id: str,
    body: CreateItemRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_item(db, collection_id, body)
    return respond(request, result.model_dump())


@router.post("/collections/{collection_id}/items/import", status_code=201)
async def import_items(
    collection_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    content = (await request.body()).decode("utf-8-sig")
    result = await _service.import_items(db, collection_id, content)
    return respond(request, result.model_dump())


@router.patch("/items/{item_id}")
async def update_item(
    item_id: str,
    body: UpdateItemRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_item(db, item_id, body)
    return respond(request, result.model_dump())


@router.delete("/items/{item_id}")
async def delete_item(
    item_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return respond(request, await _service.delete_item(db, item_id))

"""AuctionApplicationService — auction, collection and item administration.

Mutations commit on success and roll back on any error; reads run without an
explicit transaction. Close / recalculate / reset live in qa_closing.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_auction.application.csv_import import parse_items_csv
from src.qa_auction.application.schemas import (
    AuctionListResponse,
    AuctionResponse,
    CollectionListResponse,
    CollectionResponse,
    CreateAuctionRequest,
    CreateCollectionRequest,
    CreateItemRequest,
    ItemImportResponse,
    ItemResponse,
    UpdateAuctionRequest,
    UpdateItemRequest,
)
from src.qa_auction.domain.models import Auction, Collection, NewItem
from src.qa_auction.domain.repository import AuctionRepositoryProtocol
from src.qa_auction.domain.state_machine import is_editable, items_editable, transition
from src.qa_auction.infrastructure.persistence import AuctionRepository
from src.qa_common.enums import LifecycleAction
from src.qa_common.errors import (
    AuctionNotEditableError,
    AuctionNotFoundError,
    CollectionNotFoundError,
    ConcurrentModificationError,
    ItemNotFoundError,
)

logger = logging.getLogger(__name__)


class AuctionApplicationService:
    def __init__(self, repo: AuctionRepositoryProtocol | None = None) -> None:
        self._repo: AuctionRepositoryProtocol = repo or AuctionRepository()

    # ------------------------------------------------------------------
    # Auctions
    # ------------------------------------------------------------------

    async def create_auction(
        self, db: AsyncSession, req: CreateAuctionRequest
    ) -> AuctionResponse:
        try:
            auction = await self._repo.create_auction(
                db, req.name.strip(), req.description, req.max_budget_per_bidder_cents
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Auction created: id=%s slug=%s", auction.id, auction.slug)
        return AuctionResponse.from_domain(auction)

    async def list_auctions(self, db: AsyncSession, status: str | None) -> AuctionListResponse:
        auctions = await self._repo.list_auctions(db, status)
        return AuctionListResponse(items=[AuctionResponse.from_domain(a) for a in auctions])

    async def get_auction(self, db: AsyncSession, auction_id: str) -> AuctionResponse:
        return AuctionResponse.from_domain(await self._require_auction(db, auction_id))

    async def get_auction_by_slug(self, db: AsyncSession, slug: str) -> AuctionResponse:
        auction = await self._repo.get_auction_by_slug(db, slug)
        if auction is None:
            raise AuctionNotFoundError(slug)
        return AuctionResponse.from_domain(auction)

    async def update_auction(
        self, db: AsyncSession, auction_id: str, req: UpdateAuctionRequest
    ) -> AuctionResponse:
        try:
            auction = await self._require_auction(db, auction_id, for_update=True)
            if not is_editable(auction.status):
                raise AuctionNotEditableError(auction_id, auction.status)
            updated = await self._repo.update_auction(
                db,
                auction_id,
                req.name.strip() if req.name else None,
                req.description,
                req.max_budget_per_bidder_cents,
            )
            if updated is None:
                raise AuctionNotFoundError(auction_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return AuctionResponse.from_domain(updated)

    async def delete_auction(self, db: AsyncSession, auction_id: str) -> dict[str, str]:
        try:
            if not await self._repo.delete_auction(db, auction_id):
                raise AuctionNotFoundError(auction_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Auction deleted: id=%s", auction_id)
        return {"auction_id": auction_id}

    async def change_status(
        self, db: AsyncSession, auction_id: str, action: LifecycleAction
    ) -> AuctionResponse:
        """Apply start / pause / resume through the guarded state machine."""
        try:
            auction = await self._require_auction(db, auction_id, for_update=True)
            expected, target = transition(auction.status, action)
            updated = await self._repo.transition_status(db, auction_id, expected, target)
            if updated is None:
                raise ConcurrentModificationError(auction_id, expected)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Auction %s: %s → %s (%s)", auction_id, expected, target, action.value)
        return AuctionResponse.from_domain(updated)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def create_collection(
        self, db: AsyncSession, auction_id: str, req: CreateCollectionRequest
    ) -> CollectionResponse:
        try:
            auction = await self._require_auction(db, auction_id, for_share=True)
            if not items_editable(auction.status):
                raise AuctionNotEditableError(auction_id, auction.status)
            collection = await self._repo.create_collection(
                db, auction_id, req.name.strip(), req.description, req.sort_order
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return CollectionResponse.from_domain(collection)

    async def list_collections(
        self, db: AsyncSession, auction_id: str
    ) -> CollectionListResponse:
        await self._require_auction(db, auction_id)
        collections = await self._repo.list_collections(db, auction_id)
        return CollectionListResponse(
            items=[CollectionResponse.from_domain(c) for c in collections]
        )

    async def delete_collection(self, db: AsyncSession, collection_id: str) -> dict[str, str]:
        try:
            await self._require_editable_collection(db, collection_id)
            await self._repo.delete_collection(db, collection_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return {"collection_id": collection_id}

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def create_item(
        self, db: AsyncSession, collection_id: str, req: CreateItemRequest
    ) -> ItemResponse:
        new_item = NewItem(
            name=req.name.strip(),
            description=req.description,
            starting_bid=req.starting_bid_cents,
            inventory=req.inventory,
        )
        try:
            await self._require_editable_collection(db, collection_id)
            (item,) = await self._repo.create_items(db, collection_id, [new_item])
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ItemResponse.from_domain(item)

    async def import_items(
        self, db: AsyncSession, collection_id: str, csv_content: str
    ) -> ItemImportResponse:
        new_items = parse_items_csv(csv_content)
        try:
            await self._require_editable_collection(db, collection_id)
            items = await self._repo.create_items(db, collection_id, new_items)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Imported %d items into collection %s", len(items), collection_id)
        return ItemImportResponse(
            collection_id=collection_id,
            imported=len(items),
            items=[ItemResponse.from_domain(i) for i in items],
        )

    async def update_item(
        self, db: AsyncSession, item_id: str, req: UpdateItemRequest
    ) -> ItemResponse:
        try:
            await self._require_editable_item(db, item_id)
            item = await self._repo.update_item(
                db,
                item_id,
                req.name.strip() if req.name else None,
                req.description,
                req.starting_bid_cents,
                req.inventory,
                req.sort_order,
            )
            if item is None:
                raise ItemNotFoundError(item_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ItemResponse.from_domain(item)

    async def delete_item(self, db: AsyncSession, item_id: str) -> dict[str, str]:
        try:
            await self._require_editable_item(db, item_id)
            await self._repo.delete_item(db, item_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return {"item_id": item_id}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_auction(
        self,
        db: AsyncSession,
        auction_id: str,
        for_update: bool = False,
        for_share: bool = False,
    ) -> Auction:
        if for_update:
            auction = await self._repo.get_auction_for_update(db, auction_id)
        elif for_share:
            # Held until commit; close_auction takes FOR UPDATE on the same row.
            auction = await self._repo.get_auction_for_share(db, auction_id)
        else:
            auction = await self._repo.get_auction(db, auction_id)
        if auction is None:
            raise AuctionNotFoundError(auction_id)
        return auction

    async def _require_editable_collection(
        self, db: AsyncSession, collection_id: str
    ) -> Collection:
        collection = await self._repo.get_collection(db, collection_id)
        if collection is None:
            raise CollectionNotFoundError(collection_id)
        auction = await self._require_auction(db, collection.auction_id, for_share=True)
        if not items_editable(auction.status):
            raise AuctionNotEditableError(auction.id, auction.status)
        return collection

    async def _require_editable_item(self, db: AsyncSession, item_id: str) -> None:
        item = await self._repo.get_item(db, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        auction = await self._require_auction(db, item.auction_id, for_share=True)
        if not items_editable(auction.status):
            raise AuctionNotEditableError(auction.id, auction.status)

# src/qa_auction/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_auction.domain.models import Auction, Collection, Item, NewItem


class AuctionRepositoryProtocol(Protocol):
    # --- auctions ---

    async def create_auction(
        self,
        db: AsyncSession,
        name: str,
        description: str | None,
        max_budget_per_bidder: int,
    ) -> Auction: ...

    async def list_auctions(self, db: AsyncSession, status: str | None) -> list[Auction]: ...

    async def get_auction(self, db: AsyncSession, auction_id: str) -> Auction | None: ...

    async def get_auction_by_slug(self, db: AsyncSession, slug: str) -> Auction | None: ...

    async def get_auction_for_update(
        self, db: AsyncSession, auction_id: str
    ) -> Auction | None: ...

    async def get_auction_for_share(
        self, db: AsyncSession, auction_id: str
    ) -> Auction | None: ...

    async def update_auction(
        self,
        db: AsyncSession,
        auction_id: str,
        name: str | None,
        description: str | None,
        max_budget_per_bidder: int | None,
    ) -> Auction | None: ...

    async def delete_auction(self, db: AsyncSession, auction_id: str) -> bool: ...

    async def transition_status(
        self,
        db: AsyncSession,
        auction_id: str,
        expected_status: str,
        new_status: str,
        new_slug: str | None = None,
    ) -> Auction | None: ...

    # --- collections ---

    async def create_collection(
        self,
        db: AsyncSession,
        auction_id: str,
        name: str,
        description: str | None,
        sort_order: int | None,
    ) -> Collection: ...

    async def get_collection(
        self, db: AsyncSession, collection_id: str
    ) -> Collection | None: ...

    async def list_collections(self, db: AsyncSession, auction_id: str) -> list[Collection]: ...

    async def delete_collection(self, db: AsyncSession, collection_id: str) -> bool: ...

    # --- items ---

    async def create_items(
        self, db: AsyncSession, collection_id: str, items: list[NewItem]
    ) -> list[Item]: ...

    async def get_item(self, db: AsyncSession, item_id: str) -> Item | None: ...

    async def list_items(self, db: AsyncSession, auction_id: str) -> list[Item]: ...

    async def update_item(
        self,
        db: AsyncSession,
        item_id: str,
        name: str | None,
        description: str | None,
        starting_bid: int | None,
        inventory: int | None,
        sort_order: int | None,
    ) -> Item | None: ...

    async def delete_item(self, db: AsyncSession, item_id: str) -> bool: ...

# src/qa_bidding/domain/repository.py
"""BidRepository Protocol — interface contract for the bid ledger persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.qa_bidding.domain.models import Bid, BidderActivity, BidderRegistration


class BidRepositoryProtocol(Protocol):
    async def upsert_bid(
        self,
        db: AsyncSession,
        auction_id: str,
        item_id: str,
        bidder_name: str,
        bidder_email: str | None,
        quantity: int,
        price_per_unit: int,
    ) -> Bid: ...

    async def delete_bid(
        self, db: AsyncSession, auction_id: str, item_id: str, bidder_name: str
    ) -> bool: ...

    async def committed_amount(
        self, db: AsyncSession, auction_id: str, bidder_name: str, exclude_item_id: str
    ) -> int: ...

    async def list_bids(self, db: AsyncSession, auction_id: str) -> list[Bid]: ...

    async def list_bidder_bids(
        self, db: AsyncSession, auction_id: str, bidder_name: str
    ) -> list[Bid]: ...

    async def delete_bids(self, db: AsyncSession, auction_id: str) -> int: ...

    async def register_bidder(
        self, db: AsyncSession, auction_id: str, bidder_name: str, bidder_email: str | None
    ) -> BidderRegistration: ...

    async def find_registration_by_email(
        self, db: AsyncSession, auction_id: str, bidder_email: str
    ) -> BidderRegistration | None: ...

    async def complete_registration(
        self, db: AsyncSession, auction_id: str, bidder_name: str
    ) -> BidderRegistration | None: ...

    async def list_registrations(
        self, db: AsyncSession, auction_id: str
    ) -> list[BidderRegistration]: ...

    async def list_bidder_activity(
        self, db: AsyncSession, auction_id: str
    ) -> list[BidderActivity]: ...

    async def delete_registrations(self, db: AsyncSession, auction_id: str) -> int: ...

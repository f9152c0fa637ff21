"""Bid ledger domain models — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.qa_allocation.domain.models import LedgerBid


@dataclass
class Bid:
    id: str
    auction_id: str
    item_id: str
    bidder_name: str
    bidder_email: str | None
    quantity_requested: int
    price_per_unit: int  # cents
    bid_amount: int  # cents, quantity_requested * price_per_unit
    submitted_at: datetime  # commitment time of the live bid; refreshed on resubmission
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_ledger(self) -> LedgerBid:
        return LedgerBid(
            bid_id=self.id,
            bidder_name=self.bidder_name,
            quantity_requested=self.quantity_requested,
            price_per_unit=self.price_per_unit,
            submitted_at=self.submitted_at,
        )


@dataclass
class BidderRegistration:
    id: str
    auction_id: str
    bidder_name: str
    bidder_email: str | None
    status: str  # bidding / complete
    registered_at: datetime
    completed_at: datetime | None = None


@dataclass
class BidderActivity:
    """Registration joined with live bid statistics, for monitoring an open auction."""

    registration: BidderRegistration
    total_bids: int
    total_bid_amount: int  # cents
    items_bid_on: int
    last_bid_at: datetime | None

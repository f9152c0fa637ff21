"""Domain models for qa_auction — pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Auction:
    id: str
    name: str
    description: str | None
    status: str
    max_budget_per_bidder: int  # cents
    slug: str
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None


@dataclass
class Item:
    id: str
    collection_id: str
    auction_id: str
    name: str
    description: str | None
    starting_bid: int  # cents per unit
    inventory: int
    sort_order: int = 0
    collection_name: str | None = None  # populated by auction-wide listings
    created_at: datetime | None = None


@dataclass
class Collection:
    id: str
    auction_id: str
    name: str
    description: str | None
    sort_order: int = 0
    items: list[Item] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass
class NewItem:
    """Validated item fields awaiting insertion (single create or CSV import)."""

    name: str
    description: str | None
    starting_bid: int
    inventory: int

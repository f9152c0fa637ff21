"""Pydantic schemas for qa_auction API requests and responses."""

from pydantic import BaseModel, Field

from src.qa_auction.domain.models import Auction, Collection, Item
from src.qa_common.cents import cents_to_display
from src.qa_common.datetime_utils import iso_or_none

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateAuctionRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    max_budget_per_bidder_cents: int = Field(..., gt=0)


class UpdateAuctionRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    max_budget_per_bidder_cents: int | None = Field(None, gt=0)


class CreateCollectionRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    sort_order: int | None = Field(None, ge=0)


class CreateItemRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    starting_bid_cents: int = Field(..., gt=0)
    inventory: int = Field(..., ge=1)


class UpdateItemRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    starting_bid_cents: int | None = Field(None, gt=0)
    inventory: int | None = Field(None, ge=1)
    sort_order: int | None = Field(None, ge=0)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AuctionResponse(BaseModel):
    id: str
    name: str
    description: str | None
    status: str
    slug: str
    max_budget_per_bidder_cents: int
    max_budget_per_bidder_display: str
    created_at: str
    updated_at: str
    closed_at: str | None

    @classmethod
    def from_domain(cls, a: Auction) -> "AuctionResponse":
        return cls(
            id=a.id,
            name=a.name,
            description=a.description,
            status=a.status,
            slug=a.slug,
            max_budget_per_bidder_cents=a.max_budget_per_bidder,
            max_budget_per_bidder_display=cents_to_display(a.max_budget_per_bidder),
            created_at=a.created_at.isoformat(),
            updated_at=a.updated_at.isoformat(),
            closed_at=iso_or_none(a.closed_at),
        )


class AuctionListResponse(BaseModel):
    items: list[AuctionResponse]


class ItemResponse(BaseModel):
    id: str
    collection_id: str
    name: str
    description: str | None
    starting_bid_cents: int
    starting_bid_display: str
    inventory: int
    sort_order: int

    @classmethod
    def from_domain(cls, i: Item) -> "ItemResponse":
        return cls(
            id=i.id,
            collection_id=i.collection_id,
            name=i.name,
            description=i.description,
            starting_bid_cents=i.starting_bid,
            starting_bid_display=cents_to_display(i.starting_bid),
            inventory=i.inventory,
            sort_order=i.sort_order,
        )


class CollectionResponse(BaseModel):
    id: str
    auction_id: str
    name: str
    description: str | None
    sort_order: int
    items: list[ItemResponse]

    @classmethod
    def from_domain(cls, c: Collection) -> "CollectionResponse":
        return cls(
            id=c.id,
            auction_id=c.auction_id,
            name=c.name,
            description=c.description,
            sort_order=c.sort_order,
            items=[ItemResponse.from_domain(i) for i in c.items],
        )


class CollectionListResponse(BaseModel):
    items: list[CollectionResponse]


class ItemImportResponse(BaseModel):
    collection_id: str
    imported: int
    items: list[ItemResponse]

"""Pydantic schemas for qa_bidding API requests and responses."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.qa_bidding.domain.models import Bid, BidderActivity, BidderRegistration
from src.qa_common.cents import cents_to_display
from src.qa_common.datetime_utils import iso_or_none


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SubmitBidRequest(BaseModel):
    item_id: str = Field(..., min_length=1)
    bidder_name: str = Field(..., min_length=1, max_length=100)
    bidder_email: EmailStr | None = None
    # Range checks happen in the service so callers get the domain error codes.
    quantity: int
    price_per_unit_cents: int

    @field_validator("bidder_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("bidder_name must not be blank")
        return v

    @field_validator("bidder_email", mode="before")
    @classmethod
    def blank_email(cls, v: object) -> object:
        return _blank_to_none(v)

    @field_validator("bidder_email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else None


class RegisterBidderRequest(BaseModel):
    bidder_name: str = Field(..., min_length=1, max_length=100)
    bidder_email: EmailStr | None = None

    @field_validator("bidder_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("bidder_name must not be blank")
        return v

    @field_validator("bidder_email", mode="before")
    @classmethod
    def blank_email(cls, v: object) -> object:
        return _blank_to_none(v)

    @field_validator("bidder_email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BidResponse(BaseModel):
    id: str
    auction_id: str
    item_id: str
    bidder_name: str
    bidder_email: str | None
    quantity_requested: int
    price_per_unit_cents: int
    price_per_unit_display: str
    bid_amount_cents: int
    bid_amount_display: str
    submitted_at: str

    @classmethod
    def from_domain(cls, b: Bid) -> "BidResponse":
        return cls(
            id=b.id,
            auction_id=b.auction_id,
            item_id=b.item_id,
            bidder_name=b.bidder_name,
            bidder_email=b.bidder_email,
            quantity_requested=b.quantity_requested,
            price_per_unit_cents=b.price_per_unit,
            price_per_unit_display=cents_to_display(b.price_per_unit),
            bid_amount_cents=b.bid_amount,
            bid_amount_display=cents_to_display(b.bid_amount),
            submitted_at=b.submitted_at.isoformat(),
        )


class SubmitBidResponse(BaseModel):
    item_id: str
    bidder_name: str
    bid_id: str | None  # None when quantity 0 withdrew the bid
    bid: BidResponse | None


class BidListResponse(BaseModel):
    auction_id: str
    bidder_name: str
    total_bid_amount_cents: int
    total_bid_amount_display: str
    budget_remaining_cents: int
    budget_remaining_display: str
    items: list[BidResponse]


class BidderRegistrationResponse(BaseModel):
    auction_id: str
    bidder_name: str
    bidder_email: str | None
    status: str
    registered_at: str
    completed_at: str | None

    @classmethod
    def from_domain(cls, r: BidderRegistration) -> "BidderRegistrationResponse":
        return cls(
            auction_id=r.auction_id,
            bidder_name=r.bidder_name,
            bidder_email=r.bidder_email,
            status=r.status,
            registered_at=r.registered_at.isoformat(),
            completed_at=iso_or_none(r.completed_at),
        )


class BidderActivityResponse(BidderRegistrationResponse):
    total_bids: int
    total_bid_amount_cents: int
    total_bid_amount_display: str
    items_bid_on: int
    last_bid_at: str | None

    @classmethod
    def from_activity(cls, a: BidderActivity) -> "BidderActivityResponse":
        base = BidderRegistrationResponse.from_domain(a.registration)
        return cls(
            **base.model_dump(),
            total_bids=a.total_bids,
            total_bid_amount_cents=a.total_bid_amount,
            total_bid_amount_display=cents_to_display(a.total_bid_amount),
            items_bid_on=a.items_bid_on,
            last_bid_at=iso_or_none(a.last_bid_at),
        )


class BidderListResponse(BaseModel):
    auction_id: str
    total_bidders: int
    completed_bidders: int
    items: list[BidderActivityResponse]

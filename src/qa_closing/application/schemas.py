"""Pydantic schemas for close / recalculate / reset."""

from pydantic import BaseModel

from src.qa_allocation.domain.models import Allocation, ItemAllocation
from src.qa_auction.domain.models import Item
from src.qa_common.cents import cents_to_display


def _display(cents: int | None) -> str | None:
    return cents_to_display(cents) if cents is not None else None


class ResetAuctionRequest(BaseModel):
    confirm: bool = False


class AllocationResponse(BaseModel):
    bid_id: str
    bidder_name: str
    quantity_requested: int
    quantity_won: int
    original_bid_per_unit_cents: int
    original_bid_per_unit_display: str
    price_per_unit_paid_cents: int
    price_per_unit_paid_display: str
    winning_amount_cents: int
    winning_amount_display: str
    refund_amount_cents: int
    refund_amount_display: str

    @classmethod
    def from_domain(cls, a: Allocation) -> "AllocationResponse":
        return cls(
            bid_id=a.bid_id,
            bidder_name=a.bidder_name,
            quantity_requested=a.quantity_requested,
            quantity_won=a.quantity_won,
            original_bid_per_unit_cents=a.original_bid_per_unit,
            original_bid_per_unit_display=cents_to_display(a.original_bid_per_unit),
            price_per_unit_paid_cents=a.price_per_unit_paid,
            price_per_unit_paid_display=cents_to_display(a.price_per_unit_paid),
            winning_amount_cents=a.winning_amount,
            winning_amount_display=cents_to_display(a.winning_amount),
            refund_amount_cents=a.refund_amount,
            refund_amount_display=cents_to_display(a.refund_amount),
        )


class ItemClearingResponse(BaseModel):
    item_id: str
    item_name: str
    collection_name: str | None
    inventory: int
    quantity_sold: int
    remaining_inventory: int
    starting_bid_cents: int
    average_price_cents: int | None
    average_price_display: str | None
    clearing_price_cents: int | None
    clearing_price_display: str | None
    winners: list[AllocationResponse]

    @classmethod
    def from_domain(cls, item: Item, result: ItemAllocation) -> "ItemClearingResponse":
        return cls(
            item_id=item.id,
            item_name=item.name,
            collection_name=item.collection_name,
            inventory=result.inventory,
            quantity_sold=result.quantity_allocated,
            remaining_inventory=result.remaining_inventory,
            starting_bid_cents=result.starting_bid,
            average_price_cents=result.average_price,
            average_price_display=_display(result.average_price),
            clearing_price_cents=result.clearing_price,
            clearing_price_display=_display(result.clearing_price),
            winners=[AllocationResponse.from_domain(a) for a in result.allocations],
        )


class ClearingResponse(BaseModel):
    """Returned by close and recalculate."""

    auction_id: str
    status: str
    closed_at: str | None
    total_units_sold: int
    total_revenue_cents: int
    total_revenue_display: str
    total_refunds_cents: int
    total_refunds_display: str
    items: list[ItemClearingResponse]


class ResetAuctionResponse(BaseModel):
    auction_id: str
    status: str
    slug: str
    deleted_results: int
    deleted_bids: int
    deleted_registrations: int

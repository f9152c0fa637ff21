"""Pydantic schemas for the results projection."""

from pydantic import BaseModel

from src.qa_common.cents import cents_to_display
from src.qa_results.domain.projection import (
    AuctionResultsView,
    BidderSummary,
    ItemSummary,
    LostBid,
    WonItem,
)


class WonItemResponse(BaseModel):
    item_id: str
    item_name: str
    collection_name: str | None
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
    def from_domain(cls, w: WonItem) -> "WonItemResponse":
        return cls(
            item_id=w.item_id,
            item_name=w.item_name,
            collection_name=w.collection_name,
            quantity_won=w.quantity_won,
            original_bid_per_unit_cents=w.original_bid_per_unit,
            original_bid_per_unit_display=cents_to_display(w.original_bid_per_unit),
            price_per_unit_paid_cents=w.price_per_unit_paid,
            price_per_unit_paid_display=cents_to_display(w.price_per_unit_paid),
            winning_amount_cents=w.winning_amount,
            winning_amount_display=cents_to_display(w.winning_amount),
            refund_amount_cents=w.refund_amount,
            refund_amount_display=cents_to_display(w.refund_amount),
        )


class LostBidResponse(BaseModel):
    item_id: str
    item_name: str
    collection_name: str | None
    quantity_requested: int
    quantity_lost: int
    price_per_unit_cents: int
    price_per_unit_display: str
    reason: str
    lowest_winning_bid_cents: int | None
    lowest_winning_bid_display: str | None

    @classmethod
    def from_domain(cls, lb: LostBid) -> "LostBidResponse":
        lowest = lb.lowest_winning_bid
        return cls(
            item_id=lb.item_id,
            item_name=lb.item_name,
            collection_name=lb.collection_name,
            quantity_requested=lb.quantity_requested,
            quantity_lost=lb.quantity_lost,
            price_per_unit_cents=lb.price_per_unit,
            price_per_unit_display=cents_to_display(lb.price_per_unit),
            reason=lb.reason.value,
            lowest_winning_bid_cents=lowest,
            lowest_winning_bid_display=cents_to_display(lowest) if lowest is not None else None,
        )


class BidderSummaryResponse(BaseModel):
    bidder_name: str
    bidder_email: str | None
    status: str | None
    items_won: int
    total_spent_cents: int
    total_spent_display: str
    total_paid_cents: int
    total_paid_display: str
    total_refund_cents: int
    total_refund_display: str
    budget_remaining_cents: int
    budget_remaining_display: str
    total_bids_placed_cents: int
    total_bids_placed_display: str
    total_lost_bids_cents: int
    total_lost_bids_display: str
    won: list[WonItemResponse]
    lost: list[LostBidResponse]

    @classmethod
    def from_domain(cls, s: BidderSummary) -> "BidderSummaryResponse":
        return cls(
            bidder_name=s.bidder_name,
            bidder_email=s.bidder_email,
            status=s.status,
            items_won=s.items_won,
            total_spent_cents=s.total_spent,
            total_spent_display=cents_to_display(s.total_spent),
            total_paid_cents=s.total_paid,
            total_paid_display=cents_to_display(s.total_paid),
            total_refund_cents=s.total_refund,
            total_refund_display=cents_to_display(s.total_refund),
            budget_remaining_cents=s.budget_remaining,
            budget_remaining_display=cents_to_display(s.budget_remaining),
            total_bids_placed_cents=s.total_bids_placed,
            total_bids_placed_display=cents_to_display(s.total_bids_placed),
            total_lost_bids_cents=s.total_lost_bids,
            total_lost_bids_display=cents_to_display(s.total_lost_bids),
            won=[WonItemResponse.from_domain(w) for w in s.won],
            lost=[LostBidResponse.from_domain(lb) for lb in s.lost],
        )


class ItemSummaryResponse(BaseModel):
    item_id: str
    item_name: str
    collection_name: str | None
    inventory: int
    quantity_sold: int
    remaining_quantity: int
    starting_bid_cents: int
    clearing_price_cents: int | None
    clearing_price_display: str | None
    total_bids: int
    revenue_cents: int
    revenue_display: str

    @classmethod
    def from_domain(cls, i: ItemSummary) -> "ItemSummaryResponse":
        return cls(
            item_id=i.item_id,
            item_name=i.item_name,
            collection_name=i.collection_name,
            inventory=i.inventory,
            quantity_sold=i.quantity_sold,
            remaining_quantity=i.remaining_quantity,
            starting_bid_cents=i.starting_bid,
            clearing_price_cents=i.clearing_price,
            clearing_price_display=(
                cents_to_display(i.clearing_price) if i.clearing_price is not None else None
            ),
            total_bids=i.total_bids,
            revenue_cents=i.revenue,
            revenue_display=cents_to_display(i.revenue),
        )


class AuctionResultsResponse(BaseModel):
    auction_id: str
    auction_name: str
    closed_at: str | None
    total_units_sold: int
    total_revenue_cents: int
    total_revenue_display: str
    total_refunds_cents: int
    total_refunds_display: str
    total_bidders: int
    total_winners: int
    items: list[ItemSummaryResponse]
    bidders: list[BidderSummaryResponse]

    @classmethod
    def from_view(
        cls, view: AuctionResultsView, auction_name: str, closed_at: str | None
    ) -> "AuctionResultsResponse":
        return cls(
            auction_id=view.auction_id,
            auction_name=auction_name,
            closed_at=closed_at,
            total_units_sold=view.total_units_sold,
            total_revenue_cents=view.total_revenue,
            total_revenue_display=cents_to_display(view.total_revenue),
            total_refunds_cents=view.total_refunds,
            total_refunds_display=cents_to_display(view.total_refunds),
            total_bidders=len(view.bidders),
            total_winners=view.total_winners,
            items=[ItemSummaryResponse.from_domain(i) for i in view.items],
            bidders=[BidderSummaryResponse.from_domain(b) for b in view.bidders],
        )

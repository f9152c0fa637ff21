"""Results projection for a closed auction — pure, recomputed per request.

Inputs are the persisted result rows plus the live ledger; nothing here writes.

Per bidder:
  total_spent       = sum(original_bid_per_unit * quantity_won)
  total_paid        = sum(winning_amount)
  total_refund      = sum(refund_amount)
  budget_remaining  = max_budget - total_spent + total_refund
  total_bids_placed = sum(bid_amount) over live bids
  total_lost_bids   = total_bids_placed - total_spent

A bid with unfilled units produces a LostBid for the unfilled quantity, with a
reason: below the starting bid, priced under the lowest winning bid, or
inventory ran out at or above the winning price.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from src.qa_auction.domain.models import Item
from src.qa_bidding.domain.models import Bid, BidderRegistration
from src.qa_closing.domain.models import AuctionResult
from src.qa_common.enums import LostBidReason


@dataclass
class WonItem:
    item_id: str
    item_name: str
    collection_name: str | None
    quantity_won: int
    original_bid_per_unit: int
    price_per_unit_paid: int
    winning_amount: int
    refund_amount: int


@dataclass
class LostBid:
    item_id: str
    item_name: str
    collection_name: str | None
    quantity_requested: int
    quantity_lost: int
    price_per_unit: int
    reason: LostBidReason
    lowest_winning_bid: int | None = None  # set when outbid


@dataclass
class BidderSummary:
    bidder_name: str
    bidder_email: str | None
    status: str | None  # registration status; None for a bidder with bids only
    won: list[WonItem] = field(default_factory=list)
    lost: list[LostBid] = field(default_factory=list)
    total_spent: int = 0
    total_paid: int = 0
    total_refund: int = 0
    total_bids_placed: int = 0
    budget_remaining: int = 0

    @property
    def total_lost_bids(self) -> int:
        return self.total_bids_placed - self.total_spent

    @property
    def items_won(self) -> int:
        return len(self.won)


@dataclass
class ItemSummary:
    item_id: str
    item_name: str
    collection_name: str | None
    inventory: int
    starting_bid: int
    quantity_sold: int
    remaining_quantity: int
    clearing_price: int | None
    total_bids: int
    revenue: int


@dataclass
class AuctionResultsView:
    auction_id: str
    bidders: list[BidderSummary]
    items: list[ItemSummary]

    @property
    def total_units_sold(self) -> int:
        return sum(i.quantity_sold for i in self.items)

    @property
    def total_revenue(self) -> int:
        return sum(i.revenue for i in self.items)

    @property
    def total_refunds(self) -> int:
        return sum(b.total_refund for b in self.bidders)

    @property
    def total_winners(self) -> int:
        return sum(1 for b in self.bidders if b.won)


def lost_reason(
    price_per_unit: int, starting_bid: int, lowest_winning_bid: int | None
) -> LostBidReason:
    if price_per_unit < starting_bid:
        return LostBidReason.BELOW_MINIMUM
    if lowest_winning_bid is not None and price_per_unit < lowest_winning_bid:
        return LostBidReason.OUTBID
    return LostBidReason.INSUFFICIENT_INVENTORY


def project_results(
    auction_id: str,
    max_budget: int,
    items: list[Item],
    bids: list[Bid],
    results: list[AuctionResult],
    registrations: list[BidderRegistration],
) -> AuctionResultsView:
    items_by_id = {i.id: i for i in items}
    results_by_bid = {r.bid_id: r for r in results}

    results_by_item: dict[str, list[AuctionResult]] = defaultdict(list)
    for r in results:
        results_by_item[r.item_id].append(r)
    bids_by_item: dict[str, int] = defaultdict(int)
    for b in bids:
        bids_by_item[b.item_id] += 1

    # Registered bidders first (registration order), then anyone who only has bids.
    summaries: dict[str, BidderSummary] = {}
    for reg in registrations:
        summaries[reg.bidder_name] = BidderSummary(
            bidder_name=reg.bidder_name, bidder_email=reg.bidder_email, status=reg.status
        )
    for b in sorted(bids, key=lambda b: (b.submitted_at, b.id)):
        if b.bidder_name not in summaries:
            summaries[b.bidder_name] = BidderSummary(
                bidder_name=b.bidder_name, bidder_email=b.bidder_email, status=None
            )

    for b in bids:
        item = items_by_id.get(b.item_id)
        if item is None:
            continue
        summary = summaries[b.bidder_name]
        summary.total_bids_placed += b.bid_amount

        result = results_by_bid.get(b.id)
        quantity_won = result.quantity_won if result else 0
        if result is not None:
            summary.won.append(
                WonItem(
                    item_id=item.id,
                    item_name=item.name,
                    collection_name=item.collection_name,
                    quantity_won=result.quantity_won,
                    original_bid_per_unit=result.original_bid_per_unit,
                    price_per_unit_paid=result.price_per_unit_paid,
                    winning_amount=result.winning_amount,
                    refund_amount=result.refund_amount,
                )
            )
            summary.total_spent += result.original_bid_per_unit * result.quantity_won
            summary.total_paid += result.winning_amount
            summary.total_refund += result.refund_amount

        if quantity_won < b.quantity_requested:
            winners = results_by_item.get(item.id, [])
            lowest = min((w.original_bid_per_unit for w in winners), default=None)
            reason = lost_reason(b.price_per_unit, item.starting_bid, lowest)
            summary.lost.append(
                LostBid(
                    item_id=item.id,
                    item_name=item.name,
                    collection_name=item.collection_name,
                    quantity_requested=b.quantity_requested,
                    quantity_lost=b.quantity_requested - quantity_won,
                    price_per_unit=b.price_per_unit,
                    reason=reason,
                    lowest_winning_bid=lowest if reason == LostBidReason.OUTBID else None,
                )
            )

    for summary in summaries.values():
        summary.budget_remaining = max_budget - summary.total_spent + summary.total_refund

    item_summaries = []
    for item in items:
        winners = results_by_item.get(item.id, [])
        sold = sum(w.quantity_won for w in winners)
        item_summaries.append(
            ItemSummary(
                item_id=item.id,
                item_name=item.name,
                collection_name=item.collection_name,
                inventory=item.inventory,
                starting_bid=item.starting_bid,
                quantity_sold=sold,
                remaining_quantity=item.inventory - sold,
                clearing_price=winners[0].price_per_unit_paid if winners else None,
                total_bids=bids_by_item[item.id],
                revenue=sum(w.winning_amount for w in winners),
            )
        )

    return AuctionResultsView(
        auction_id=auction_id, bidders=list(summaries.values()), items=item_summaries
    )

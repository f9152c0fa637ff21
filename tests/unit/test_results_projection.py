"""Tests for the pure results projection."""

from datetime import UTC, datetime, timedelta

from src.qa_auction.domain.models import Item
from src.qa_bidding.domain.models import Bid, BidderRegistration
from src.qa_closing.domain.models import AuctionResult
from src.qa_common.enums import LostBidReason
from src.qa_results.domain.projection import lost_reason, project_results

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

ITEMS = [
    Item(id="mango", collection_id="c", auction_id="auc", name="Mangoes", description=None,
         starting_bid=10_000, inventory=10, collection_name="Fruit"),
    Item(id="rice", collection_id="c", auction_id="auc", name="Rice", description=None,
         starting_bid=5_000, inventory=2, collection_name="Grain"),
]


def _bid(bid_id, bidder, item, qty, price, seconds=0) -> Bid:
    return Bid(id=bid_id, auction_id="auc", item_id=item, bidder_name=bidder,
               bidder_email=None, quantity_requested=qty, price_per_unit=price,
               bid_amount=qty * price, submitted_at=NOW + timedelta(seconds=seconds))


def _result(bid: Bid, won: int, paid: int) -> AuctionResult:
    return AuctionResult(
        id=f"r-{bid.id}", auction_id="auc", item_id=bid.item_id, bid_id=bid.id,
        winner_name=bid.bidder_name, quantity_requested=bid.quantity_requested,
        quantity_won=won, original_bid_per_unit=bid.price_per_unit,
        price_per_unit_paid=paid, winning_amount=won * paid,
        refund_amount=won * (bid.price_per_unit - paid),
    )


A_MANGO = _bid("b1", "A", "mango", 6, 15_000)
B_MANGO = _bid("b2", "B", "mango", 6, 14_000, seconds=1)
C_MANGO = _bid("b3", "C", "mango", 3, 12_000, seconds=2)
A_RICE = _bid("b4", "A", "rice", 2, 6_000)

BIDS = [A_MANGO, B_MANGO, C_MANGO, A_RICE]
RESULTS = [_result(A_MANGO, 6, 14_000), _result(B_MANGO, 4, 14_000), _result(A_RICE, 2, 6_000)]
REGISTRATIONS = [
    BidderRegistration(id="r1", auction_id="auc", bidder_name="A", bidder_email="a@x.io",
                       status="complete", registered_at=NOW),
    BidderRegistration(id="r2", auction_id="auc", bidder_name="D", bidder_email=None,
                       status="bidding", registered_at=NOW),
]


def _view():
    return project_results("auc", 200_000, ITEMS, BIDS, RESULTS, REGISTRATIONS)


class TestLostReason:
    def test_below_minimum(self) -> None:
        assert lost_reason(90, 100, 150) == LostBidReason.BELOW_MINIMUM

    def test_outbid(self) -> None:
        assert lost_reason(120, 100, 140) == LostBidReason.OUTBID

    def test_insufficient_inventory(self) -> None:
        assert lost_reason(140, 100, 140) == LostBidReason.INSUFFICIENT_INVENTORY


class TestParticipants:
    def test_registered_first_then_bid_only(self) -> None:
        names = [b.bidder_name for b in _view().bidders]
        assert names == ["A", "D", "B", "C"]

    def test_registered_without_bids_included(self) -> None:
        d = next(b for b in _view().bidders if b.bidder_name == "D")
        assert d.won == [] and d.lost == []
        assert d.total_bids_placed == 0
        assert d.budget_remaining == 200_000


class TestBidderTotals:
    def test_full_winner(self) -> None:
        a = next(b for b in _view().bidders if b.bidder_name == "A")
        assert a.items_won == 2
        assert a.total_spent == 6 * 15_000 + 2 * 6_000
        assert a.total_paid == 6 * 14_000 + 2 * 6_000
        assert a.total_refund == 6 * 1_000
        assert a.budget_remaining == 200_000 - a.total_spent + a.total_refund
        assert a.total_lost_bids == 0
        assert a.status == "complete"

    def test_partial_winner_has_lost_remainder(self) -> None:
        b = next(b for b in _view().bidders if b.bidder_name == "B")
        assert b.total_spent == 4 * 14_000
        assert b.total_bids_placed == 6 * 14_000
        assert b.total_lost_bids == 2 * 14_000
        (lost,) = b.lost
        assert lost.quantity_lost == 2
        assert lost.reason == LostBidReason.INSUFFICIENT_INVENTORY
        assert b.status is None

    def test_outbid_reports_lowest_winning_bid(self) -> None:
        c = next(b for b in _view().bidders if b.bidder_name == "C")
        (lost,) = c.lost
        assert lost.reason == LostBidReason.OUTBID
        assert lost.lowest_winning_bid == 14_000
        assert c.total_lost_bids == 3 * 12_000

    def test_below_minimum_after_starting_bid_raised(self) -> None:
        low = _bid("b9", "E", "rice", 1, 4_000)
        view = project_results("auc", 200_000, ITEMS, BIDS + [low], RESULTS, [])
        e = next(b for b in view.bidders if b.bidder_name == "E")
        assert e.lost[0].reason == LostBidReason.BELOW_MINIMUM
        assert e.lost[0].lowest_winning_bid is None


class TestItemAndAuctionTotals:
    def test_items(self) -> None:
        mango, rice = _view().items
        assert (mango.quantity_sold, mango.remaining_quantity) == (10, 0)
        assert mango.clearing_price == 14_000
        assert mango.total_bids == 3
        assert mango.revenue == 140_000
        assert (rice.quantity_sold, rice.revenue) == (2, 12_000)

    def test_unsold_item(self) -> None:
        view = project_results("auc", 200_000, ITEMS, [], [], [])
        assert view.items[0].clearing_price is None
        assert view.items[0].remaining_quantity == 10
        assert view.total_units_sold == 0

    def test_auction_totals(self) -> None:
        view = _view()
        assert view.total_units_sold == 12
        assert view.total_revenue == 152_000
        assert view.total_refunds == 6_000
        assert view.total_winners == 2

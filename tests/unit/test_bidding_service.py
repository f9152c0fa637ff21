# tests/unit/test_bidding_service.py
"""Unit tests for BiddingApplicationService using mock repositories."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from src.qa_auction.domain.models import Auction, Item
from src.qa_bidding.application.schemas import RegisterBidderRequest, SubmitBidRequest
from src.qa_bidding.application.service import BiddingApplicationService
from src.qa_bidding.domain.models import Bid, BidderActivity, BidderRegistration
from src.qa_common.errors import (
    AuctionNotFoundError,
    AuctionNotOpenError,
    BidBelowMinimumError,
    BidderEmailTakenError,
    BidderNotRegisteredError,
    BudgetExceededError,
    ItemNotFoundError,
    QuantityOutOfRangeError,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _make_auction(**kwargs) -> Auction:
    defaults = dict(
        id="auc-1", name="Harvest", description=None, status="active",
        max_budget_per_bidder=100_000, slug="harvest", created_at=NOW, updated_at=NOW,
    )
    defaults.update(kwargs)
    return Auction(**defaults)


def _make_item(**kwargs) -> Item:
    defaults = dict(
        id="item-1", collection_id="col-1", auction_id="auc-1", name="Mangoes",
        description=None, starting_bid=10_000, inventory=10,
    )
    defaults.update(kwargs)
    return Item(**defaults)


def _make_bid(**kwargs) -> Bid:
    defaults = dict(
        id="bid-1", auction_id="auc-1", item_id="item-1", bidder_name="alice",
        bidder_email=None, quantity_requested=2, price_per_unit=12_000,
        bid_amount=24_000, submitted_at=NOW,
    )
    defaults.update(kwargs)
    return Bid(**defaults)


def _make_registration(**kwargs) -> BidderRegistration:
    defaults = dict(
        id="reg-1", auction_id="auc-1", bidder_name="alice", bidder_email=None,
        status="bidding", registered_at=NOW,
    )
    defaults.update(kwargs)
    return BidderRegistration(**defaults)


def _req(**kwargs) -> SubmitBidRequest:
    defaults = dict(item_id="item-1", bidder_name="alice", quantity=2, price_per_unit_cents=12_000)
    defaults.update(kwargs)
    return SubmitBidRequest(**defaults)


@pytest.fixture
def db():
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def auction_repo():
    repo = MagicMock()
    repo.get_auction_for_share = AsyncMock(return_value=_make_auction())
    repo.get_auction = AsyncMock(return_value=_make_auction())
    repo.get_item = AsyncMock(return_value=_make_item())
    return repo


@pytest.fixture
def bid_repo():
    repo = MagicMock()
    repo.find_registration_by_email = AsyncMock(return_value=None)
    repo.register_bidder = AsyncMock(return_value=_make_registration())
    repo.committed_amount = AsyncMock(return_value=0)
    repo.upsert_bid = AsyncMock(return_value=_make_bid())
    repo.delete_bid = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def svc(bid_repo, auction_repo):
    return BiddingApplicationService(bid_repo=bid_repo, auction_repo=auction_repo)


class TestSubmitBidAccepted:
    @pytest.mark.asyncio
    async def test_upserts_and_commits(self, svc, db, bid_repo):
        resp = await svc.submit_bid(db, "auc-1", _req())

        bid_repo.upsert_bid.assert_awaited_once_with(
            db, "auc-1", "item-1", "alice", None, 2, 12_000
        )
        db.commit.assert_awaited_once()
        assert resp.bid_id == "bid-1"
        assert resp.bid.bid_amount_cents == 24_000

    @pytest.mark.asyncio
    async def test_registers_bidder_before_budget_check(self, svc, db, bid_repo):
        await svc.submit_bid(db, "auc-1", _req(bidder_email="Alice@Example.com"))
        bid_repo.register_bidder.assert_awaited_once_with(
            db, "auc-1", "alice", "alice@example.com"
        )

    @pytest.mark.asyncio
    async def test_price_equal_to_starting_bid_ok(self, svc, db, bid_repo):
        await svc.submit_bid(db, "auc-1", _req(price_per_unit_cents=10_000))
        bid_repo.upsert_bid.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_quantity_equal_to_inventory_ok(self, svc, db, bid_repo):
        await svc.submit_bid(db, "auc-1", _req(quantity=10, price_per_unit_cents=10_000))
        bid_repo.upsert_bid.assert_awaited_once()


class TestSubmitBidWithdraw:
    @pytest.mark.asyncio
    async def test_zero_quantity_deletes(self, svc, db, bid_repo):
        resp = await svc.submit_bid(db, "auc-1", _req(quantity=0, price_per_unit_cents=0))

        bid_repo.delete_bid.assert_awaited_once_with(db, "auc-1", "item-1", "alice")
        bid_repo.upsert_bid.assert_not_awaited()
        db.commit.assert_awaited_once()
        assert resp.bid_id is None
        assert resp.bid is None


class TestSubmitBidRejected:
    @pytest.mark.asyncio
    async def test_unknown_auction(self, svc, db, auction_repo):
        auction_repo.get_auction_for_share = AsyncMock(return_value=None)
        with pytest.raises(AuctionNotFoundError):
            await svc.submit_bid(db, "auc-x", _req())
        db.rollback.assert_awaited_once()

    @pytest.mark.parametrize("status", ["draft", "paused", "closed"])
    @pytest.mark.asyncio
    async def test_not_active(self, svc, db, auction_repo, bid_repo, status):
        auction_repo.get_auction_for_share = AsyncMock(return_value=_make_auction(status=status))
        with pytest.raises(AuctionNotOpenError):
            await svc.submit_bid(db, "auc-1", _req())
        bid_repo.upsert_bid.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_item_from_other_auction(self, svc, db, auction_repo):
        auction_repo.get_item = AsyncMock(return_value=_make_item(auction_id="auc-2"))
        with pytest.raises(ItemNotFoundError):
            await svc.submit_bid(db, "auc-1", _req())

    @pytest.mark.parametrize("qty", [-1, 11])
    @pytest.mark.asyncio
    async def test_quantity_out_of_range(self, svc, db, bid_repo, qty):
        with pytest.raises(QuantityOutOfRangeError):
            await svc.submit_bid(db, "auc-1", _req(quantity=qty))
        bid_repo.upsert_bid.assert_not_awaited()
        bid_repo.delete_bid.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_below_minimum_never_reaches_ledger(self, svc, db, bid_repo):
        with pytest.raises(BidBelowMinimumError) as exc:
            await svc.submit_bid(db, "auc-1", _req(price_per_unit_cents=9_999))
        assert exc.value.code == 4001
        bid_repo.upsert_bid.assert_not_awaited()
        bid_repo.register_bidder.assert_not_awaited()
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_budget_exceeded_counts_other_items(self, svc, db, bid_repo):
        # 80_000 on other items + 2 * 12_000 > 100_000
        bid_repo.committed_amount = AsyncMock(return_value=80_000)
        with pytest.raises(BudgetExceededError):
            await svc.submit_bid(db, "auc-1", _req())
        bid_repo.committed_amount.assert_awaited_once_with(
            db, "auc-1", "alice", exclude_item_id="item-1"
        )
        bid_repo.upsert_bid.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_budget_exactly_reached_ok(self, svc, db, bid_repo):
        bid_repo.committed_amount = AsyncMock(return_value=76_000)
        await svc.submit_bid(db, "auc-1", _req())
        bid_repo.upsert_bid.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_email_owned_by_other_bidder(self, svc, db, bid_repo):
        bid_repo.find_registration_by_email = AsyncMock(
            return_value=_make_registration(bidder_name="bob", bidder_email="a@b.co")
        )
        with pytest.raises(BidderEmailTakenError):
            await svc.submit_bid(db, "auc-1", _req(bidder_email="a@b.co"))
        bid_repo.register_bidder.assert_not_awaited()

    def test_blank_name_rejected_by_schema(self):
        with pytest.raises(ValidationError):
            _req(bidder_name="   ")

    def test_bad_email_rejected_by_schema(self):
        with pytest.raises(ValidationError):
            _req(bidder_email="not-an-email")

    @pytest.mark.parametrize("email", ["a@b..com", "a..b@c.d", "<x>@y.z", "a@-b.com"])
    def test_malformed_email_rejected_by_schema(self, email):
        with pytest.raises(ValidationError):
            _req(bidder_email=email)
        with pytest.raises(ValidationError):
            RegisterBidderRequest(bidder_name="alice", bidder_email=email)

    def test_blank_email_is_none(self):
        assert _req(bidder_email="  ").bidder_email is None

    def test_email_lowercased(self):
        req = RegisterBidderRequest(bidder_name="alice", bidder_email="Alice@Example.COM")
        assert req.bidder_email == "alice@example.com"


class TestBidders:
    @pytest.mark.asyncio
    async def test_register_same_email_same_name_ok(self, svc, db, bid_repo):
        bid_repo.find_registration_by_email = AsyncMock(
            return_value=_make_registration(bidder_email="a@b.co")
        )
        resp = await svc.register_bidder(
            db, "auc-1", RegisterBidderRequest(bidder_name="alice", bidder_email="a@b.co")
        )
        assert resp.bidder_name == "alice"
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_closed_auction_rejected(self, svc, db, auction_repo):
        auction_repo.get_auction = AsyncMock(return_value=_make_auction(status="closed"))
        with pytest.raises(AuctionNotOpenError):
            await svc.register_bidder(db, "auc-1", RegisterBidderRequest(bidder_name="alice"))

    @pytest.mark.asyncio
    async def test_complete_unknown_bidder(self, svc, db, bid_repo):
        bid_repo.complete_registration = AsyncMock(return_value=None)
        with pytest.raises(BidderNotRegisteredError):
            await svc.complete_bidder(db, "auc-1", "nobody")
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_bidders_counts_completed(self, svc, db, bid_repo):
        bid_repo.list_bidder_activity = AsyncMock(return_value=[
            BidderActivity(_make_registration(), 2, 48_000, 2, NOW),
            BidderActivity(
                _make_registration(id="reg-2", bidder_name="bob", status="complete",
                                   completed_at=NOW),
                0, 0, 0, None,
            ),
        ])
        resp = await svc.list_bidders(db, "auc-1")
        assert resp.total_bidders == 2
        assert resp.completed_bidders == 1
        assert resp.items[0].total_bid_amount_display == "₹480.00"
        assert resp.items[1].last_bid_at is None

    @pytest.mark.asyncio
    async def test_list_bidder_bids_budget_remaining(self, svc, db, bid_repo):
        bid_repo.list_bidder_bids = AsyncMock(return_value=[
            _make_bid(), _make_bid(id="bid-2", item_id="item-2", bid_amount=30_000),
        ])
        resp = await svc.list_bidder_bids(db, "auc-1", "alice")
        assert resp.total_bid_amount_cents == 54_000
        assert resp.budget_remaining_cents == 46_000

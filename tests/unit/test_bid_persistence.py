# tests/unit/test_bid_persistence.py
"""Unit tests for BidRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.qa_bidding.infrastructure.persistence import BidRepository

NOW = datetime(2026, 3, 1, tzinfo=UTC)


def _make_bid_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "bid-1")
    row.auction_id = "auc-1"
    row.item_id = kwargs.get("item_id", "item-1")
    row.bidder_name = kwargs.get("bidder_name", "alice")
    row.bidder_email = None
    row.quantity_requested = kwargs.get("quantity_requested", 3)
    row.price_per_unit = kwargs.get("price_per_unit", 12_000)
    row.bid_amount = row.quantity_requested * row.price_per_unit
    row.submitted_at = NOW
    row.created_at = NOW
    row.updated_at = NOW
    return row


@pytest.fixture
def db():
    return MagicMock()


class TestUpsertBid:
    @pytest.mark.asyncio
    async def test_passes_bid_amount_and_maps_row(self, db):
        result_mock = MagicMock()
        result_mock.fetchone.return_value = _make_bid_row()
        db.execute = AsyncMock(return_value=result_mock)

        bid = await BidRepository().upsert_bid(db, "auc-1", "item-1", "alice", None, 3, 12_000)

        params = db.execute.await_args.args[1]
        assert params["bid_amount"] == 36_000
        assert bid.id == "bid-1"
        assert bid.bid_amount == 36_000
        assert bid.to_ledger().price_per_unit == 12_000

    @pytest.mark.asyncio
    async def test_upsert_sql_is_single_on_conflict_statement(self, db):
        result_mock = MagicMock()
        result_mock.fetchone.return_value = _make_bid_row()
        db.execute = AsyncMock(return_value=result_mock)

        await BidRepository().upsert_bid(db, "auc-1", "item-1", "alice", None, 3, 12_000)

        sql = str(db.execute.await_args.args[0])
        assert "ON CONFLICT (auction_id, item_id, bidder_name) DO UPDATE" in sql
        assert db.execute.await_count == 1


class TestCommittedAmount:
    @pytest.mark.asyncio
    async def test_returns_int(self, db):
        result_mock = MagicMock()
        result_mock.scalar_one.return_value = 48_000
        db.execute = AsyncMock(return_value=result_mock)

        total = await BidRepository().committed_amount(db, "auc-1", "alice", "item-1")

        assert total == 48_000
        assert db.execute.await_args.args[1]["exclude_item_id"] == "item-1"


class TestDeleteBid:
    @pytest.mark.asyncio
    async def test_false_when_nothing_deleted(self, db):
        result_mock = MagicMock()
        result_mock.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result_mock)

        assert await BidRepository().delete_bid(db, "auc-1", "item-1", "alice") is False

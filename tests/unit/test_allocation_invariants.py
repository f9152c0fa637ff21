"""Tests for qa_allocation.domain.invariants."""

from datetime import UTC, datetime

import pytest

from src.qa_allocation.domain.allocator import allocate_item
from src.qa_allocation.domain.invariants import (
    budget_violations,
    item_violations,
    verify_allocations,
)
from src.qa_allocation.domain.models import Allocation, ItemAllocation, LedgerBid
from src.qa_common.errors import AllocationInvariantViolationError

T0 = datetime(2026, 3, 1, tzinfo=UTC)


def _bid(bid_id: str, qty: int, price: int) -> LedgerBid:
    return LedgerBid(bid_id, bid_id, qty, price, T0)


def _alloc(bid: LedgerBid, won: int, paid: int) -> Allocation:
    return Allocation(
        bid_id=bid.bid_id,
        bidder_name=bid.bidder_name,
        quantity_requested=bid.quantity_requested,
        quantity_won=won,
        original_bid_per_unit=bid.price_per_unit,
        price_per_unit_paid=paid,
    )


class TestItemViolations:
    def test_allocator_output_is_clean(self) -> None:
        bids = [_bid("a", 6, 150), _bid("b", 6, 140), _bid("c", 2, 90)]
        result = allocate_item("item", 10, 100, bids)
        assert item_violations(result, bids) == []

    def test_over_allocation(self) -> None:
        a = _bid("a", 5, 100)
        result = ItemAllocation("item", 3, 100, 100, 100, [_alloc(a, 5, 100)])
        assert any("inventory" in v for v in item_violations(result, [a]))

    def test_negative_refund(self) -> None:
        a, b = _bid("a", 6, 150), _bid("b", 4, 140)
        # Uncapped average charged to everyone
        result = ItemAllocation("item", 10, 100, 146, 146, [_alloc(a, 6, 146), _alloc(b, 4, 146)])
        violations = item_violations(result, [a, b])
        assert any("negative" in v for v in violations)

    def test_clearing_below_starting_bid(self) -> None:
        a = _bid("a", 1, 120)
        result = ItemAllocation("item", 1, 100, 90, 90, [_alloc(a, 1, 90)])
        assert any("starting bid" in v for v in item_violations(result, [a]))

    def test_priority_skipped(self) -> None:
        high, low = _bid("high", 2, 200), _bid("low", 2, 100)
        result = ItemAllocation("item", 2, 50, 100, 100, [_alloc(low, 2, 100)])
        assert any("not fully filled" in v for v in item_violations(result, [high, low]))


class TestBudgetViolations:
    def test_within_budget(self) -> None:
        a = _bid("a", 2, 100)
        result = ItemAllocation("item", 2, 50, 100, 100, [_alloc(a, 2, 100)])
        assert budget_violations([result], 200) == []

    def test_over_budget(self) -> None:
        a = _bid("a", 3, 100)
        result = ItemAllocation("item", 3, 50, 100, 100, [_alloc(a, 3, 100)])
        assert budget_violations([result], 200) != []


class TestVerifyAllocations:
    def test_raises_with_violations(self) -> None:
        a = _bid("a", 5, 100)
        result = ItemAllocation("item", 3, 100, 100, 100, [_alloc(a, 5, 100)])
        with pytest.raises(AllocationInvariantViolationError) as exc:
            verify_allocations("auc", [result], {"item": [a]}, 10_000)
        assert exc.value.code == 5001
        assert exc.value.violations

    def test_passes_for_clean_allocation(self) -> None:
        bids = [_bid("a", 2, 300), _bid("b", 3, 200)]
        result = allocate_item("item", 4, 100, bids)
        verify_allocations("auc", [result], {"item": bids}, 10_000)

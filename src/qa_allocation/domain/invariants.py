"""Consistency checks run on every allocation before it is persisted.

Any violation aborts the close/recalculation; nothing is written.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

from src.qa_allocation.domain.models import ItemAllocation, LedgerBid
from src.qa_common.errors import AllocationInvariantViolationError

logger = logging.getLogger(__name__)


def item_violations(result: ItemAllocation, bids: Iterable[LedgerBid]) -> list[str]:
    """Per-item checks: inventory, quantities, price floor, refunds, priority."""
    violations: list[str] = []
    item = result.item_id

    if result.quantity_allocated > result.inventory:
        violations.append(
            f"item {item}: allocated {result.quantity_allocated} > inventory {result.inventory}"
        )

    if result.allocations and result.clearing_price is None:
        violations.append(f"item {item}: winners without a clearing price")
    if result.clearing_price is not None and result.clearing_price < result.starting_bid:
        violations.append(
            f"item {item}: clearing price {result.clearing_price} "
            f"< starting bid {result.starting_bid}"
        )

    seen_bidders: set[str] = set()
    total_paid = 0
    total_committed = 0
    for a in result.allocations:
        if a.bidder_name in seen_bidders:
            violations.append(f"item {item}: bidder {a.bidder_name} allocated twice")
        seen_bidders.add(a.bidder_name)
        if not 0 < a.quantity_won <= a.quantity_requested:
            violations.append(
                f"item {item}: {a.bidder_name} won {a.quantity_won} "
                f"of {a.quantity_requested} requested"
            )
        if a.refund_amount < 0:
            violations.append(
                f"item {item}: {a.bidder_name} refund {a.refund_amount} is negative"
            )
        if a.winning_amount + a.refund_amount != a.committed_amount:
            violations.append(
                f"item {item}: {a.bidder_name} paid {a.winning_amount} + refund "
                f"{a.refund_amount} != committed {a.committed_amount}"
            )
        total_paid += a.winning_amount
        total_committed += a.committed_amount

    if total_paid > total_committed:
        violations.append(
            f"item {item}: total paid {total_paid} > total committed {total_committed}"
        )

    # A strictly higher eligible bid must be fully filled before a lower one gets anything.
    won = {a.bid_id: a.quantity_won for a in result.allocations}
    eligible = [
        b for b in bids if b.quantity_requested > 0 and b.price_per_unit >= result.starting_bid
    ]
    lowest_winning = min(
        (b.price_per_unit for b in eligible if won.get(b.bid_id, 0) > 0), default=None
    )
    if lowest_winning is not None:
        for b in eligible:
            if b.price_per_unit > lowest_winning and won.get(b.bid_id, 0) < b.quantity_requested:
                violations.append(
                    f"item {item}: {b.bidder_name} at {b.price_per_unit} not fully filled "
                    f"while a bid at {lowest_winning} won units"
                )

    return violations


def budget_violations(results: Iterable[ItemAllocation], max_budget: int) -> list[str]:
    """Per-bidder check across the auction: spent minus refunded within budget."""
    spent: dict[str, int] = defaultdict(int)
    refunded: dict[str, int] = defaultdict(int)
    for result in results:
        for a in result.allocations:
            spent[a.bidder_name] += a.committed_amount
            refunded[a.bidder_name] += a.refund_amount

    violations: list[str] = []
    for bidder, total_spent in spent.items():
        if refunded[bidder] < 0:
            violations.append(f"bidder {bidder}: total refund {refunded[bidder]} is negative")
        if total_spent - refunded[bidder] > max_budget:
            violations.append(
                f"bidder {bidder}: spent {total_spent} - refund {refunded[bidder]} "
                f"> budget {max_budget}"
            )
    return violations


def verify_allocations(
    auction_id: str,
    results: list[ItemAllocation],
    bids_by_item: dict[str, list[LedgerBid]],
    max_budget: int,
) -> None:
    """Raise AllocationInvariantViolationError if any check fails."""
    violations: list[str] = []
    for result in results:
        violations.extend(item_violations(result, bids_by_item.get(result.item_id, [])))
    violations.extend(budget_violations(results, max_budget))

    if violations:
        for v in violations:
            logger.error("Allocation invariant violated: auction=%s %s", auction_id, v)
        raise AllocationInvariantViolationError(violations)

    logger.debug(
        "Allocation invariants OK: auction=%s items=%d winners=%d",
        auction_id,
        len(results),
        sum(len(r.allocations) for r in results),
    )

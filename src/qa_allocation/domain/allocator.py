"""Per-item uniform clearing price allocation.

1. Eligible bids: quantity > 0 and price_per_unit >= starting_bid.
2. Priority: price DESC, submitted_at ASC (first come), bid_id ASC (stable tiebreak).
3. Walk in priority order, awarding min(requested, remaining). The bid that
   exhausts inventory gets a partial fill; everything after it gets nothing.
4. clearing_price is the marginal price: the lowest own price among
   allocated bids. Every winner pays it, so no winner pays above their own bid
   and every refund is non-negative.
5. average_price = sum(qty_won * own price) / sum(qty_won), rounded half up to
   the cent and lowered one cent if rounding up would exceed the committed
   total. It is reported alongside the clearing price and never used for
   charging; a weighted average of the allocated prices is never below the
   marginal price.

Pure function of its inputs: the same ledger snapshot always yields the same
allocation, which is what makes recalculation idempotent.
"""

from collections.abc import Iterable

from src.qa_allocation.domain.models import Allocation, ItemAllocation, LedgerBid
from src.qa_common.cents import div_round_half_up


def priority_order(bids: Iterable[LedgerBid]) -> list[LedgerBid]:
    return sorted(bids, key=lambda b: (-b.price_per_unit, b.submitted_at, b.bid_id))


def average_price(fills: list[tuple[LedgerBid, int]]) -> int:
    """Volume-weighted average price of (bid, quantity_won) fills, in cents."""
    total_quantity = sum(qty for _, qty in fills)
    total_committed = sum(bid.price_per_unit * qty for bid, qty in fills)
    avg = div_round_half_up(total_committed, total_quantity)
    if avg * total_quantity > total_committed:
        avg -= 1
    return avg


def allocate_item(
    item_id: str,
    inventory: int,
    starting_bid: int,
    bids: Iterable[LedgerBid],
) -> ItemAllocation:
    eligible = [
        b for b in bids if b.quantity_requested > 0 and b.price_per_unit >= starting_bid
    ]

    fills: list[tuple[LedgerBid, int]] = []
    remaining = inventory
    for bid in priority_order(eligible):
        if remaining <= 0:
            break
        quantity = min(bid.quantity_requested, remaining)
        fills.append((bid, quantity))
        remaining -= quantity

    if not fills:
        return ItemAllocation(
            item_id=item_id,
            inventory=inventory,
            starting_bid=starting_bid,
            average_price=None,
            clearing_price=None,
        )

    avg = average_price(fills)
    clearing = fills[-1][0].price_per_unit

    return ItemAllocation(
        item_id=item_id,
        inventory=inventory,
        starting_bid=starting_bid,
        average_price=avg,
        clearing_price=clearing,
        allocations=[
            Allocation(
                bid_id=bid.bid_id,
                bidder_name=bid.bidder_name,
                quantity_requested=bid.quantity_requested,
                quantity_won=quantity,
                original_bid_per_unit=bid.price_per_unit,
                price_per_unit_paid=clearing,
            )
            for bid, quantity in fills
        ],
    )

"""Auction-wide allocation over one ledger snapshot.

Items are allocated independently; bids are grouped by item and handed to the
pure per-item allocator in ledger form.
"""

from collections import defaultdict

from src.qa_allocation.domain.allocator import allocate_item
from src.qa_allocation.domain.models import ItemAllocation, LedgerBid
from src.qa_auction.domain.models import Item
from src.qa_bidding.domain.models import Bid


def group_bids(bids: list[Bid]) -> dict[str, list[LedgerBid]]:
    by_item: dict[str, list[LedgerBid]] = defaultdict(list)
    for bid in bids:
        by_item[bid.item_id].append(bid.to_ledger())
    return dict(by_item)


def allocate_snapshot(
    items: list[Item], bids_by_item: dict[str, list[LedgerBid]]
) -> list[ItemAllocation]:
    return [
        allocate_item(item.id, item.inventory, item.starting_bid, bids_by_item.get(item.id, []))
        for item in items
    ]

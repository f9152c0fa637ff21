"""Allocation value objects — pure dataclasses, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class LedgerBid:
    """Snapshot of one live bid as seen by the allocator."""

    bid_id: str
    bidder_name: str
    quantity_requested: int
    price_per_unit: int  # cents
    submitted_at: datetime


@dataclass(frozen=True)
class Allocation:
    """Units awarded to one bidder on one item."""

    bid_id: str
    bidder_name: str
    quantity_requested: int
    quantity_won: int
    original_bid_per_unit: int  # cents
    price_per_unit_paid: int  # cents (the item clearing price)

    @property
    def winning_amount(self) -> int:
        return self.quantity_won * self.price_per_unit_paid

    @property
    def refund_amount(self) -> int:
        return self.quantity_won * (self.original_bid_per_unit - self.price_per_unit_paid)

    @property
    def committed_amount(self) -> int:
        """What the bidder offered for the units they won, at their own price."""
        return self.quantity_won * self.original_bid_per_unit


@dataclass
class ItemAllocation:
    item_id: str
    inventory: int
    starting_bid: int
    average_price: int | None  # volume-weighted average of allocated bids, cents
    clearing_price: int | None  # uniform price charged to every winner, cents
    allocations: list[Allocation] = field(default_factory=list)

    @property
    def quantity_allocated(self) -> int:
        return sum(a.quantity_won for a in self.allocations)

    @property
    def remaining_inventory(self) -> int:
        return self.inventory - self.quantity_allocated

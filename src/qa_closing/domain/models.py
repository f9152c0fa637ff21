"""Persisted allocation outcome — one row per (auction, item, winner)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class AuctionResult:
    id: str
    auction_id: str
    item_id: str
    bid_id: str
    winner_name: str
    quantity_requested: int
    quantity_won: int
    original_bid_per_unit: int  # cents
    price_per_unit_paid: int  # cents
    winning_amount: int  # cents, quantity_won * price_per_unit_paid
    refund_amount: int  # cents, quantity_won * (original - paid)
    created_at: datetime | None = None

"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class AuctionStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class LifecycleAction(str, Enum):
    """Admin actions that move an auction between statuses."""
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    CLOSE = "close"
    RESET = "reset"


class BidderStatus(str, Enum):
    BIDDING = "bidding"
    COMPLETE = "complete"


class LostBidReason(str, Enum):
    BELOW_MINIMUM = "Bid below minimum price"
    OUTBID = "Outbid by higher bidders"
    INSUFFICIENT_INVENTORY = "Insufficient inventory"

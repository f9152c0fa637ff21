"""Unified error codes and custom exceptions.

Error code ranges:
  3xxx: Auction / collection / item administration
  4xxx: Bidding
  5xxx: Allocation
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: list[dict[str, object]] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)


# --- 30xx: Auction ---

class AuctionNotFoundError(AppError):
    def __init__(self, auction_id: str) -> None:
        super().__init__(3001, f"Auction not found: {auction_id}", 404)


class AuctionNotOpenError(AppError):
    def __init__(self, auction_id: str, status: str) -> None:
        super().__init__(
            3002, f"Auction {auction_id} is not open for bidding (status={status})", 422
        )


class InvalidTransitionError(AppError):
    def __init__(self, action: str, status: str) -> None:
        super().__init__(3003, f"Cannot {action} an auction in status {status}", 409)


class ConcurrentModificationError(AppError):
    def __init__(self, auction_id: str, expected_status: str) -> None:
        super().__init__(
            3004,
            f"Auction {auction_id} changed concurrently (expected status {expected_status})",
            409,
        )


class AuctionNotClosedError(AppError):
    def __init__(self, auction_id: str, status: str) -> None:
        super().__init__(3005, f"Auction {auction_id} is not closed (status={status})", 422)


class AuctionNotEditableError(AppError):
    def __init__(self, auction_id: str, status: str) -> None:
        super().__init__(
            3006, f"Auction {auction_id} cannot be edited in status {status}", 422
        )


class ResetNotConfirmedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            3007, "Reset deletes all bids and results; pass confirm=true to proceed", 422
        )


# --- 31xx: Collection / Item ---

class CollectionNotFoundError(AppError):
    def __init__(self, collection_id: str) -> None:
        super().__init__(3101, f"Collection not found: {collection_id}", 404)


class ItemNotFoundError(AppError):
    def __init__(self, item_id: str) -> None:
        super().__init__(3102, f"Item not found: {item_id}", 404)


class InvalidItemImportError(AppError):
    def __init__(self, errors: list[dict[str, object]]) -> None:
        super().__init__(
            3103, f"Item import rejected: {len(errors)} invalid field(s)", 422, details=errors
        )


# --- 4xxx: Bidding ---

class BidBelowMinimumError(AppError):
    def __init__(self, price_cents: int, starting_bid_cents: int) -> None:
        super().__init__(
            4001,
            f"Bid of {price_cents} cents/unit is below the starting bid of "
            f"{starting_bid_cents} cents/unit",
            422,
        )


class QuantityOutOfRangeError(AppError):
    def __init__(self, quantity: int, inventory: int) -> None:
        super().__init__(
            4002, f"Quantity {quantity} out of range: must be between 0 and {inventory}", 422
        )


class BudgetExceededError(AppError):
    def __init__(self, committed: int, budget: int) -> None:
        super().__init__(
            4003,
            f"Budget exceeded: bids total {committed} cents, budget is {budget} cents",
            422,
        )


class BidderEmailTakenError(AppError):
    def __init__(self, email: str) -> None:
        super().__init__(
            4004, f"Email {email} is already registered to another bidder in this auction", 409
        )


class BidderNotRegisteredError(AppError):
    def __init__(self, bidder_name: str) -> None:
        super().__init__(4005, f"Bidder not registered: {bidder_name}", 404)


# --- 5xxx: Allocation ---

class AllocationInvariantViolationError(AppError):
    def __init__(self, violations: list[str]) -> None:
        super().__init__(
            5001,
            "Allocation invariant violated: " + "; ".join(violations),
            500,
        )
        self.violations = violations


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)

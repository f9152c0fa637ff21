"""Auction lifecycle state machine.

    draft --start--> active --pause--> paused --resume--> active
    active --close--> closed --reset--> draft

Closing a paused auction is not allowed: resume it first.
"""

from src.qa_common.enums import AuctionStatus, LifecycleAction
from src.qa_common.errors import InvalidTransitionError

_TRANSITIONS: dict[LifecycleAction, tuple[AuctionStatus, AuctionStatus]] = {
    LifecycleAction.START: (AuctionStatus.DRAFT, AuctionStatus.ACTIVE),
    LifecycleAction.PAUSE: (AuctionStatus.ACTIVE, AuctionStatus.PAUSED),
    LifecycleAction.RESUME: (AuctionStatus.PAUSED, AuctionStatus.ACTIVE),
    LifecycleAction.CLOSE: (AuctionStatus.ACTIVE, AuctionStatus.CLOSED),
    LifecycleAction.RESET: (AuctionStatus.CLOSED, AuctionStatus.DRAFT),
}


def transition(current: str, action: LifecycleAction) -> tuple[str, str]:
    """Return (expected_status, new_status) for `action` from `current`.

    Raises InvalidTransitionError when `action` is not allowed from `current`.
    """
    expected, target = _TRANSITIONS[action]
    if current != expected.value:
        raise InvalidTransitionError(action.value, current)
    return expected.value, target.value


def is_editable(status: str) -> bool:
    """Auction settings (name, budget) may only change before bidding opens."""
    return status == AuctionStatus.DRAFT.value


def items_editable(status: str) -> bool:
    """Collections and items stay editable until the auction is closed."""
    return status != AuctionStatus.CLOSED.value

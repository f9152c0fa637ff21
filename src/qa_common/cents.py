"""Integer arithmetic utilities for cents-based money.

All prices, amounts, budgets and refunds use int (cents). No float, no Decimal.
"""

import re

_MONEY_RE = re.compile(r"^(\d+)(?:\.(\d{1,2}))?$")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 14600 -> '₹146.00', -2400 -> '-₹24.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-₹{abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"₹{cents // 100:,}.{cents % 100:02d}"


def parse_money(value: str) -> int:
    """Parse a decimal money string into cents: '12.5' -> 1250, '7' -> 700.

    Raises ValueError for negatives, more than 2 fraction digits or non-numbers.
    """
    match = _MONEY_RE.match(value.strip().replace(",", ""))
    if match is None:
        raise ValueError(f"Not a money amount with at most 2 decimals: {value!r}")
    whole, frac = match.groups()
    return int(whole) * 100 + int((frac or "0").ljust(2, "0"))


def div_round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounding half up, for non-negative operands.

    div_round_half_up(29, 2) == 15, div_round_half_up(146_00 * 3 + 1, 3) == 14600
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)

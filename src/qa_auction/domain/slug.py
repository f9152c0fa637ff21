"""Routing slug for a fresh auction epoch (after reset).

Creation-time slugs come from the generate_auction_slug() SQL function;
an epoch slug is "<base36 ms timestamp>-<6 random chars>".
"""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_ALPHABET[rem])
    return "".join(reversed(out))


def new_epoch_slug() -> str:
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"{stamp}-{suffix}"

"""Datetime formatting for API payloads."""

from datetime import datetime


def iso_or_none(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None

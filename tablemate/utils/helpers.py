"""Miscellaneous helper functions."""

from __future__ import annotations

import datetime as dt
import math
from typing import Any, Optional


def utcnow() -> dt.datetime:
    """Return the current UTC time as a naive datetime.

    Naive UTC is what SQLite hands back from ``DateTime`` columns, so both
    storage backends produce comparable timestamps.
    """
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: str | None) -> Optional[dt.datetime]:
    """Parse an ISO8601 datetime string into a :class:`datetime` object.

    The standard ``datetime.fromisoformat`` helper does not accept a lowercase
    ``z`` as the UTC designator on older interpreters. Some model responses
    provide timestamps that end with ``z`` instead of the canonical ``Z``. This
    function normalises that case and returns ``None`` if the value cannot be
    parsed.
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if value.endswith(("z", "Z")):
        value = value[:-1] + "+00:00"
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError:
        return None


def parse_amount(value: Any) -> Optional[float]:
    """Parse a monetary amount from a number or a string like ``"$1,234.50"``.

    Returns ``None`` when the value is missing, not numeric or not finite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace("$", "").replace(",", "").strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def clamp_unit(value: Any, default: float) -> float:
    """Coerce ``value`` to a float in [0, 1].

    Missing, non-numeric and NaN values are replaced by ``default`` before
    clamping.
    """
    if value is None or isinstance(value, bool):
        number = default
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = default
        if math.isnan(number):
            number = default
    return max(0.0, min(1.0, number))


def parse_time_of_day(label: str) -> Optional[dt.time]:
    """Parse reservation time labels such as ``"6:30 PM"`` or ``"18:30"``."""
    text = (label or "").strip().upper()
    for fmt in ("%I:%M %p", "%I:%M%p", "%I %p", "%H:%M", "%H:%M:%S"):
        try:
            return dt.datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None

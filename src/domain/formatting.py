"""Number and time formatting helpers shared by the analytics modules."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from math import floor

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going toward +infinity."""
    return int(floor(value + 0.5))


def to_fixed(value: float, places: int) -> float:
    """Round ``value`` to ``places`` decimals based on its exact binary value."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_duration(seconds: int) -> str:
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"


def to_epoch_ms(moment: datetime) -> int:
    """Convert a datetime to epoch milliseconds; naive values are read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp() * 1000)


def relative_time(timestamp_ms: int, now: datetime, tz: tzinfo = UTC) -> str:
    """Describe how long ago ``timestamp_ms`` happened relative to ``now``."""
    diff_ms = to_epoch_ms(now) - timestamp_ms
    minutes = diff_ms // MS_PER_MINUTE
    hours = diff_ms // MS_PER_HOUR
    days = diff_ms // MS_PER_DAY

    if minutes < 60:
        return f"{minutes} minutes ago"
    if hours < 24:
        return f"{hours} hours ago"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).date().isoformat()


__all__ = [
    "MS_PER_DAY",
    "MS_PER_HOUR",
    "MS_PER_MINUTE",
    "format_duration",
    "relative_time",
    "round_half_up",
    "to_epoch_ms",
    "to_fixed",
]

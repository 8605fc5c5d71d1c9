"""Weekly schedule filter used to select the active match subset."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from domain.common import Match
from domain.protocol import FilterMode

HourRange = tuple[int, int]


def resolve_timezone(name: str) -> tzinfo:
    """Resolve an IANA zone name; ``UTC`` never needs the zone database."""
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name!r}") from exc


def _validate_range(start_hour: int, end_hour: int) -> None:
    if not 0 <= start_hour <= 23:
        raise ValueError(f"start_hour must be between 0 and 23, got {start_hour}")
    if not 1 <= end_hour <= 24:
        raise ValueError(f"end_hour must be between 1 and 24, got {end_hour}")
    if start_hour >= end_hour:
        raise ValueError(f"start_hour ({start_hour}) must be before end_hour ({end_hour})")


@dataclass(frozen=True)
class FilterPolicy:
    """Active weekdays (0=Sunday..6=Saturday) and hours ``[start_hour, end_hour)``."""

    weekdays: frozenset[int]
    start_hour: int
    end_hour: int
    additional_ranges: tuple[HourRange, ...] = ()
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        object.__setattr__(self, "weekdays", frozenset(self.weekdays))
        object.__setattr__(
            self,
            "additional_ranges",
            tuple((int(start), int(end)) for start, end in self.additional_ranges),
        )
        invalid_days = sorted(day for day in self.weekdays if not 0 <= day <= 6)
        if invalid_days:
            raise ValueError(f"weekdays must be between 0 and 6, got {invalid_days}")
        for start_hour, end_hour in self.hour_ranges:
            _validate_range(start_hour, end_hour)
        resolve_timezone(self.timezone)

    @property
    def hour_ranges(self) -> tuple[HourRange, ...]:
        return ((self.start_hour, self.end_hour), *self.additional_ranges)

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone)


DEFAULT_POLICY = FilterPolicy(weekdays=frozenset({1, 2, 3, 4, 5}), start_hour=9, end_hour=18)


def local_datetime(timestamp_ms: int, tz: tzinfo) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)


def sunday_based_weekday(moment: datetime) -> int:
    """Weekday number with Sunday as 0."""
    return (moment.weekday() + 1) % 7


def in_window(timestamp_ms: int, policy: FilterPolicy) -> bool:
    """True when the local wall-clock time falls on an active day and hour."""
    moment = local_datetime(timestamp_ms, policy.tz)
    if sunday_based_weekday(moment) not in policy.weekdays:
        return False
    return any(start <= moment.hour < end for start, end in policy.hour_ranges)


def filter_matches(matches: Iterable[Match], policy: FilterPolicy) -> tuple[Match, ...]:
    return tuple(match for match in matches if in_window(match.timestamp, policy))


def active_matches(
    matches: Iterable[Match],
    mode: FilterMode,
    policy: FilterPolicy,
) -> tuple[Match, ...]:
    """Return every match in ``ALL`` mode, otherwise only those inside the policy window."""
    if FilterMode(mode) is FilterMode.ALL:
        return tuple(matches)
    return filter_matches(matches, policy)


__all__ = [
    "DEFAULT_POLICY",
    "FilterPolicy",
    "HourRange",
    "active_matches",
    "filter_matches",
    "in_window",
    "local_datetime",
    "resolve_timezone",
    "sunday_based_weekday",
]

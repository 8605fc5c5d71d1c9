"""Workday report: the narrower server-rendered summary of in-window matches."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.common import Match
from domain.formatting import to_fixed
from domain.protocol import MatchResult
from domain.time_window import FilterPolicy, filter_matches, local_datetime

RECENT_DAYS = 5


@dataclass(frozen=True)
class DayGroup:
    date: str
    matches: tuple[Match, ...]


@dataclass(frozen=True)
class WorkdayReport:
    matches: tuple[Match, ...]
    wins: int
    losses: int
    total_hours: float
    last_match: Match | None
    first_match: Match | None
    days: tuple[DayGroup, ...]
    recent_days: tuple[DayGroup, ...]
    total_days: int
    average_per_day: float


def group_matches_by_day(matches: Sequence[Match], policy: FilterPolicy) -> tuple[DayGroup, ...]:
    """Group by local calendar date, newest day first."""
    by_day: dict[str, list[Match]] = {}
    tz = policy.tz
    for match in matches:
        key = local_datetime(match.timestamp, tz).date().isoformat()
        by_day.setdefault(key, []).append(match)
    return tuple(
        DayGroup(date=key, matches=tuple(by_day[key]))
        for key in sorted(by_day, reverse=True)
    )


def build_workday_report(matches: Sequence[Match], policy: FilterPolicy) -> WorkdayReport:
    """Summarize matches played inside ``policy``; input is expected newest first."""
    valid = filter_matches(matches, policy)
    wins = sum(1 for match in valid if match.result is MatchResult.WIN)
    losses = sum(1 for match in valid if match.result is MatchResult.LOSS)
    total_seconds = sum(match.duration.seconds for match in valid)

    days = group_matches_by_day(valid, policy)
    total_days = len(days)
    average_per_day = to_fixed(len(valid) / total_days, 2) if total_days else 0.0

    return WorkdayReport(
        matches=valid,
        wins=wins,
        losses=losses,
        total_hours=total_seconds / 3600,
        last_match=valid[0] if valid else None,
        first_match=valid[-1] if valid else None,
        days=days,
        recent_days=days[:RECENT_DAYS],
        total_days=total_days,
        average_per_day=average_per_day,
    )


__all__ = ["DayGroup", "RECENT_DAYS", "WorkdayReport", "build_workday_report", "group_matches_by_day"]

"""Unit tests for the workday report."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from domain.common import HeroInfo
from domain.normalizer import normalize_match
from domain.report import RECENT_DAYS, build_workday_report, group_matches_by_day
from domain.time_window import FilterPolicy

POLICY = FilterPolicy(
    weekdays=frozenset({1, 2, 3, 4, 5}),
    start_hour=8,
    end_hour=12,
    additional_ranges=((14, 17),),
)
HEROES = {1: HeroInfo(id=1, name="Anti-Mage")}


def _match(match_id: int, played_at: datetime, *, won: bool | None = True, duration: int = 1800):
    return normalize_match(
        {
            "match_id": match_id,
            "hero_id": 1,
            "player_slot": 0,
            "radiant_win": won,
            "duration": duration,
            "start_time": int(played_at.timestamp()),
        },
        HEROES,
    )


def test_report_counts_only_in_window_matches() -> None:
    # Newest first; 2026-01-05 is a Monday.
    matches = [
        _match(5, datetime(2026, 1, 7, 15, 0, tzinfo=UTC), won=False, duration=3600),
        _match(4, datetime(2026, 1, 7, 13, 0, tzinfo=UTC)),
        _match(3, datetime(2026, 1, 6, 9, 0, tzinfo=UTC), won=None),
        _match(2, datetime(2026, 1, 5, 11, 0, tzinfo=UTC), duration=1800),
        _match(1, datetime(2026, 1, 4, 10, 0, tzinfo=UTC)),
    ]

    report = build_workday_report(matches, POLICY)

    assert [match.match_id for match in report.matches] == [5, 3, 2]
    assert (report.wins, report.losses) == (1, 1)
    assert report.total_hours == pytest.approx(2.0)
    assert report.last_match.match_id == 5
    assert report.first_match.match_id == 2
    assert [day.date for day in report.days] == ["2026-01-07", "2026-01-06", "2026-01-05"]
    assert report.total_days == 3
    assert report.average_per_day == 1.0


def test_report_average_per_day_rounds_to_two_places() -> None:
    matches = [
        _match(3, datetime(2026, 1, 6, 9, 0, tzinfo=UTC)),
        _match(2, datetime(2026, 1, 5, 10, 0, tzinfo=UTC)),
        _match(1, datetime(2026, 1, 5, 9, 0, tzinfo=UTC)),
        _match(0, datetime(2026, 1, 7, 9, 0, tzinfo=UTC)),
    ]
    report = build_workday_report(matches[:3], POLICY)
    assert report.average_per_day == 1.5

    three_days = build_workday_report(
        [*matches, _match(9, datetime(2026, 1, 7, 10, 0, tzinfo=UTC))],
        POLICY,
    )
    assert three_days.average_per_day == pytest.approx(1.67)


def test_report_keeps_five_most_recent_days() -> None:
    matches = [_match(day, datetime(2026, 1, day, 9, 0, tzinfo=UTC)) for day in range(16, 4, -1)]
    report = build_workday_report(matches, POLICY)

    assert report.total_days > RECENT_DAYS
    assert len(report.recent_days) == RECENT_DAYS
    assert report.recent_days[0].date == "2026-01-16"


def test_empty_report() -> None:
    report = build_workday_report([], POLICY)
    assert report.matches == ()
    assert report.last_match is None
    assert report.first_match is None
    assert report.total_days == 0
    assert report.average_per_day == 0.0
    assert report.total_hours == 0


def test_group_matches_by_day_uses_policy_timezone() -> None:
    policy = FilterPolicy(
        weekdays=frozenset(range(7)),
        start_hour=0,
        end_hour=24,
        timezone="America/Sao_Paulo",
    )
    late = _match(1, datetime(2026, 1, 6, 1, 0, tzinfo=UTC))

    [day] = group_matches_by_day([late], policy)

    assert day.date == "2026-01-05"
    assert day.matches == (late,)

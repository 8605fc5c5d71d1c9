"""Load pipeline and dashboard summary assembly."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, tzinfo
from typing import Any

from domain.analytics import (
    AverageDuration,
    AverageKda,
    DailyPerformance,
    HeroUsage,
    PlayStyle,
    RoleSummary,
    TypeCounts,
    WeeklyStats,
    WinRate,
    calculate_average_duration,
    calculate_average_kda,
    calculate_play_style,
    calculate_weekly_stats,
    calculate_win_rate,
    count_matches_by_type,
    get_best_role,
    get_most_played_heroes,
    get_performance_over_time,
)
from domain.common import Match
from domain.insights import Insight, generate_insights
from domain.normalizer import create_hero_directory, normalize_matches
from domain.protocol import MatchDataSource
from domain.state import DashboardState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSummary:
    """Every dashboard aggregate for one match collection."""

    match_count: int
    win_rate: WinRate
    average_kda: AverageKda
    average_duration: AverageDuration
    type_counts: TypeCounts
    top_heroes: tuple[HeroUsage, ...]
    best_role: RoleSummary
    weekly: WeeklyStats
    play_style: PlayStyle
    performance: tuple[DailyPerformance, ...]
    insights: tuple[Insight, ...]

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_dashboard(
    source: MatchDataSource,
    state: DashboardState,
    *,
    account_id: str,
    match_limit: int = 100,
) -> DashboardState:
    """Fetch player, hero catalog and matches, then load them into ``state``."""
    if match_limit <= 0:
        raise ValueError("match_limit must be greater than 0")

    state.begin_loading()
    try:
        player = source.get_player(account_id)
        heroes = create_hero_directory(source.get_hero_stats())
        matches = normalize_matches(source.get_matches(account_id, match_limit), heroes)
    except Exception as exc:
        logger.error("dashboard load failed for account_id=%s: %s", account_id, exc)
        state.fail(exc)
        raise

    state.load(matches=matches, heroes=heroes, player=player)
    return state


def build_dashboard_summary(
    matches: Sequence[Match],
    *,
    now: datetime,
    tz: tzinfo = UTC,
    top_heroes: int = 5,
    performance_days: int = 30,
) -> DashboardSummary:
    return DashboardSummary(
        match_count=len(matches),
        win_rate=calculate_win_rate(matches),
        average_kda=calculate_average_kda(matches),
        average_duration=calculate_average_duration(matches),
        type_counts=count_matches_by_type(matches),
        top_heroes=tuple(get_most_played_heroes(matches, top_heroes)),
        best_role=get_best_role(matches),
        weekly=calculate_weekly_stats(matches, now=now),
        play_style=calculate_play_style(matches),
        performance=tuple(get_performance_over_time(matches, performance_days, now=now, tz=tz)),
        insights=tuple(generate_insights(matches)),
    )


__all__ = ["DashboardSummary", "build_dashboard_summary", "load_dashboard"]

"""Aggregate statistics over normalized matches.

Every function is pure and total: empty input yields zeroed results, and no
division is attempted with a zero denominator. Time-relative functions take
an explicit ``now`` instead of reading the clock.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, tzinfo
from typing import Any

from domain.common import Match
from domain.formatting import MS_PER_DAY, format_duration, round_half_up, to_epoch_ms, to_fixed
from domain.normalizer import calculate_kda_ratio
from domain.protocol import Lane, MatchResult, MatchType
from domain.time_window import local_datetime

MIN_ROLE_GAMES = 3


class _Serializable:
    def as_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


@dataclass(frozen=True)
class WinRate(_Serializable):
    rate: int
    wins: int
    losses: int
    total: int


@dataclass(frozen=True)
class AverageKda(_Serializable):
    kills: float
    deaths: float
    assists: float
    ratio: float


@dataclass(frozen=True)
class AverageDuration(_Serializable):
    seconds: int
    formatted: str


@dataclass(frozen=True)
class TypeCounts(_Serializable):
    ranked: int
    normal: int
    turbo: int


@dataclass(frozen=True)
class HeroUsage(_Serializable):
    hero_id: int
    hero_name: str
    hero_image: str | None
    games: int
    wins: int
    win_rate: int


@dataclass(frozen=True)
class RoleSummary(_Serializable):
    name: str
    win_rate: int
    games: int
    wins: int = 0
    lane: int | None = None


UNKNOWN_ROLE = RoleSummary(name="Unknown", win_rate=0, games=0)


@dataclass(frozen=True)
class PeriodStats(_Serializable):
    matches: int
    win_rate: int


@dataclass(frozen=True)
class WeeklyStats(_Serializable):
    this_week: PeriodStats
    last_week: PeriodStats
    trend: PeriodStats


@dataclass(frozen=True)
class PlayStyle(_Serializable):
    fighting: int
    versatility: int
    farming: int
    supporting: int
    pushing: int


@dataclass(frozen=True)
class DailyPerformance(_Serializable):
    date: str
    games: int
    wins: int
    losses: int
    win_rate: int


def _percent(part: int | float, whole: int | float) -> int:
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def calculate_win_rate(matches: Sequence[Match]) -> WinRate:
    """Win percentage; unknown outcomes count toward the total only."""
    total = len(matches)
    wins = sum(1 for match in matches if match.result is MatchResult.WIN)
    losses = sum(1 for match in matches if match.result is MatchResult.LOSS)
    return WinRate(rate=_percent(wins, total), wins=wins, losses=losses, total=total)


def calculate_average_kda(matches: Sequence[Match]) -> AverageKda:
    """Per-game K/D/A averages and the ratio of the summed totals."""
    if not matches:
        return AverageKda(kills=0.0, deaths=0.0, assists=0.0, ratio=0.0)

    total_kills = sum(match.kda.kills for match in matches)
    total_deaths = sum(match.kda.deaths for match in matches)
    total_assists = sum(match.kda.assists for match in matches)
    games = len(matches)

    return AverageKda(
        kills=to_fixed(total_kills / games, 1),
        deaths=to_fixed(total_deaths / games, 1),
        assists=to_fixed(total_assists / games, 1),
        ratio=calculate_kda_ratio(total_kills, total_deaths, total_assists),
    )


def calculate_average_duration(matches: Sequence[Match]) -> AverageDuration:
    if not matches:
        return AverageDuration(seconds=0, formatted="0:00")

    total_seconds = sum(match.duration.seconds for match in matches)
    average_seconds = round_half_up(total_seconds / len(matches))
    return AverageDuration(seconds=average_seconds, formatted=format_duration(average_seconds))


def count_matches_by_type(matches: Sequence[Match]) -> TypeCounts:
    counts = {match_type: 0 for match_type in MatchType}
    for match in matches:
        counts[match.match_type] += 1
    return TypeCounts(
        ranked=counts[MatchType.RANKED],
        normal=counts[MatchType.NORMAL],
        turbo=counts[MatchType.TURBO],
    )


def get_most_played_heroes(matches: Sequence[Match], limit: int = 5) -> list[HeroUsage]:
    """Heroes by games played, descending; ties keep first-seen order."""
    grouped: dict[int, dict[str, Any]] = {}
    for match in matches:
        entry = grouped.setdefault(
            match.hero_id,
            {
                "hero_id": match.hero_id,
                "hero_name": match.hero_name,
                "hero_image": match.hero_image,
                "games": 0,
                "wins": 0,
            },
        )
        entry["games"] += 1
        if match.result is MatchResult.WIN:
            entry["wins"] += 1

    heroes = [
        HeroUsage(**entry, win_rate=_percent(entry["wins"], entry["games"]))
        for entry in grouped.values()
    ]
    heroes.sort(key=lambda hero: hero.games, reverse=True)
    return heroes[: max(limit, 0)]


def get_best_role(matches: Sequence[Match]) -> RoleSummary:
    """Lane with the best win rate, preferring lanes with at least three games."""
    games = {lane: 0 for lane in Lane}
    wins = {lane: 0 for lane in Lane}
    for match in matches:
        if match.lane not in games:
            continue
        lane = Lane(match.lane)
        games[lane] += 1
        if match.result is MatchResult.WIN:
            wins[lane] += 1

    roles = [
        RoleSummary(
            name=lane.display_name,
            win_rate=_percent(wins[lane], games[lane]),
            games=games[lane],
            wins=wins[lane],
            lane=int(lane),
        )
        for lane in Lane
        if games[lane] > 0
    ]
    if not roles:
        return UNKNOWN_ROLE

    roles.sort(key=lambda role: (role.games < MIN_ROLE_GAMES, -role.win_rate))
    return roles[0]


def calculate_weekly_stats(matches: Sequence[Match], *, now: datetime) -> WeeklyStats:
    """Compare the last 7 days against the 7 days before them."""
    now_ms = to_epoch_ms(now)
    one_week_ago = now_ms - 7 * MS_PER_DAY
    two_weeks_ago = now_ms - 14 * MS_PER_DAY

    this_week = [match for match in matches if match.timestamp >= one_week_ago]
    last_week = [
        match for match in matches if two_weeks_ago <= match.timestamp < one_week_ago
    ]

    this_rate = calculate_win_rate(this_week).rate
    last_rate = calculate_win_rate(last_week).rate
    return WeeklyStats(
        this_week=PeriodStats(matches=len(this_week), win_rate=this_rate),
        last_week=PeriodStats(matches=len(last_week), win_rate=last_rate),
        trend=PeriodStats(matches=len(this_week) - len(last_week), win_rate=this_rate - last_rate),
    )


def _score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def calculate_play_style(matches: Sequence[Match]) -> PlayStyle:
    """Five heuristic 0-100 scores for the radar chart."""
    if not matches:
        return PlayStyle(fighting=0, versatility=0, farming=0, supporting=0, pushing=0)

    total = len(matches)
    average_kda = calculate_average_kda(matches)
    unique_heroes = len({match.hero_id for match in matches})
    ranked_ratio = sum(1 for match in matches if match.match_type is MatchType.RANKED) / total
    average_duration = calculate_average_duration(matches).seconds

    return PlayStyle(
        fighting=_score(average_kda.kills * 10),
        versatility=_score((unique_heroes / total) * 100 * 2),
        farming=_score(ranked_ratio * 100 + 20),
        supporting=_score((average_kda.assists / (average_kda.kills + 1)) * 50),
        pushing=_score((2400 - average_duration) / 12),
    )


def get_performance_over_time(
    matches: Sequence[Match],
    days: int = 30,
    *,
    now: datetime,
    tz: tzinfo = UTC,
) -> list[DailyPerformance]:
    """Per calendar day results within ``days`` of ``now``, oldest day first."""
    cutoff = to_epoch_ms(now) - days * MS_PER_DAY

    by_date: dict[str, dict[str, int]] = {}
    for match in matches:
        if match.timestamp < cutoff:
            continue
        date_key = local_datetime(match.timestamp, tz).date().isoformat()
        day = by_date.setdefault(date_key, {"games": 0, "wins": 0, "losses": 0})
        day["games"] += 1
        if match.result is MatchResult.WIN:
            day["wins"] += 1
        elif match.result is MatchResult.LOSS:
            day["losses"] += 1

    return [
        DailyPerformance(
            date=date_key,
            games=day["games"],
            wins=day["wins"],
            losses=day["losses"],
            win_rate=_percent(day["wins"], day["games"]),
        )
        for date_key, day in sorted(by_date.items())
    ]


__all__ = [
    "AverageDuration",
    "AverageKda",
    "DailyPerformance",
    "HeroUsage",
    "MIN_ROLE_GAMES",
    "PeriodStats",
    "PlayStyle",
    "RoleSummary",
    "TypeCounts",
    "UNKNOWN_ROLE",
    "WeeklyStats",
    "WinRate",
    "calculate_average_duration",
    "calculate_average_kda",
    "calculate_play_style",
    "calculate_weekly_stats",
    "calculate_win_rate",
    "count_matches_by_type",
    "get_best_role",
    "get_most_played_heroes",
    "get_performance_over_time",
]

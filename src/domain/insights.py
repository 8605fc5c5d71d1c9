"""Rule-based insights over recent matches.

Matches are expected newest first. Rules run in the order of ``INSIGHT_RULES``
and their combined output is truncated, so rule order decides which insights
survive when more than ``limit`` fire.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from domain.analytics import get_most_played_heroes
from domain.common import Match
from domain.formatting import round_half_up, to_fixed
from domain.protocol import InsightType, MatchResult, MatchType

MIN_MATCHES_FOR_INSIGHTS = 5
DEFAULT_INSIGHT_LIMIT = 5

RECENT_WINDOW = 5
HIGH_DEATHS_THRESHOLD = 8.0
SYNERGY_MIN_GAMES = 3
SYNERGY_MIN_WIN_RATE = 70
STREAK_MIN_LENGTH = 3
PROBLEM_HERO_MIN_GAMES = 5
PROBLEM_HERO_MAX_WIN_RATE = 40
STRONG_HERO_MIN_GAMES = 3
STRONG_HERO_MIN_WIN_RATE = 60
LONG_GAME_AVERAGE_SECONDS = 45 * 60
LATE_GAME_SECONDS = 40 * 60
LATE_GAME_MIN_MATCHES = 5
LOW_RANKED_RATIO = 0.3
LOW_RANKED_MIN_MATCHES = 10


@dataclass(frozen=True)
class Insight:
    type: InsightType
    title: str
    message: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


InsightRule = Callable[[Sequence[Match]], list[Insight]]

INSUFFICIENT_DATA = Insight(
    type=InsightType.INFO,
    title="Not Enough Data",
    message="Play more matches to receive personalized insights.",
)


def check_death_rate(matches: Sequence[Match]) -> list[Insight]:
    recent = matches[:RECENT_WINDOW]
    if not recent:
        return []

    average_deaths = sum(match.kda.deaths for match in recent) / len(recent)
    if average_deaths <= HIGH_DEATHS_THRESHOLD:
        return []

    return [
        Insight(
            type=InsightType.WARNING,
            title="Too Many Recent Deaths",
            message=(
                f"Over your last {len(recent)} matches you averaged "
                f"{to_fixed(average_deaths, 1):.1f} deaths. Try playing safer in the early game."
            ),
        )
    ]


def _hero_records(matches: Sequence[Match]) -> dict[int, dict[str, Any]]:
    records: dict[int, dict[str, Any]] = {}
    for match in matches:
        record = records.setdefault(match.hero_id, {"name": match.hero_name, "games": 0, "wins": 0})
        record["games"] += 1
        if match.result is MatchResult.WIN:
            record["wins"] += 1
    return records


def check_synergies(matches: Sequence[Match]) -> list[Insight]:
    candidates = []
    for record in _hero_records(matches).values():
        if record["games"] < SYNERGY_MIN_GAMES:
            continue
        win_rate = round_half_up(record["wins"] / record["games"] * 100)
        if win_rate >= SYNERGY_MIN_WIN_RATE:
            candidates.append((win_rate, record))

    if not candidates:
        return []

    candidates.sort(key=lambda candidate: candidate[0], reverse=True)
    win_rate, record = candidates[0]
    return [
        Insight(
            type=InsightType.SUCCESS,
            title="High Synergy",
            message=(
                f"You win {win_rate}% of your games with {record['name']} "
                f"({record['games']} matches)."
            ),
        )
    ]


def current_streak(matches: Sequence[Match]) -> tuple[MatchResult, int]:
    """Length of the run of identical known outcomes starting at the newest match."""
    if not matches:
        return MatchResult.UNKNOWN, 0

    streak_type = matches[0].result
    if streak_type is MatchResult.UNKNOWN:
        return streak_type, 0

    length = 0
    for match in matches:
        if match.result is not streak_type:
            break
        length += 1
    return streak_type, length


def check_streaks(matches: Sequence[Match]) -> list[Insight]:
    if len(matches) < STREAK_MIN_LENGTH:
        return []

    streak_type, length = current_streak(matches)
    if length < STREAK_MIN_LENGTH:
        return []

    if streak_type is MatchResult.WIN:
        return [
            Insight(
                type=InsightType.SUCCESS,
                title="Win Streak!",
                message=f"You are on a {length} game win streak! Keep it up!",
            )
        ]
    return [
        Insight(
            type=InsightType.WARNING,
            title="Losing Streak",
            message=f"{length} losses in a row. Consider taking a break or changing your strategy.",
        )
    ]


def check_hero_performance(matches: Sequence[Match]) -> list[Insight]:
    heroes = get_most_played_heroes(matches, 10)
    insights: list[Insight] = []

    problematic = next(
        (
            hero
            for hero in heroes
            if hero.games >= PROBLEM_HERO_MIN_GAMES and hero.win_rate < PROBLEM_HERO_MAX_WIN_RATE
        ),
        None,
    )
    if problematic is not None:
        insights.append(
            Insight(
                type=InsightType.WARNING,
                title="Hero Performance",
                message=(
                    f"Your win rate with {problematic.hero_name} is only {problematic.win_rate}% "
                    f"over {problematic.games} matches. Consider practicing in unranked "
                    "or picking another hero."
                ),
            )
        )

    best = next(
        (
            hero
            for hero in heroes
            if hero.games >= STRONG_HERO_MIN_GAMES and hero.win_rate >= STRONG_HERO_MIN_WIN_RATE
        ),
        None,
    )
    if best is not None:
        insights.append(
            Insight(
                type=InsightType.SUCCESS,
                title="Strong Hero",
                message=(
                    f"{best.hero_name} is your most efficient hero with a {best.win_rate}% "
                    f"win rate over {best.games} matches."
                ),
            )
        )

    return insights


def check_play_patterns(matches: Sequence[Match]) -> list[Insight]:
    if not matches:
        return []

    insights: list[Insight] = []
    average_duration = sum(match.duration.seconds for match in matches) / len(matches)

    if average_duration > LONG_GAME_AVERAGE_SECONDS:
        late_games = [match for match in matches if match.duration.seconds > LATE_GAME_SECONDS]
        if len(late_games) >= LATE_GAME_MIN_MATCHES:
            late_wins = sum(1 for match in late_games if match.result is MatchResult.WIN)
            late_win_rate = round_half_up(late_wins / len(late_games) * 100)
            insights.append(
                Insight(
                    type=InsightType.INFO,
                    title="Long Matches",
                    message=(
                        "Your matches often go past 40 minutes. "
                        f"Your late game win rate is {late_win_rate}%."
                    ),
                )
            )

    ranked_ratio = sum(1 for match in matches if match.match_type is MatchType.RANKED) / len(matches)
    if ranked_ratio < LOW_RANKED_RATIO and len(matches) > LOW_RANKED_MIN_MATCHES:
        insights.append(
            Insight(
                type=InsightType.INFO,
                title="Game Mode",
                message=(
                    f"Only {round_half_up(ranked_ratio * 100)}% of your matches are ranked. "
                    "Play more ranked to improve your MMR!"
                ),
            )
        )

    return insights


INSIGHT_RULES: tuple[InsightRule, ...] = (
    check_death_rate,
    check_synergies,
    check_streaks,
    check_hero_performance,
    check_play_patterns,
)


def generate_insights(
    matches: Sequence[Match],
    *,
    limit: int = DEFAULT_INSIGHT_LIMIT,
    rules: Sequence[InsightRule] = INSIGHT_RULES,
) -> list[Insight]:
    """Evaluate every rule in order and keep the first ``limit`` insights."""
    if len(matches) < MIN_MATCHES_FOR_INSIGHTS:
        return [INSUFFICIENT_DATA]

    insights: list[Insight] = []
    for rule in rules:
        insights.extend(rule(matches))
    return insights[:limit]


__all__ = [
    "INSIGHT_RULES",
    "INSUFFICIENT_DATA",
    "Insight",
    "InsightRule",
    "check_death_rate",
    "check_hero_performance",
    "check_play_patterns",
    "check_streaks",
    "check_synergies",
    "current_streak",
    "generate_insights",
]

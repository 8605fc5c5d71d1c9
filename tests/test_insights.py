"""Unit tests for rule-based insight generation."""

from __future__ import annotations

from domain.common import HeroInfo
from domain.insights import (
    INSUFFICIENT_DATA,
    check_death_rate,
    check_hero_performance,
    check_play_patterns,
    check_streaks,
    check_synergies,
    current_streak,
    generate_insights,
)
from domain.normalizer import normalize_match
from domain.protocol import InsightType, MatchResult

HEROES = {
    1: HeroInfo(id=1, name="Anti-Mage"),
    2: HeroInfo(id=2, name="Axe"),
    3: HeroInfo(id=3, name="Bane"),
}


def _match(
    match_id: int,
    *,
    won: bool | None = True,
    hero_id: int = 1,
    deaths: int = 0,
    duration: int = 1800,
    lobby_type: int = 0,
):
    return normalize_match(
        {
            "match_id": match_id,
            "hero_id": hero_id,
            "player_slot": 0,
            "radiant_win": won,
            "kills": 5,
            "deaths": deaths,
            "assists": 5,
            "duration": duration,
            "lobby_type": lobby_type,
            "game_mode": 1,
            "start_time": 1_767_600_000 - match_id * 3600,
        },
        HEROES,
    )


def _results(*outcomes: bool | None):
    return [_match(index, won=won, hero_id=index % 3 + 1) for index, won in enumerate(outcomes)]


def test_small_collections_only_report_insufficient_data() -> None:
    matches = [_match(index, deaths=20) for index in range(4)]
    assert generate_insights(matches) == [INSUFFICIENT_DATA]
    assert generate_insights([]) == [INSUFFICIENT_DATA]
    assert INSUFFICIENT_DATA.type is InsightType.INFO


def test_current_streak_counts_from_newest_match() -> None:
    assert current_streak(_results(True, True, True, False, True)) == (MatchResult.WIN, 3)
    assert current_streak(_results(False, False, True)) == (MatchResult.LOSS, 2)
    assert current_streak(_results(None, True, True)) == (MatchResult.UNKNOWN, 0)
    assert current_streak([]) == (MatchResult.UNKNOWN, 0)


def test_check_streaks_reports_win_and_loss_runs() -> None:
    [win] = check_streaks(_results(True, True, True, False, True))
    assert win.type is InsightType.SUCCESS
    assert win.title == "Win Streak!"
    assert "3 game win streak" in win.message

    [loss] = check_streaks(_results(False, False, False, False, True))
    assert loss.type is InsightType.WARNING
    assert loss.title == "Losing Streak"
    assert loss.message.startswith("4 losses in a row")

    assert check_streaks(_results(True, True, False, True, True)) == []
    assert check_streaks(_results(None, True, True, True, True)) == []


def test_death_rate_must_exceed_threshold() -> None:
    high = [_match(index, deaths=9) for index in range(5)]
    [insight] = check_death_rate(high)
    assert insight.type is InsightType.WARNING
    assert insight.title == "Too Many Recent Deaths"
    assert "9.0 deaths" in insight.message

    at_threshold = [_match(index, deaths=8) for index in range(5)]
    assert check_death_rate(at_threshold) == []


def test_death_rate_only_looks_at_five_newest_matches() -> None:
    matches = [_match(index, deaths=0) for index in range(5)]
    matches.extend(_match(index, deaths=30) for index in range(5, 10))
    assert check_death_rate(matches) == []


def test_synergy_requires_three_games_and_seventy_percent() -> None:
    strong = [_match(index, hero_id=2, won=True) for index in range(3)]
    [insight] = check_synergies(strong)
    assert insight.type is InsightType.SUCCESS
    assert insight.title == "High Synergy"
    assert "100%" in insight.message
    assert "Axe" in insight.message

    two_of_three = [
        _match(1, hero_id=2, won=True),
        _match(2, hero_id=2, won=True),
        _match(3, hero_id=2, won=False),
    ]
    assert check_synergies(two_of_three) == []
    assert check_synergies(strong[:2]) == []


def test_hero_performance_flags_weak_and_strong_heroes() -> None:
    matches = [_match(index, hero_id=1, won=index == 0) for index in range(5)]
    matches.extend(_match(index, hero_id=3, won=index != 7) for index in range(5, 8))

    warning, success = check_hero_performance(matches)

    assert warning.type is InsightType.WARNING
    assert warning.title == "Hero Performance"
    assert "Anti-Mage" in warning.message
    assert "20%" in warning.message
    assert success.type is InsightType.SUCCESS
    assert success.title == "Strong Hero"
    assert "Bane" in success.message
    assert "67%" in success.message


def test_long_matches_report_late_game_win_rate() -> None:
    matches = [_match(index, duration=2800, won=index < 3) for index in range(5)]

    insights = check_play_patterns(matches)

    assert [insight.title for insight in insights] == ["Long Matches"]
    assert insights[0].type is InsightType.INFO
    assert "60%" in insights[0].message


def test_low_ranked_ratio_needs_more_than_ten_matches() -> None:
    eleven = [_match(index, lobby_type=0) for index in range(11)]
    [insight] = check_play_patterns(eleven)
    assert insight.title == "Game Mode"
    assert "Only 0%" in insight.message

    ten = [_match(index, lobby_type=0) for index in range(10)]
    assert check_play_patterns(ten) == []

    ranked = [_match(index, lobby_type=7 if index < 4 else 0) for index in range(11)]
    assert check_play_patterns(ranked) == []


def test_generate_insights_keeps_rule_order_and_truncates() -> None:
    matches = [_match(index, hero_id=2, won=True, deaths=10) for index in range(3)]
    matches.extend(_match(index, hero_id=1, won=False, deaths=10) for index in range(3, 8))
    matches.extend(_match(index, hero_id=3, won=index % 2 == 0) for index in range(8, 12))

    insights = generate_insights(matches)

    assert [insight.title for insight in insights] == [
        "Too Many Recent Deaths",
        "High Synergy",
        "Win Streak!",
        "Hero Performance",
        "Strong Hero",
    ]

    untruncated = generate_insights(matches, limit=10)
    assert untruncated[:5] == insights
    assert [insight.title for insight in untruncated[5:]] == ["Game Mode"]


def test_generate_insights_accepts_custom_rules() -> None:
    matches = [_match(index, deaths=20) for index in range(5)]
    assert generate_insights(matches, rules=(check_streaks,))[0].title == "Win Streak!"
    assert generate_insights(matches, rules=()) == []

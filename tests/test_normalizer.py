"""Unit tests for raw match normalization."""

from __future__ import annotations

from dataclasses import replace

import pytest

from domain.analytics import calculate_average_kda
from domain.common import MAX_START_TIME, HeroInfo, RawMatchRecord
from domain.normalizer import (
    MatchValidationError,
    calculate_kda_ratio,
    create_hero_directory,
    get_match_result,
    get_match_type,
    normalize_match,
    normalize_matches,
)
from domain.protocol import MatchResult, MatchType
from domain.time_window import DEFAULT_POLICY, in_window

HERO_STATS = [
    {
        "id": 1,
        "localized_name": "Anti-Mage",
        "img": "/apps/dota2/images/heroes/antimage_full.png",
        "icon": "/apps/dota2/images/heroes/antimage_icon.png",
        "primary_attr": "agi",
        "attack_type": "Melee",
        "roles": ["Carry", "Escape"],
    },
    {"id": 2, "localized_name": "Axe", "img": None, "icon": None},
]


def _full_record(**overrides) -> dict:
    record = {
        "match_id": 7_500_000_001,
        "hero_id": 1,
        "player_slot": 3,
        "radiant_win": True,
        "kills": 6,
        "deaths": 3,
        "assists": 9,
        "duration": 2405,
        "lobby_type": 7,
        "game_mode": 22,
        "lane": 1,
        "lane_role": 1,
        "party_size": 1,
        "average_rank": 55,
        "start_time": 1_767_607_200,
    }
    record.update(overrides)
    return record


def test_kda_ratio_without_deaths_is_kills_plus_assists() -> None:
    assert calculate_kda_ratio(5, 0, 3) == 8


def test_kda_ratio_divides_by_deaths_to_two_decimals() -> None:
    assert calculate_kda_ratio(6, 3, 9) == pytest.approx(5.00)
    assert calculate_kda_ratio(7, 3, 4) == pytest.approx(3.67)


def test_match_result_depends_on_side_and_outcome() -> None:
    assert get_match_result(True, 3) is MatchResult.WIN
    assert get_match_result(True, 131) is MatchResult.LOSS
    assert get_match_result(False, 131) is MatchResult.WIN
    assert get_match_result(False, 0) is MatchResult.LOSS
    assert get_match_result(None, 3) is MatchResult.UNKNOWN


def test_turbo_game_mode_overrides_ranked_lobby() -> None:
    assert get_match_type(7, 23) is MatchType.TURBO
    assert get_match_type(5, 22) is MatchType.RANKED
    assert get_match_type(0, 22) is MatchType.NORMAL
    assert get_match_type(None, None) is MatchType.NORMAL


def test_create_hero_directory_builds_cdn_urls() -> None:
    heroes = create_hero_directory(HERO_STATS)

    assert heroes[1].name == "Anti-Mage"
    assert heroes[1].image == "https://cdn.dota2.com/apps/dota2/images/heroes/antimage_full.png"
    assert heroes[1].roles == ("Carry", "Escape")
    assert heroes[2].image is None
    assert heroes[2].roles == ()


@pytest.mark.parametrize(
    ("lobby_type", "game_mode", "expected_type"),
    [
        (7, 22, MatchType.RANKED),
        (7, 23, MatchType.TURBO),
        (0, 1, MatchType.NORMAL),
    ],
)
def test_normalize_full_record(lobby_type: int, game_mode: int, expected_type: MatchType) -> None:
    heroes = create_hero_directory(HERO_STATS)
    match = normalize_match(_full_record(lobby_type=lobby_type, game_mode=game_mode), heroes)

    assert match.match_id == 7_500_000_001
    assert match.hero_name == "Anti-Mage"
    assert match.result is MatchResult.WIN
    assert match.match_type is expected_type
    assert match.kda.kills == 6
    assert match.kda.ratio == pytest.approx(5.0)
    assert match.duration.seconds == 2405
    assert match.duration.formatted == "40:05"
    assert match.timestamp == 1_767_607_200_000
    assert match.is_radiant is True
    assert match.lane == 1


def test_normalize_labels_game_mode_and_lobby_type() -> None:
    match = normalize_match(_full_record(lobby_type=5, game_mode=23), {})
    assert match.game_mode == "Turbo"
    assert match.lobby_type == "Ranked Solo/Duo"

    unknown = normalize_match(_full_record(lobby_type=42, game_mode=99), {})
    assert unknown.game_mode == "Unknown"
    assert unknown.lobby_type == "Unknown"


def test_normalize_defaults_missing_fields() -> None:
    match = normalize_match({"match_id": 42}, {})

    assert match.hero_name == "Unknown"
    assert match.hero_image is None
    assert match.result is MatchResult.UNKNOWN
    assert (match.kda.kills, match.kda.deaths, match.kda.assists) == (0, 0, 0)
    assert match.kda.ratio == 0
    assert match.duration.seconds == 0
    assert match.duration.formatted == "0:00"
    assert match.timestamp == 0
    assert match.lane is None
    assert match.match_type is MatchType.NORMAL
    assert match.game_mode == "Unknown"


def test_missing_match_id_is_rejected() -> None:
    with pytest.raises(MatchValidationError, match="match_id"):
        normalize_match({"hero_id": 1, "kills": 3}, {})


def test_non_mapping_payload_is_rejected() -> None:
    with pytest.raises(MatchValidationError):
        RawMatchRecord.from_payload(["not", "a", "match"])


def test_hero_details_are_snapshotted_at_normalization() -> None:
    heroes = {1: HeroInfo(id=1, name="Anti-Mage")}
    match = normalize_match(_full_record(), heroes)

    heroes[1] = HeroInfo(id=1, name="Renamed Hero")

    assert match.hero_name == "Anti-Mage"


def test_normalize_matches_preserves_order() -> None:
    matches = normalize_matches(
        [_full_record(match_id=3), _full_record(match_id=1), _full_record(match_id=2)],
        {},
    )
    assert [match.match_id for match in matches] == [3, 1, 2]


def test_renormalizing_yields_equal_match() -> None:
    heroes = create_hero_directory(HERO_STATS)
    record = RawMatchRecord.from_payload(_full_record())
    assert normalize_match(record, heroes) == normalize_match(record, heroes)


def test_negative_kda_counts_are_clamped_to_zero() -> None:
    match = normalize_match({"match_id": 1, "kills": -3, "deaths": -1, "assists": 0}, {})

    assert (match.kda.kills, match.kda.deaths, match.kda.assists) == (0, 0, 0)
    assert match.kda.ratio == 0.0


def test_negative_deaths_do_not_skew_averages() -> None:
    matches = normalize_matches(
        [
            {"match_id": 1, "kills": 4, "deaths": -2},
            {"match_id": 2, "kills": 4, "deaths": 2},
        ],
        {},
    )

    average = calculate_average_kda(matches)

    assert average.deaths == 1.0
    assert average.ratio == 4.0


@pytest.mark.parametrize("start_time", [10**12, -1, MAX_START_TIME + 1])
def test_unrepresentable_start_time_is_rejected(start_time: int) -> None:
    with pytest.raises(MatchValidationError, match="start_time"):
        normalize_match({"match_id": 1, "start_time": start_time}, {})


@pytest.mark.parametrize("timezone", ["UTC", "America/Sao_Paulo", "Pacific/Kiritimati"])
def test_latest_accepted_start_time_stays_filterable(timezone: str) -> None:
    match = normalize_match({"match_id": 1, "start_time": MAX_START_TIME}, {})
    policy = replace(DEFAULT_POLICY, timezone=timezone)
    assert isinstance(in_window(match.timestamp, policy), bool)


def test_directly_built_record_checks_start_time() -> None:
    with pytest.raises(MatchValidationError):
        RawMatchRecord(match_id=1, start_time=10**12)


def test_non_finite_numbers_are_treated_as_missing() -> None:
    record = RawMatchRecord.from_payload(
        {"match_id": 1, "kills": float("inf"), "duration": float("-inf"), "lane": float("nan")}
    )

    assert record.kills is None
    assert record.duration is None
    assert record.lane is None


def test_non_finite_match_id_is_rejected() -> None:
    with pytest.raises(MatchValidationError):
        RawMatchRecord.from_payload({"match_id": float("inf")})

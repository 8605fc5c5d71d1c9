"""Raw match normalization."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from domain.codes import (
    RANKED_LOBBY_TYPES,
    TURBO_GAME_MODE,
    UNKNOWN_LABEL,
    game_mode_label,
    lobby_type_label,
)
from domain.common import (
    Duration,
    HeroDirectory,
    HeroInfo,
    Kda,
    Match,
    MatchValidationError,
    RawMatchRecord,
)
from domain.formatting import format_duration, to_fixed
from domain.protocol import MatchResult, MatchType

logger = logging.getLogger(__name__)

HERO_CDN_BASE_URL = "https://cdn.dota2.com"
RADIANT_SLOT_LIMIT = 128


def hero_image_url(image_path: str | None) -> str | None:
    if not image_path:
        return None
    return f"{HERO_CDN_BASE_URL}{image_path}"


def create_hero_directory(hero_stats: Iterable[Mapping[str, Any]]) -> dict[int, HeroInfo]:
    """Build the hero lookup from hero catalog rows."""
    directory: dict[int, HeroInfo] = {}
    for row in hero_stats:
        hero_id = int(row["id"])
        directory[hero_id] = HeroInfo(
            id=hero_id,
            name=str(row.get("localized_name") or UNKNOWN_LABEL),
            image=hero_image_url(row.get("img")),
            icon=hero_image_url(row.get("icon")),
            primary_attr=row.get("primary_attr"),
            attack_type=row.get("attack_type"),
            roles=tuple(row.get("roles") or ()),
        )
    return directory


def is_radiant_slot(player_slot: int) -> bool:
    return player_slot < RADIANT_SLOT_LIMIT


def get_match_result(radiant_win: bool | None, player_slot: int) -> MatchResult:
    """Resolve win/loss for the player's side; unknown when the outcome is missing."""
    if radiant_win is None:
        return MatchResult.UNKNOWN
    return MatchResult.WIN if is_radiant_slot(player_slot) == radiant_win else MatchResult.LOSS


def get_match_type(lobby_type: int | None, game_mode: int | None) -> MatchType:
    """Classify a match; turbo game mode wins over any ranked lobby."""
    if game_mode == TURBO_GAME_MODE:
        return MatchType.TURBO
    if lobby_type in RANKED_LOBBY_TYPES:
        return MatchType.RANKED
    return MatchType.NORMAL


def calculate_kda_ratio(kills: int, deaths: int, assists: int) -> float:
    """(kills + assists) / deaths to two decimals, or kills + assists with no deaths."""
    if deaths == 0:
        return float(kills + assists)
    return to_fixed((kills + assists) / deaths, 2)


def build_kda(kills: int | None, deaths: int | None, assists: int | None) -> Kda:
    """Counts are clamped to zero; missing or negative values never reach the ratio."""
    kills = max(kills or 0, 0)
    deaths = max(deaths or 0, 0)
    assists = max(assists or 0, 0)
    return Kda(
        kills=kills,
        deaths=deaths,
        assists=assists,
        ratio=calculate_kda_ratio(kills, deaths, assists),
    )


def build_duration(seconds: int | None) -> Duration:
    seconds = max(seconds or 0, 0)
    return Duration(seconds=seconds, formatted=format_duration(seconds))


def normalize_match(raw: RawMatchRecord | Mapping[str, Any], heroes: HeroDirectory) -> Match:
    """Convert one raw match row into a canonical ``Match``."""
    record = raw if isinstance(raw, RawMatchRecord) else RawMatchRecord.from_payload(raw)

    hero_id = record.hero_id or 0
    hero = heroes.get(hero_id)
    if hero is None:
        logger.debug("match_id=%s references unknown hero_id=%s", record.match_id, hero_id)

    player_slot = record.player_slot or 0

    return Match(
        match_id=record.match_id,
        hero_id=hero_id,
        hero_name=hero.name if hero is not None else UNKNOWN_LABEL,
        hero_image=hero.image if hero is not None else None,
        hero_icon=hero.icon if hero is not None else None,
        result=get_match_result(record.radiant_win, player_slot),
        kda=build_kda(record.kills, record.deaths, record.assists),
        duration=build_duration(record.duration),
        match_type=get_match_type(record.lobby_type, record.game_mode),
        game_mode=game_mode_label(record.game_mode),
        lobby_type=lobby_type_label(record.lobby_type),
        timestamp=(record.start_time or 0) * 1000,
        player_slot=player_slot,
        is_radiant=is_radiant_slot(player_slot),
        lane=record.lane,
        lane_role=record.lane_role,
        party_size=record.party_size,
        average_rank=record.average_rank,
    )


def normalize_matches(
    raw_matches: Iterable[RawMatchRecord | Mapping[str, Any]],
    heroes: HeroDirectory,
) -> tuple[Match, ...]:
    """Normalize a batch of raw rows, preserving their order."""
    matches = tuple(normalize_match(raw, heroes) for raw in raw_matches)
    logger.debug("normalized %d matches against %d heroes", len(matches), len(heroes))
    return matches


__all__ = [
    "HERO_CDN_BASE_URL",
    "MatchValidationError",
    "build_duration",
    "build_kda",
    "calculate_kda_ratio",
    "create_hero_directory",
    "get_match_result",
    "get_match_type",
    "hero_image_url",
    "is_radiant_slot",
    "normalize_match",
    "normalize_matches",
]

"""Shared types for match analytics."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from domain.protocol import MatchResult, MatchType


class MatchValidationError(ValueError):
    """Raised when a raw match payload cannot identify a match."""


# Latest start time whose local date still fits in ``datetime`` in every zone.
MAX_START_TIME = int(datetime(9999, 12, 30, tzinfo=UTC).timestamp())


def coerce_int(value: Any) -> int | None:
    """Integer value of a JSON scalar, or ``None`` for missing, boolean or non-numeric input."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _optional_int(payload: Mapping[str, Any], key: str) -> int | None:
    return coerce_int(payload.get(key))


def _optional_bool(payload: Mapping[str, Any], key: str) -> bool | None:
    value = payload.get(key)
    if isinstance(value, bool):
        return value
    if value in (0, 1):
        return bool(value)
    return None


@dataclass(frozen=True)
class RawMatchRecord:
    """One row of the player match list, exactly as the API reported it."""

    match_id: int
    hero_id: int | None = None
    player_slot: int | None = None
    radiant_win: bool | None = None
    kills: int | None = None
    deaths: int | None = None
    assists: int | None = None
    duration: int | None = None
    lobby_type: int | None = None
    game_mode: int | None = None
    lane: int | None = None
    lane_role: int | None = None
    party_size: int | None = None
    average_rank: int | None = None
    start_time: int | None = None

    def __post_init__(self) -> None:
        if self.start_time is not None and not 0 <= self.start_time <= MAX_START_TIME:
            raise MatchValidationError(
                f"match_id={self.match_id}: start_time {self.start_time} is not a valid epoch second"
            )

    @classmethod
    def from_payload(cls, payload: Any) -> RawMatchRecord:
        """Build a record from parsed JSON, rejecting payloads without a match id."""
        if not isinstance(payload, Mapping):
            raise MatchValidationError(
                f"Match payload must be a mapping, got {type(payload).__name__}"
            )

        match_id = _optional_int(payload, "match_id")
        if match_id is None:
            raise MatchValidationError(
                f"Match payload is missing an integer match_id: keys={sorted(payload.keys())}"
            )

        return cls(
            match_id=match_id,
            hero_id=_optional_int(payload, "hero_id"),
            player_slot=_optional_int(payload, "player_slot"),
            radiant_win=_optional_bool(payload, "radiant_win"),
            kills=_optional_int(payload, "kills"),
            deaths=_optional_int(payload, "deaths"),
            assists=_optional_int(payload, "assists"),
            duration=_optional_int(payload, "duration"),
            lobby_type=_optional_int(payload, "lobby_type"),
            game_mode=_optional_int(payload, "game_mode"),
            lane=_optional_int(payload, "lane"),
            lane_role=_optional_int(payload, "lane_role"),
            party_size=_optional_int(payload, "party_size"),
            average_rank=_optional_int(payload, "average_rank"),
            start_time=_optional_int(payload, "start_time"),
        )


@dataclass(frozen=True)
class HeroInfo:
    """Static catalog entry for one hero."""

    id: int
    name: str
    image: str | None = None
    icon: str | None = None
    primary_attr: str | None = None
    attack_type: str | None = None
    roles: tuple[str, ...] = ()


HeroDirectory = Mapping[int, HeroInfo]


@dataclass(frozen=True)
class Kda:
    kills: int
    deaths: int
    assists: int
    ratio: float


@dataclass(frozen=True)
class Duration:
    seconds: int
    formatted: str


@dataclass(frozen=True)
class Match:
    """Canonical match derived from a raw record and a hero directory snapshot."""

    match_id: int
    hero_id: int
    hero_name: str
    hero_image: str | None
    hero_icon: str | None
    result: MatchResult
    kda: Kda
    duration: Duration
    match_type: MatchType
    game_mode: str
    lobby_type: str
    timestamp: int
    player_slot: int
    is_radiant: bool
    lane: int | None = None
    lane_role: int | None = None
    party_size: int | None = None
    average_rank: int | None = None


@dataclass(frozen=True)
class MatchPlayer:
    """One of the ten participants in a detailed match."""

    account_id: int | None
    name: str
    hero_name: str
    hero_image: str | None
    kills: int
    deaths: int
    assists: int
    net_worth: int
    last_hits: int
    denies: int
    gpm: int
    xpm: int
    hero_damage: int
    tower_damage: int
    hero_healing: int
    is_radiant: bool


@dataclass(frozen=True)
class PlayerPerspective:
    """The tracked player's own view of a detailed match."""

    hero: HeroInfo | None
    kda: Kda
    result: MatchResult
    is_radiant: bool


@dataclass(frozen=True)
class MatchDetail:
    match_id: int
    radiant_score: int | None
    dire_score: int | None
    radiant_win: bool | None
    duration: Duration
    timestamp: int
    game_mode: str
    lobby_type: str
    gold_advantage: tuple[int, ...] = ()
    xp_advantage: tuple[int, ...] = ()
    players: tuple[MatchPlayer, ...] = field(default_factory=tuple)
    current_player: PlayerPerspective | None = None


__all__ = [
    "MAX_START_TIME",
    "Duration",
    "HeroDirectory",
    "HeroInfo",
    "Kda",
    "Match",
    "MatchDetail",
    "MatchPlayer",
    "MatchValidationError",
    "PlayerPerspective",
    "RawMatchRecord",
    "coerce_int",
]

"""Shared enums for match analytics."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Protocol, runtime_checkable


class MatchResult(str, Enum):
    """Outcome of one match from the tracked player's point of view."""

    WIN = "win"
    LOSS = "loss"
    UNKNOWN = "unknown"


class MatchType(str, Enum):
    """Coarse match classification derived from lobby type and game mode."""

    RANKED = "ranked"
    NORMAL = "normal"
    TURBO = "turbo"


class Lane(IntEnum):
    """Lane codes reported by the stats API."""

    SAFE = 1
    MID = 2
    OFF = 3
    JUNGLE = 4

    @property
    def display_name(self) -> str:
        return _LANE_NAMES[self]


_LANE_NAMES = {
    Lane.SAFE: "Safe Lane",
    Lane.MID: "Mid Lane",
    Lane.OFF: "Off Lane",
    Lane.JUNGLE: "Jungle",
}


class InsightType(str, Enum):
    """Severity of a generated insight."""

    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"


class FilterMode(str, Enum):
    """Which subset of matches feeds the analytics."""

    WORKDAY = "workday"
    ALL = "all"


@runtime_checkable
class MatchDataSource(Protocol):
    """What the loading pipeline needs from a stats provider."""

    def get_player(self, account_id: str) -> Any: ...

    def get_hero_stats(self) -> list[Any]: ...

    def get_matches(self, account_id: str, limit: int = 100) -> list[Any]: ...


__all__ = [
    "FilterMode",
    "InsightType",
    "Lane",
    "MatchDataSource",
    "MatchResult",
    "MatchType",
]

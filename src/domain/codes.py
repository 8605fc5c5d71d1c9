"""Game-mode and lobby-type code tables."""

from __future__ import annotations

from enum import IntEnum

UNKNOWN_LABEL = "Unknown"


class GameMode(IntEnum):
    UNKNOWN = 0
    ALL_PICK = 1
    CAPTAINS_MODE = 2
    RANDOM_DRAFT = 3
    SINGLE_DRAFT = 4
    ALL_RANDOM = 5
    INTRO = 6
    DIRETIDE = 7
    REVERSE_CAPTAINS_MODE = 8
    GREEVILING = 9
    TUTORIAL = 10
    MID_ONLY = 11
    LEAST_PLAYED = 12
    LIMITED_HEROES = 13
    COMPENDIUM = 14
    CUSTOM = 15
    CAPTAINS_DRAFT = 16
    BALANCED_DRAFT = 17
    ABILITY_DRAFT = 18
    EVENT = 19
    ALL_RANDOM_DEATHMATCH = 20
    ONE_V_ONE_MID = 21
    ALL_DRAFT = 22
    TURBO = 23
    MUTATION = 24

    @property
    def label(self) -> str:
        return _GAME_MODE_LABELS[self]


class LobbyType(IntEnum):
    NORMAL = 0
    PRACTICE = 1
    TOURNAMENT = 2
    COOP_BOT = 4
    RANKED_SOLO = 5
    RANKED_TEAM = 6
    RANKED = 7
    SOLO_MID = 8
    BATTLE_CUP = 9

    @property
    def label(self) -> str:
        return _LOBBY_TYPE_LABELS[self]


_GAME_MODE_LABELS = {
    GameMode.UNKNOWN: UNKNOWN_LABEL,
    GameMode.ALL_PICK: "All Pick",
    GameMode.CAPTAINS_MODE: "Captains Mode",
    GameMode.RANDOM_DRAFT: "Random Draft",
    GameMode.SINGLE_DRAFT: "Single Draft",
    GameMode.ALL_RANDOM: "All Random",
    GameMode.INTRO: "Intro",
    GameMode.DIRETIDE: "Diretide",
    GameMode.REVERSE_CAPTAINS_MODE: "Reverse Captains Mode",
    GameMode.GREEVILING: "Greeviling",
    GameMode.TUTORIAL: "Tutorial",
    GameMode.MID_ONLY: "Mid Only",
    GameMode.LEAST_PLAYED: "Least Played",
    GameMode.LIMITED_HEROES: "Limited Heroes",
    GameMode.COMPENDIUM: "Compendium",
    GameMode.CUSTOM: "Custom",
    GameMode.CAPTAINS_DRAFT: "Captains Draft",
    GameMode.BALANCED_DRAFT: "Balanced Draft",
    GameMode.ABILITY_DRAFT: "Ability Draft",
    GameMode.EVENT: "Event",
    GameMode.ALL_RANDOM_DEATHMATCH: "All Random Deathmatch",
    GameMode.ONE_V_ONE_MID: "1v1 Mid",
    GameMode.ALL_DRAFT: "All Draft",
    GameMode.TURBO: "Turbo",
    GameMode.MUTATION: "Mutation",
}

_LOBBY_TYPE_LABELS = {
    LobbyType.NORMAL: "Normal",
    LobbyType.PRACTICE: "Practice",
    LobbyType.TOURNAMENT: "Tournament",
    LobbyType.COOP_BOT: "Co-op Bot",
    LobbyType.RANKED_SOLO: "Ranked Solo/Duo",
    LobbyType.RANKED_TEAM: "Ranked Team",
    LobbyType.RANKED: "Ranked",
    LobbyType.SOLO_MID: "Solo Mid 1v1",
    LobbyType.BATTLE_CUP: "Battle Cup",
}

TURBO_GAME_MODE = GameMode.TURBO
RANKED_LOBBY_TYPES = frozenset(
    {LobbyType.RANKED_SOLO, LobbyType.RANKED_TEAM, LobbyType.RANKED}
)


def game_mode_label(code: int | None) -> str:
    """Return the display label for a game-mode code, or ``"Unknown"``."""
    if code is None:
        return UNKNOWN_LABEL
    try:
        return GameMode(code).label
    except ValueError:
        return UNKNOWN_LABEL


def lobby_type_label(code: int | None) -> str:
    """Return the display label for a lobby-type code, or ``"Unknown"``."""
    if code is None:
        return UNKNOWN_LABEL
    try:
        return LobbyType(code).label
    except ValueError:
        return UNKNOWN_LABEL


__all__ = [
    "GameMode",
    "LobbyType",
    "RANKED_LOBBY_TYPES",
    "TURBO_GAME_MODE",
    "UNKNOWN_LABEL",
    "game_mode_label",
    "lobby_type_label",
]

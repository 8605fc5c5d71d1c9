"""Normalization of the full match payload used by the match detail view."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from domain.codes import UNKNOWN_LABEL, game_mode_label, lobby_type_label
from domain.common import (
    MAX_START_TIME,
    HeroDirectory,
    MatchDetail,
    MatchPlayer,
    MatchValidationError,
    PlayerPerspective,
    coerce_int,
)
from domain.normalizer import build_duration, build_kda, get_match_result, is_radiant_slot


def _int(value: Any) -> int:
    return coerce_int(value) or 0


def _count(value: Any) -> int:
    return max(_int(value), 0)


def _series(values: Any) -> tuple[int, ...]:
    if not isinstance(values, list):
        return ()
    return tuple(_int(value) for value in values)


def _player_is_radiant(player: Mapping[str, Any]) -> bool:
    if player.get("isRadiant"):
        return True
    return is_radiant_slot(_int(player.get("player_slot")))


def _normalize_player(player: Mapping[str, Any], heroes: HeroDirectory) -> MatchPlayer:
    hero = heroes.get(_int(player.get("hero_id")))
    account_id = player.get("account_id")
    return MatchPlayer(
        account_id=None if account_id is None else _int(account_id),
        name=str(player.get("personaname") or "Anonymous"),
        hero_name=hero.name if hero is not None else UNKNOWN_LABEL,
        hero_image=hero.image if hero is not None else None,
        kills=_count(player.get("kills")),
        deaths=_count(player.get("deaths")),
        assists=_count(player.get("assists")),
        net_worth=_count(player.get("net_worth")),
        last_hits=_count(player.get("last_hits")),
        denies=_count(player.get("denies")),
        gpm=_count(player.get("gold_per_min")),
        xpm=_count(player.get("xp_per_min")),
        hero_damage=_count(player.get("hero_damage")),
        tower_damage=_count(player.get("tower_damage")),
        hero_healing=_count(player.get("hero_healing")),
        is_radiant=_player_is_radiant(player),
    )


def normalize_match_detail(
    raw: Mapping[str, Any],
    heroes: HeroDirectory,
    player_id: int | str,
) -> MatchDetail:
    """Normalize a full match payload and pick out ``player_id``'s own line."""
    if not isinstance(raw, Mapping):
        raise MatchValidationError(
            f"Match detail payload must be a mapping, got {type(raw).__name__}"
        )
    match_id = coerce_int(raw.get("match_id"))
    if match_id is None:
        raise MatchValidationError("Match detail payload is missing an integer match_id")
    start_time = _int(raw.get("start_time"))
    if not 0 <= start_time <= MAX_START_TIME:
        raise MatchValidationError(
            f"match_id={match_id}: start_time {start_time} is not a valid epoch second"
        )

    radiant_win = raw.get("radiant_win")
    if not isinstance(radiant_win, bool):
        radiant_win = None

    players_raw = [p for p in raw.get("players") or [] if isinstance(p, Mapping)]
    tracked = next(
        (p for p in players_raw if str(p.get("account_id")) == str(player_id)),
        None,
    )

    current_player = None
    if tracked is not None:
        player_slot = _int(tracked.get("player_slot"))
        current_player = PlayerPerspective(
            hero=heroes.get(_int(tracked.get("hero_id"))),
            kda=build_kda(
                _int(tracked.get("kills")),
                _int(tracked.get("deaths")),
                _int(tracked.get("assists")),
            ),
            result=get_match_result(radiant_win, player_slot),
            is_radiant=is_radiant_slot(player_slot),
        )

    radiant_score = raw.get("radiant_score")
    dire_score = raw.get("dire_score")
    return MatchDetail(
        match_id=match_id,
        radiant_score=None if radiant_score is None else _int(radiant_score),
        dire_score=None if dire_score is None else _int(dire_score),
        radiant_win=radiant_win,
        duration=build_duration(_int(raw.get("duration"))),
        timestamp=start_time * 1000,
        game_mode=game_mode_label(raw.get("game_mode")),
        lobby_type=lobby_type_label(raw.get("lobby_type")),
        gold_advantage=_series(raw.get("radiant_gold_adv")),
        xp_advantage=_series(raw.get("radiant_xp_adv")),
        players=tuple(_normalize_player(player, heroes) for player in players_raw),
        current_player=current_player,
    )


__all__ = ["normalize_match_detail"]

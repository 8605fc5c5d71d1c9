"""Unit tests for the dashboard state container."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from domain.common import HeroInfo
from domain.normalizer import normalize_match
from domain.protocol import FilterMode
from domain.state import DashboardState
from domain.time_window import FilterPolicy

POLICY = FilterPolicy(weekdays=frozenset({1, 2, 3, 4, 5}), start_hour=9, end_hour=18)
HEROES = {1: HeroInfo(id=1, name="Anti-Mage")}


def _match(match_id: int, played_at: datetime):
    return normalize_match(
        {
            "match_id": match_id,
            "hero_id": 1,
            "player_slot": 0,
            "radiant_win": True,
            "start_time": int(played_at.timestamp()),
        },
        HEROES,
    )


# 2026-01-05 is a Monday.
INSIDE = _match(1, datetime(2026, 1, 5, 10, 0, tzinfo=UTC))
OUTSIDE = _match(2, datetime(2026, 1, 5, 20, 0, tzinfo=UTC))
WEEKEND = _match(3, datetime(2026, 1, 4, 10, 0, tzinfo=UTC))


def _loaded_state(mode: FilterMode = FilterMode.WORKDAY) -> DashboardState:
    state = DashboardState(policy=POLICY, mode=mode)
    state.load(matches=[INSIDE, OUTSIDE, WEEKEND], heroes=HEROES, player={"profile": {}})
    return state


def test_new_state_is_empty() -> None:
    state = DashboardState()
    assert state.matches == ()
    assert state.active_matches == ()
    assert state.player is None
    assert state.loading is False
    assert state.error is None
    assert state.mode is FilterMode.WORKDAY


def test_active_matches_follow_filter_mode() -> None:
    state = _loaded_state()
    assert state.active_matches == (INSIDE,)
    assert len(state.matches) == 3

    state.set_filter_mode("all")
    assert state.active_matches == (INSIDE, OUTSIDE, WEEKEND)


def test_toggle_switches_between_modes() -> None:
    state = _loaded_state()
    state.toggle_filter_mode()
    assert state.mode is FilterMode.ALL
    state.toggle_filter_mode()
    assert state.mode is FilterMode.WORKDAY


def test_subscribers_are_notified_on_changes() -> None:
    state = _loaded_state()
    seen: list[FilterMode] = []
    unsubscribe = state.subscribe(lambda current: seen.append(current.mode))

    state.set_filter_mode(FilterMode.ALL)
    state.set_filter_mode(FilterMode.ALL)
    state.toggle_filter_mode()
    unsubscribe()
    state.toggle_filter_mode()

    assert seen == [FilterMode.ALL, FilterMode.WORKDAY]


def test_update_policy_reselects_active_matches() -> None:
    state = _loaded_state()
    notified: list[int] = []
    state.subscribe(lambda current: notified.append(len(current.active_matches)))

    state.update_policy(end_hour=24, weekdays=frozenset(range(7)))

    assert state.policy.end_hour == 24
    assert set(state.active_matches) == {INSIDE, OUTSIDE, WEEKEND}
    assert notified == [3]


def test_update_policy_rejects_invalid_values() -> None:
    state = _loaded_state()
    with pytest.raises(ValueError):
        state.update_policy(start_hour=20, end_hour=10)
    assert state.policy == POLICY


def test_loading_lifecycle() -> None:
    state = DashboardState(policy=POLICY)
    events: list[tuple[bool, Exception | None]] = []
    state.subscribe(lambda current: events.append((current.loading, current.error)))

    state.begin_loading()
    error = RuntimeError("boom")
    state.fail(error)
    state.begin_loading()
    state.load(matches=[INSIDE], heroes=HEROES)

    assert events == [(True, None), (False, error), (True, None), (False, None)]
    assert state.matches == (INSIDE,)


def test_heroes_are_read_only() -> None:
    state = _loaded_state()
    with pytest.raises(TypeError):
        state.heroes[2] = HeroInfo(id=2, name="Axe")  # type: ignore[index]

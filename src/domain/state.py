"""Explicit dashboard state container with change subscribers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from domain.common import HeroInfo, Match
from domain.protocol import FilterMode
from domain.time_window import DEFAULT_POLICY, FilterPolicy, active_matches

logger = logging.getLogger(__name__)

StateListener = Callable[["DashboardState"], None]


class DashboardState:
    """Owns loaded data and filter settings; analytics read its data explicitly."""

    def __init__(
        self,
        *,
        policy: FilterPolicy = DEFAULT_POLICY,
        mode: FilterMode = FilterMode.WORKDAY,
    ) -> None:
        self._policy = policy
        self._mode = FilterMode(mode)
        self._matches: tuple[Match, ...] = ()
        self._heroes: Mapping[int, HeroInfo] = MappingProxyType({})
        self._player: Mapping[str, Any] | None = None
        self._loading = False
        self._error: Exception | None = None
        self._listeners: list[StateListener] = []

    @property
    def policy(self) -> FilterPolicy:
        return self._policy

    @property
    def mode(self) -> FilterMode:
        return self._mode

    @property
    def matches(self) -> tuple[Match, ...]:
        """Every loaded match, unfiltered."""
        return self._matches

    @property
    def heroes(self) -> Mapping[int, HeroInfo]:
        return self._heroes

    @property
    def player(self) -> Mapping[str, Any] | None:
        return self._player

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Exception | None:
        return self._error

    @property
    def active_matches(self) -> tuple[Match, ...]:
        """Matches selected by the current mode and policy."""
        return active_matches(self._matches, self._mode, self._policy)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self._listeners = [item for item in self._listeners if item is not listener]

        return unsubscribe

    def begin_loading(self) -> None:
        self._loading = True
        self._error = None
        self._notify()

    def load(
        self,
        *,
        matches: Iterable[Match],
        heroes: Mapping[int, HeroInfo],
        player: Mapping[str, Any] | None = None,
    ) -> None:
        self._matches = tuple(matches)
        self._heroes = MappingProxyType(dict(heroes))
        self._player = player
        self._loading = False
        self._error = None
        logger.info("state loaded with %d matches", len(self._matches))
        self._notify()

    def fail(self, error: Exception) -> None:
        self._error = error
        self._loading = False
        self._notify()

    def set_filter_mode(self, mode: FilterMode | str) -> None:
        new_mode = FilterMode(mode)
        if new_mode is self._mode:
            return
        self._mode = new_mode
        self._notify()

    def toggle_filter_mode(self) -> None:
        self.set_filter_mode(
            FilterMode.ALL if self._mode is FilterMode.WORKDAY else FilterMode.WORKDAY
        )

    def update_policy(self, **changes: Any) -> None:
        """Replace individual policy fields; the new policy is validated on creation."""
        self._policy = replace(self._policy, **changes)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


__all__ = ["DashboardState", "StateListener"]

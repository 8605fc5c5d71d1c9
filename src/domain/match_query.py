"""Match list search used by the match history view."""

from __future__ import annotations

from collections.abc import Iterable

from domain.common import Match
from domain.protocol import MatchType

MATCH_LIST_PAGE_SIZE = 50


def search_matches(
    matches: Iterable[Match],
    *,
    match_type: MatchType | str | None = None,
    query: str = "",
    limit: int | None = None,
) -> list[Match]:
    """Filter by match type, then by hero name or match id substring."""
    results = list(matches)

    if match_type is not None:
        wanted = MatchType(match_type)
        results = [match for match in results if match.match_type is wanted]

    needle = query.strip().lower()
    if needle:
        results = [
            match
            for match in results
            if needle in match.hero_name.lower() or needle in str(match.match_id)
        ]

    if limit is not None:
        results = results[: max(limit, 0)]
    return results


__all__ = ["MATCH_LIST_PAGE_SIZE", "search_matches"]

"""Match analytics domain modules."""

from domain.common import Match, MatchValidationError, RawMatchRecord
from domain.protocol import FilterMode, InsightType, MatchResult, MatchType
from domain.time_window import FilterPolicy

__all__ = [
    "FilterMode",
    "FilterPolicy",
    "InsightType",
    "Match",
    "MatchResult",
    "MatchType",
    "MatchValidationError",
    "RawMatchRecord",
]

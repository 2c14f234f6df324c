from fixturescore.stats.primitives import (
    Corners,
    HistoricalMatch,
    Market,
    MatchResult,
    OpaqueValue,
    Outcome,
    ScoringSummary,
    TableRow,
    TeamHistory,
    TeamRef,
    VenueSplit,
    most_recent_first,
)
from fixturescore.stats.documents import DocumentError, EnrichedMatch

__all__ = [
    "Corners",
    "HistoricalMatch",
    "Market",
    "MatchResult",
    "OpaqueValue",
    "Outcome",
    "ScoringSummary",
    "TableRow",
    "TeamHistory",
    "TeamRef",
    "VenueSplit",
    "most_recent_first",
    "DocumentError",
    "EnrichedMatch",
]

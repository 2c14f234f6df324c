"""
Statistic primitives - immutable value objects for a fixture's raw data.

Everything the extractors consume is expressed with these types:
a single result, a team reference, a historical match, a league-table row,
a betting market and a team's season scoring/conceding summary. Upstream
sections that may be missing are typed Optional and handled explicitly by
each extractor.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple, Union

from fixturescore.utils.date_utils import parse_kickoff

logger = logging.getLogger(__name__)

# Upstream fields whose type varies between payloads (status codes, ground
# flags). The engine carries them through without inspecting them.
OpaqueValue = Union[str, int, float, None]

HOME = "home"
AWAY = "away"
DRAW = "draw"

WIN = "W"
LOSS = "L"
DRAW_CHAR = "D"


@dataclass(frozen=True)
class MatchResult:
    """Final score of a match; either goal count may be unknown."""
    home: Optional[int] = None
    away: Optional[int] = None
    winner: Optional[str] = None  # "home" | "away" | None (draw)

    @property
    def has_score(self) -> bool:
        return self.home is not None and self.away is not None

    @property
    def total_goals(self) -> Optional[int]:
        if not self.has_score:
            return None
        return self.home + self.away

    def outcome(self) -> str:
        """
        Winning side of the match: "home", "away" or "draw".

        Goals decide when both are known. Otherwise the winner tag is used,
        where a missing tag means a draw.
        """
        if self.has_score:
            if self.home > self.away:
                derived = HOME
            elif self.away > self.home:
                derived = AWAY
            else:
                derived = DRAW
            if self.winner and self.winner != derived:
                logger.debug("Winner tag %r contradicts score %s-%s; using score",
                             self.winner, self.home, self.away)
            return derived
        if self.winner in (HOME, AWAY):
            return self.winner
        return DRAW

    def outcome_for(self, side: str) -> str:
        """W/D/L from the point of view of the team that played on ``side``."""
        result = self.outcome()
        if result == DRAW:
            return DRAW_CHAR
        return WIN if result == side else LOSS

    def goals_for(self, side: str) -> Optional[int]:
        return self.home if side == HOME else self.away

    def goals_against(self, side: str) -> Optional[int]:
        return self.away if side == HOME else self.home


@dataclass(frozen=True)
class TeamRef:
    """A team as referenced inside a match or table row."""
    id: Optional[str] = None
    name: str = ""
    medium_name: Optional[str] = None
    abbr: Optional[str] = None

    def matches(self, other: Optional["TeamRef"]) -> bool:
        """Same team: identifiers when both carry one, otherwise names."""
        if other is None:
            return False
        if self.id and other.id:
            return self.id == other.id
        mine = {n.casefold() for n in (self.name, self.medium_name) if n}
        theirs = {n.casefold() for n in (other.name, other.medium_name) if n}
        return bool(mine & theirs)


@dataclass(frozen=True)
class Corners:
    home: int = 0
    away: int = 0

    def for_side(self, side: str) -> int:
        return self.home if side == HOME else self.away


@dataclass(frozen=True)
class HistoricalMatch:
    """One completed match as supplied by the data provider."""
    result: MatchResult
    home: TeamRef
    away: TeamRef
    corners: Optional[Corners] = None
    first_goal: Optional[str] = None  # "home" | "away"
    last_goal: Optional[str] = None   # "home" | "away"
    kickoff: Optional[datetime] = None
    match_id: Optional[str] = None
    status: OpaqueValue = None
    neutral_ground: OpaqueValue = None

    def side_of(self, team: TeamRef) -> Optional[str]:
        """Venue role of ``team`` in this match, or None if it did not play."""
        if team.matches(self.home):
            return HOME
        if team.matches(self.away):
            return AWAY
        return None


@dataclass(frozen=True)
class TeamHistory:
    """A team together with its recent matches."""
    team: TeamRef
    matches: Tuple[HistoricalMatch, ...] = ()

    def __post_init__(self):
        if not isinstance(self.matches, tuple):
            object.__setattr__(self, "matches", tuple(self.matches))

    def __bool__(self) -> bool:
        return bool(self.matches)

    def appearances(self) -> List[Tuple[HistoricalMatch, str]]:
        """(match, side) pairs for matches the team played, most recent first."""
        out = []
        for match in most_recent_first(self.matches):
            side = match.side_of(self.team)
            if side is not None:
                out.append((match, side))
        return out


@dataclass(frozen=True)
class TableRow:
    """One row of a league-table slice."""
    team: TeamRef
    position: int = 0
    goals_for: Optional[int] = None
    matches_played: Optional[int] = None


@dataclass(frozen=True)
class Outcome:
    description: str
    price: Optional[str] = None
    probability: Optional[str] = None


@dataclass(frozen=True)
class Market:
    """A betting market: name + specifier identify it, outcomes hold prices."""
    name: str
    specifier: str = ""
    outcomes: Tuple[Outcome, ...] = ()

    def __post_init__(self):
        if not isinstance(self.outcomes, tuple):
            object.__setattr__(self, "outcomes", tuple(self.outcomes))

    def outcome(self, description: str) -> Optional[Outcome]:
        for outcome in self.outcomes:
            if outcome.description == description:
                return outcome
        return None


@dataclass(frozen=True)
class VenueSplit:
    """A count or average split by venue."""
    total: float = 0
    home: float = 0
    away: float = 0

    def for_venue(self, venue: str) -> float:
        return getattr(self, venue)


@dataclass(frozen=True)
class ScoringSummary:
    """Season scoring/conceding statistics for one team."""
    matches: VenueSplit = field(default_factory=VenueSplit)
    wins: VenueSplit = field(default_factory=VenueSplit)
    goals_scored: VenueSplit = field(default_factory=VenueSplit)
    goals_conceded: VenueSplit = field(default_factory=VenueSplit)
    clean_sheets: VenueSplit = field(default_factory=VenueSplit)
    both_teams_scored: VenueSplit = field(default_factory=VenueSplit)
    scoring_at_halftime: Optional[VenueSplit] = None


def most_recent_first(matches: Sequence[HistoricalMatch]) -> List[HistoricalMatch]:
    """
    Order matches newest first by kickoff.

    Naive kickoffs are read as UTC. Matches without a kickoff keep their
    relative input order and sort after dated ones; an undated list is
    returned as supplied.
    """
    dated = [m for m in matches if m.kickoff is not None]
    undated = [m for m in matches if m.kickoff is None]
    dated.sort(key=lambda m: parse_kickoff(m.kickoff), reverse=True)
    return dated + undated

"""
Head-to-head analysis between the two teams of a fixture.

All tallies are from the point of view of the fixture's designated home
team, whichever side it played on in each prior meeting.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from fixturescore.stats.primitives import AWAY, HOME, LOSS, WIN, HistoricalMatch, TeamRef

logger = logging.getLogger(__name__)

RECENT_LIMIT = 3
UNKNOWN_ABBR = "UNK"

_WORD_SPLIT = re.compile(r"[\s\-]+")


@dataclass(frozen=True)
class HeadToHeadSummary:
    matches: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_scored: int = 0
    goals_conceded: int = 0
    recent_matches: List[str] = field(default_factory=list)

    @property
    def average_goals(self) -> Optional[float]:
        if not self.matches:
            return None
        return round((self.goals_scored + self.goals_conceded) / self.matches, 2)


def team_abbreviation(name: Optional[str]) -> str:
    """
    Short uppercase label for a team name.

    "Manchester United" -> "MU", "Paris Saint-Germain" -> "PSG",
    "Arsenal" -> "ARS".
    """
    words = [w for w in _WORD_SPLIT.split((name or "").strip()) if w]
    if not words:
        return UNKNOWN_ABBR
    if len(words) > 1:
        return "".join(w[0] for w in words[:3]).upper()
    return words[0][:3].upper()


def _goal_text(goals: Optional[int]) -> str:
    return "?" if goals is None else str(goals)


def format_meeting(match: HistoricalMatch) -> str:
    return "{} {}-{} {}".format(
        team_abbreviation(match.home.name),
        _goal_text(match.result.home),
        _goal_text(match.result.away),
        team_abbreviation(match.away.name),
    )


class HeadToHeadAnalyzer:
    def __init__(self, recent_limit: int = RECENT_LIMIT):
        self.recent_limit = recent_limit

    def _home_side(self, match: HistoricalMatch, home_team: TeamRef, away_team: TeamRef) -> str:
        """Side the designated home team played on in ``match``."""
        side = match.side_of(home_team)
        if side is not None:
            return side
        other = match.side_of(away_team)
        if other is not None:
            return AWAY if other == HOME else HOME
        logger.debug("Cannot place %r in meeting %s; assuming home slot", home_team.name, match.match_id)
        return HOME

    def analyze(
        self,
        pairwise_matches: Optional[Sequence[HistoricalMatch]],
        home_team: TeamRef,
        away_team: TeamRef,
    ) -> HeadToHeadSummary:
        matches = list(pairwise_matches or ())
        wins = draws = losses = 0
        scored = conceded = 0

        for match in matches:
            side = self._home_side(match, home_team, away_team)
            outcome = match.result.outcome_for(side)
            if outcome == WIN:
                wins += 1
            elif outcome == LOSS:
                losses += 1
            else:
                draws += 1
            scored += match.result.goals_for(side) or 0
            conceded += match.result.goals_against(side) or 0

        return HeadToHeadSummary(
            matches=len(matches),
            wins=wins,
            draws=draws,
            losses=losses,
            goals_scored=scored,
            goals_conceded=conceded,
            recent_matches=[format_meeting(m) for m in matches[:self.recent_limit]],
        )

"""
League aggregator - per-competition rollups over a cohort of fixtures.

Samples are the historical meetings found in each fixture's head-to-head
list, so a competition's denominator is the number of prior meetings
observed across its fixtures, not the number of fixtures. Rates here use
0 rather than None for an empty sample.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence

from fixturescore.stats.documents import EnrichedMatch
from fixturescore.stats.primitives import AWAY, DRAW, HOME
from fixturescore.utils.numbers import percentage_or_zero

logger = logging.getLogger(__name__)

UNKNOWN_LEAGUE = "Unknown League"


@dataclass(frozen=True)
class LeagueSummary:
    competition: str
    fixtures: int = 0
    matches: int = 0
    average_goals: float = 0.0
    home_win_rate: int = 0
    draw_rate: int = 0
    away_win_rate: int = 0
    btts_rate: int = 0


def competition_name(fixture: EnrichedMatch) -> str:
    name = (fixture.competition or "").strip()
    return name or UNKNOWN_LEAGUE


def group_by_competition(fixtures: Iterable[EnrichedMatch]) -> Dict[str, List[EnrichedMatch]]:
    """Fixtures keyed by competition display name, in first-seen order."""
    groups: Dict[str, List[EnrichedMatch]] = OrderedDict()
    for fixture in fixtures:
        groups.setdefault(competition_name(fixture), []).append(fixture)
    return groups


def summarize(competition: str, fixtures: Sequence[EnrichedMatch]) -> LeagueSummary:
    samples = [m for f in fixtures if f.head_to_head for m in f.head_to_head]
    n = len(samples)

    outcomes = {HOME: 0, DRAW: 0, AWAY: 0}
    goals = 0
    btts = 0
    for match in samples:
        outcomes[match.result.outcome()] += 1
        goals += match.result.total_goals or 0
        if (match.result.home or 0) > 0 and (match.result.away or 0) > 0:
            btts += 1

    return LeagueSummary(
        competition=competition,
        fixtures=len(fixtures),
        matches=n,
        average_goals=round(goals / n, 2) if n else 0.0,
        home_win_rate=percentage_or_zero(outcomes[HOME], n),
        draw_rate=percentage_or_zero(outcomes[DRAW], n),
        away_win_rate=percentage_or_zero(outcomes[AWAY], n),
        btts_rate=percentage_or_zero(btts, n),
    )


def aggregate(matches_grouped_by_competition: Mapping[str, Sequence[EnrichedMatch]]) -> Dict[str, LeagueSummary]:
    # Blank names collapse into the fallback group
    groups: Dict[str, List[EnrichedMatch]] = OrderedDict()
    for competition, fixtures in matches_grouped_by_competition.items():
        name = (competition or "").strip() or UNKNOWN_LEAGUE
        groups.setdefault(name, []).extend(fixtures)

    summaries = OrderedDict((name, summarize(name, fixtures)) for name, fixtures in groups.items())
    logger.debug("Aggregated %d competitions", len(summaries))
    return summaries

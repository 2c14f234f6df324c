"""
Team Feature Extractor - flat per-team features for one fixture.

Combines three sources for a single team:
  - league-table slice    -> table position
  - scoring summary       -> goal averages, BTTS / win / clean-sheet rates
  - recent match list     -> forms, over-1.5 counts, first/late goal rates, corners

Rates are integer percentages, ``None`` when their denominator is zero.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fixturescore.scoring_config import ScoringConfig, Windows, get_default_scoring_config
from fixturescore.stats.primitives import (
    DRAW_CHAR,
    HOME,
    AWAY,
    LOSS,
    WIN,
    HistoricalMatch,
    ScoringSummary,
    TableRow,
    TeamHistory,
    TeamRef,
)
from fixturescore.utils.numbers import average, percentage

logger = logging.getLogger(__name__)

NEUTRAL_FORM_STRENGTH = 50.0
_FORM_POINTS = {WIN: 10.0, DRAW_CHAR: 0.0, LOSS: -10.0}
_FORM_DECAY = 0.8


@dataclass(frozen=True)
class TeamFeatures:
    position: int = 0

    avg_goals_scored_total: Optional[float] = None
    avg_goals_scored_home: Optional[float] = None
    avg_goals_scored_away: Optional[float] = None
    avg_goals_conceded_total: Optional[float] = None
    avg_goals_conceded_home: Optional[float] = None
    avg_goals_conceded_away: Optional[float] = None

    over_15_home: int = 0
    over_15_away: int = 0
    total_home_matches: int = 0
    total_away_matches: int = 0
    clean_sheets_home: int = 0
    clean_sheets_away: int = 0

    form: str = ""
    home_form: str = ""
    away_form: str = ""
    form_strength: float = NEUTRAL_FORM_STRENGTH

    scoring_first_win_rate: Optional[int] = None
    conceding_first_win_rate: Optional[int] = None
    first_goal_rate: Optional[int] = None
    late_goal_rate: Optional[int] = None
    avg_corners: Optional[float] = None

    btts_rate_total: Optional[int] = None
    btts_rate_home: Optional[int] = None
    btts_rate_away: Optional[int] = None
    win_percentage_total: Optional[int] = None
    win_percentage_home: Optional[int] = None
    win_percentage_away: Optional[int] = None
    clean_sheet_percentage: Optional[int] = None
    first_half_goals_rate: Optional[int] = None
    second_half_goals_rate: Optional[int] = None

    matches_analyzed: int = 0


def form_strength(form: str) -> float:
    """
    0-100 rating of a W/D/L form string, 50 being neutral.

    Newer results weigh more: each step back multiplies the weight by 0.8,
    and the weighted sum is normalised by the total weight.
    """
    strength = NEUTRAL_FORM_STRENGTH
    weight = 1.0
    total_weight = 0.0
    for char in form or "":
        if char not in _FORM_POINTS:
            continue
        strength += _FORM_POINTS[char] * weight
        total_weight += weight
        weight *= _FORM_DECAY
    if total_weight > 0:
        strength = NEUTRAL_FORM_STRENGTH + (strength - NEUTRAL_FORM_STRENGTH) / total_weight
    return round(strength, 4)


def table_position(team: TeamRef, table_slice: Optional[Sequence[TableRow]]) -> int:
    for row in table_slice or ():
        if team.matches(row.team):
            return row.position
    return 0


def build_form(appearances: Sequence[Tuple[HistoricalMatch, str]], length: int = 5,
               venue: Optional[str] = None) -> str:
    """W/D/L string over the most recent ``length`` appearances, optionally at one venue only."""
    chars = []
    for match, side in appearances:
        if venue is not None and side != venue:
            continue
        if len(chars) >= length:
            break
        chars.append(match.result.outcome_for(side))
    return "".join(chars)


class TeamFeatureExtractor:
    """Builds ``TeamFeatures`` for a team from its table row, summary and recent matches."""

    def __init__(self, profile: Optional[ScoringConfig] = None):
        self.profile = profile or get_default_scoring_config()
        self.windows: Windows = self.profile.windows

    def extract(
        self,
        team: TeamRef,
        table_slice: Optional[Sequence[TableRow]] = None,
        scoring_summary: Optional[ScoringSummary] = None,
        historical_matches: Optional[Sequence[HistoricalMatch]] = None,
    ) -> TeamFeatures:
        history = TeamHistory(team, tuple(historical_matches or ()))
        appearances = history.appearances()
        if len(appearances) < len(history.matches):
            logger.debug("%d of %d matches do not involve %r; ignored",
                         len(history.matches) - len(appearances), len(history.matches), team.name)

        form = build_form(appearances, self.windows.form_length)
        fields: Dict[str, Any] = {
            "position": table_position(team, table_slice),
            "form": form,
            "home_form": build_form(appearances, self.windows.form_length, HOME),
            "away_form": build_form(appearances, self.windows.form_length, AWAY),
            "form_strength": form_strength(form),
            "matches_analyzed": len(appearances),
        }
        fields.update(self._match_list_features(appearances))
        fields.update(self._summary_features(scoring_summary, appearances))
        return TeamFeatures(**fields)

    # =========================================================================
    # Match-list features
    # =========================================================================

    def _match_list_features(self, appearances: List[Tuple[HistoricalMatch, str]]) -> Dict[str, Any]:
        over_15 = {HOME: 0, AWAY: 0}
        corners = 0
        tagged_first = scored_first = scored_first_won = 0
        conceded_first = conceded_first_won = 0
        late = 0

        for match, side in appearances:
            total = match.result.total_goals
            if total is not None and total > 1.5:
                over_15[side] += 1

            if match.corners is not None:
                corners += match.corners.for_side(side)

            if match.first_goal is not None:
                tagged_first += 1
                won = match.result.outcome_for(side) == WIN
                if match.first_goal == side:
                    scored_first += 1
                    scored_first_won += won
                else:
                    conceded_first += 1
                    conceded_first_won += won

            if match.last_goal == side:
                late += 1

        count = len(appearances)
        return {
            "over_15_home": over_15[HOME],
            "over_15_away": over_15[AWAY],
            "first_goal_rate": percentage(scored_first, tagged_first),
            "scoring_first_win_rate": percentage(scored_first_won, scored_first),
            "conceding_first_win_rate": percentage(conceded_first_won, conceded_first),
            "late_goal_rate": percentage(late, count),
            "avg_corners": average(corners, count),
        }

    # =========================================================================
    # Summary features
    # =========================================================================

    def _summary_features(self, summary: Optional[ScoringSummary],
                          appearances: List[Tuple[HistoricalMatch, str]]) -> Dict[str, Any]:
        if summary is None:
            # Venue counts still come from the match list
            return {
                "total_home_matches": sum(1 for _, side in appearances if side == HOME),
                "total_away_matches": sum(1 for _, side in appearances if side == AWAY),
                "clean_sheets_home": _count_clean_sheets(appearances, HOME),
                "clean_sheets_away": _count_clean_sheets(appearances, AWAY),
            }

        out: Dict[str, Any] = {
            "total_home_matches": int(summary.matches.home),
            "total_away_matches": int(summary.matches.away),
            "clean_sheets_home": int(summary.clean_sheets.home),
            "clean_sheets_away": int(summary.clean_sheets.away),
            "clean_sheet_percentage": percentage(summary.clean_sheets.total, summary.matches.total),
        }
        out.update(_half_goal_rates(summary))
        for venue in ("total", "home", "away"):
            played = summary.matches.for_venue(venue)
            out[f"avg_goals_scored_{venue}"] = average(summary.goals_scored.for_venue(venue), played)
            out[f"avg_goals_conceded_{venue}"] = average(summary.goals_conceded.for_venue(venue), played)
            out[f"btts_rate_{venue}"] = percentage(summary.both_teams_scored.for_venue(venue), played)
            out[f"win_percentage_{venue}"] = percentage(summary.wins.for_venue(venue), played)
        return out


def _half_goal_rates(summary: ScoringSummary) -> Dict[str, Optional[int]]:
    """Share of season goals scored before and after half-time."""
    halftime = summary.scoring_at_halftime
    scored = summary.goals_scored.total
    if halftime is None or not scored:
        return {"first_half_goals_rate": None, "second_half_goals_rate": None}
    first_half = min(halftime.total, scored)
    return {
        "first_half_goals_rate": percentage(first_half, scored),
        "second_half_goals_rate": percentage(scored - first_half, scored),
    }


def _count_clean_sheets(appearances: Sequence[Tuple[HistoricalMatch, str]], venue: str) -> int:
    return sum(
        1 for match, side in appearances
        if side == venue and match.result.goals_against(side) == 0
    )

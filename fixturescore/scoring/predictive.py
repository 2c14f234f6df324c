"""
Composite predictive scorer.

Combines odds, head-to-head, recent form and table-position gap into:
  - favorite           "home" | "away" | "draw"
  - confidence         0-100 int, None without markets / h2h / recent matches
  - expected goals     odds-implied, falling back to historical averages
  - defensive strength lower is stronger, 1.0 ~ one goal conceded per match

All weights and caps come from the scoring profile.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from fixturescore.features.head_to_head import HeadToHeadSummary
from fixturescore.market.odds import OddsSnapshot
from fixturescore.scoring_config import ScoringConfig, get_default_scoring_config
from fixturescore.stats.primitives import AWAY, DRAW, HOME, WIN, HistoricalMatch, TeamHistory
from fixturescore.utils.numbers import clamp, mean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictiveScore:
    favorite: str = DRAW
    confidence: Optional[int] = None
    expected_goals: Optional[float] = None
    defensive_strength: Optional[float] = None


def determine_favorite(odds: OddsSnapshot) -> str:
    """Side with the lower 1X2 price; a missing or equal price means "draw"."""
    home, away = odds.home_win, odds.away_win
    if home <= 0 or away <= 0 or home == away:
        return DRAW
    return HOME if home < away else AWAY


def recent_wins(history: TeamHistory, window: int) -> int:
    """Wins in the team's ``window`` most recent matches, whatever its venue."""
    return sum(
        1 for match, side in history.appearances()[:window]
        if match.result.outcome_for(side) == WIN
    )


def _scored_appearances(history: TeamHistory, venue: Optional[str] = None) -> List[Tuple[HistoricalMatch, str]]:
    return [
        (match, side) for match, side in history.appearances()
        if match.result.has_score and (venue is None or side == venue)
    ]


def average_total_goals(history: TeamHistory, venue: str, window: int) -> Optional[float]:
    """Mean total goals over the team's last ``window`` scored matches at ``venue``."""
    sample = _scored_appearances(history, venue)[:window]
    if not sample:
        return None
    return sum(m.result.total_goals for m, _ in sample) / len(sample)


def defensive_index(history: TeamHistory, window: int, clean_sheet_factor: float) -> Optional[float]:
    """avgConceded / (1 + factor * cleanSheets) over the last ``window`` scored matches."""
    sample = _scored_appearances(history)[:window]
    if not sample:
        return None
    conceded = [m.result.goals_against(side) for m, side in sample]
    clean_sheets = sum(1 for g in conceded if g == 0)
    return (sum(conceded) / len(sample)) / (1 + clean_sheet_factor * clean_sheets)


class PredictiveScorer:
    def __init__(self, profile: Optional[ScoringConfig] = None):
        self.profile = profile or get_default_scoring_config()
        self.weights = self.profile.confidence_weights
        self.goal_weights = self.profile.expected_goals
        self.windows = self.profile.windows
        self.clean_sheet_factor = self.profile.clean_sheet_factor

    def score(
        self,
        odds: OddsSnapshot,
        head_to_head: HeadToHeadSummary,
        home_history: TeamHistory,
        away_history: TeamHistory,
        position_gap: int = 0,
    ) -> PredictiveScore:
        return PredictiveScore(
            favorite=determine_favorite(odds),
            confidence=self.confidence(odds, head_to_head, home_history, away_history, position_gap),
            expected_goals=self.expected_goals(odds, home_history, away_history),
            defensive_strength=self.defensive_strength(home_history, away_history),
        )

    # =========================================================================
    # Confidence
    # =========================================================================

    def odds_confidence(self, odds: OddsSnapshot) -> float:
        home, away = odds.home_win, odds.away_win
        if home > 0 and away > 0:
            ratio = min(home, away) / max(home, away)
        else:
            ratio = self.weights.neutral_odds_ratio
        return 100 * (1 - ratio)

    def confidence(
        self,
        odds: OddsSnapshot,
        head_to_head: HeadToHeadSummary,
        home_history: TeamHistory,
        away_history: TeamHistory,
        position_gap: int = 0,
    ) -> Optional[int]:
        if not (odds.has_markets and head_to_head.matches and home_history and away_history):
            return None

        w = self.weights
        h2h_weight = w.head_to_head_scale * max(head_to_head.wins, head_to_head.losses) / head_to_head.matches
        form = w.form_scale * abs(
            recent_wins(home_history, self.windows.form_wins) - recent_wins(away_history, self.windows.form_wins)
        )
        position = min(w.position_scale * abs(position_gap), w.position_cap)

        raw = (
            w.odds * self.odds_confidence(odds)
            + w.head_to_head * h2h_weight
            + w.form * form
            + w.position * position
        )
        return int(clamp(round(raw), 0, 100))

    # =========================================================================
    # Expected goals
    # =========================================================================

    def expected_goals(self, odds: OddsSnapshot, home_history: TeamHistory,
                       away_history: TeamHistory) -> Optional[float]:
        g = self.goal_weights
        total = 0.0
        weight = 0.0

        if odds.over_25_probability is not None:
            total += (g.over_25_base + g.over_25_slope * odds.over_25_probability) * g.over_25_weight
            weight += g.over_25_weight
        if odds.over_15_probability is not None:
            total += (g.over_15_base + g.over_15_slope * odds.over_15_probability) * g.over_15_weight
            weight += g.over_15_weight

        if weight < g.min_odds_weight:
            historical = mean([
                average_total_goals(home_history, HOME, self.windows.goals_window),
                average_total_goals(away_history, AWAY, self.windows.goals_window),
            ], ndigits=6)
            if historical is not None:
                return round(historical, 2)
            if weight > 0:
                logger.debug("No historical goal averages; keeping odds-only estimate")

        if weight <= 0:
            return None
        return round(total / weight, 2)

    # =========================================================================
    # Defensive strength
    # =========================================================================

    def defensive_strength(self, home_history: TeamHistory, away_history: TeamHistory) -> Optional[float]:
        window = self.windows.defense_window
        home = defensive_index(home_history, window, self.clean_sheet_factor)
        away = defensive_index(away_history, window, self.clean_sheet_factor)
        if home is None or away is None:
            return None
        return round((home + away) / 2, 2)

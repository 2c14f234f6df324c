"""
Human-readable prediction reasons built from the non-null feature highlights.
"""

from typing import List, Optional

from fixturescore.features.head_to_head import HeadToHeadSummary
from fixturescore.features.team_features import TeamFeatures
from fixturescore.market.odds import OddsSnapshot
from fixturescore.scoring.predictive import determine_favorite
from fixturescore.scoring_config import ReasonThresholds
from fixturescore.stats.primitives import DRAW, HOME


def _scoring_level(goals: float, t: ReasonThresholds) -> str:
    if goals > t.high_scoring:
        return "High"
    if goals > t.moderate_scoring:
        return "Moderate"
    return "Low"


def _with_average(name: str, value: Optional[float], venue: str) -> str:
    if value is None:
        return name
    return f"{name} ({value:.2f} {venue})"


def build_reasons(
    home_name: str,
    away_name: str,
    home: TeamFeatures,
    away: TeamFeatures,
    odds: OddsSnapshot,
    head_to_head: HeadToHeadSummary,
    expected_goals: Optional[float],
    thresholds: ReasonThresholds,
    max_reasons: Optional[int] = None,
) -> List[str]:
    """
    Reasons in a fixed order: forms, scoring potential, head-to-head scoring,
    odds favorite, clean sheets, table gap. Truncated to ``max_reasons``.
    """
    t = thresholds
    reasons = []

    if home.form:
        reasons.append(f"{home_name} form: {home.form}")
    if away.form:
        reasons.append(f"{away_name} form: {away.form}")

    if expected_goals is not None:
        reasons.append(
            f"{_scoring_level(expected_goals, t)}-scoring potential: "
            f"{_with_average(home_name, home.avg_goals_scored_home, 'home')} vs "
            f"{_with_average(away_name, away.avg_goals_scored_away, 'away')}"
        )

    h2h_goals = head_to_head.average_goals
    if h2h_goals is not None:
        reasons.append(
            f"H2H: {_scoring_level(h2h_goals, t)}-scoring fixtures averaging {h2h_goals:.1f} goals per game"
        )

    if odds.home_win > 0 and odds.away_win > 0:
        prices = f"(H: {odds.home_win:.2f}, A: {odds.away_win:.2f})"
        favorite = determine_favorite(odds)
        if favorite == DRAW:
            reasons.append(f"Draw likely: Tight odds {prices}")
        else:
            ratio = min(odds.home_win, odds.away_win) / max(odds.home_win, odds.away_win)
            if ratio < t.strong_favorite_ratio:
                strength = "Strong"
            elif ratio < t.moderate_favorite_ratio:
                strength = "Moderate"
            else:
                strength = "Slight"
            team = home_name if favorite == HOME else away_name
            reasons.append(f"{strength} favorite: {team} {prices}")

    if home.clean_sheets_home > t.home_clean_sheets:
        reasons.append(
            f"Strong home defense: {home_name} kept {home.clean_sheets_home} clean sheets at home"
        )
    if away.clean_sheets_away > t.away_clean_sheets:
        reasons.append(
            f"Good away defense: {away_name} kept {away.clean_sheets_away} clean sheets away"
        )

    if home.position > 0 and away.position > 0:
        gap = abs(home.position - away.position)
        if gap > t.position_gap:
            better = home_name if home.position < away.position else away_name
            reasons.append(f"Table position gap: {gap} places separating teams, favoring {better}")

    limit = t.max_reasons if max_reasons is None else max_reasons
    return reasons[:limit]

"""Flat tabular export of predictions for analysts.

Usage:
    from fixturescore.pipeline.dataset import predictions_to_frame

    result = score_fixtures(docs)
    df = predictions_to_frame(result.predictions)
    df.sort_values('confidence_score', ascending=False)

Writing the frame to disk is left to the caller.
"""

from dataclasses import fields
from typing import Any, Dict, Iterable, List

import pandas as pd

from fixturescore.features.team_features import TeamFeatures
from fixturescore.services.prediction import PredictiveMatchData

META_COLUMNS = [
    'match_id', 'competition', 'kickoff', 'home_team', 'away_team',
    'position_gap', 'favorite', 'confidence_score', 'average_goals',
    'expected_goals', 'defensive_strength',
]
ODDS_COLUMNS = [
    'home_win', 'draw', 'away_win', 'over_15', 'under_15',
    'over_25', 'under_25', 'btts_yes', 'btts_no',
]
H2H_COLUMNS = ['matches', 'wins', 'draws', 'losses', 'goals_scored', 'goals_conceded']
TEAM_COLUMNS = [f.name for f in fields(TeamFeatures)]


def prediction_row(prediction: PredictiveMatchData) -> Dict[str, Any]:
    """One flat dict per prediction; nested records become prefixed columns."""
    row = {col: getattr(prediction, col) for col in META_COLUMNS}
    for prefix, team in (('home', prediction.home), ('away', prediction.away)):
        for col in TEAM_COLUMNS:
            row[f'{prefix}_{col}'] = getattr(team, col)
    for col in ODDS_COLUMNS:
        row[f'odds_{col}'] = getattr(prediction.odds, col)
    for col in H2H_COLUMNS:
        row[f'h2h_{col}'] = getattr(prediction.head_to_head, col)
    row['h2h_recent'] = ' | '.join(prediction.head_to_head.recent_matches)
    row['corners_home_avg'] = prediction.corner_stats.home_avg
    row['corners_away_avg'] = prediction.corner_stats.away_avg
    row['corners_total_avg'] = prediction.corner_stats.total_avg
    row['reasons'] = ' | '.join(prediction.reasons)
    return row


def frame_columns() -> List[str]:
    cols = list(META_COLUMNS)
    for prefix in ('home', 'away'):
        cols.extend(f'{prefix}_{c}' for c in TEAM_COLUMNS)
    cols.extend(f'odds_{c}' for c in ODDS_COLUMNS)
    cols.extend(f'h2h_{c}' for c in H2H_COLUMNS)
    cols.extend(['h2h_recent', 'corners_home_avg', 'corners_away_avg', 'corners_total_avg', 'reasons'])
    return cols


def predictions_to_frame(predictions: Iterable[PredictiveMatchData]) -> pd.DataFrame:
    """DataFrame with one row per prediction, in input order."""
    rows = [prediction_row(p) for p in predictions]
    return pd.DataFrame(rows, columns=frame_columns())

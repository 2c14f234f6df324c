from fixturescore.services.prediction import (
    CornerStats,
    PredictionService,
    PredictiveMatchData,
    ScoringPatterns,
    is_valid_fixture,
)
from fixturescore.services.league_summary import LeagueSummary, aggregate, group_by_competition
from fixturescore.services.batch import BatchResult, TaskResult, score_fixtures

__all__ = [
    'CornerStats', 'PredictionService', 'PredictiveMatchData', 'ScoringPatterns', 'is_valid_fixture',
    'LeagueSummary', 'aggregate', 'group_by_competition',
    'BatchResult', 'TaskResult', 'score_fixtures',
]

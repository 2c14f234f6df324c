from fixturescore.scoring.predictive import PredictiveScore, PredictiveScorer, determine_favorite
from fixturescore.scoring.reasons import build_reasons

__all__ = [
    "PredictiveScore",
    "PredictiveScorer",
    "determine_favorite",
    "build_reasons",
]

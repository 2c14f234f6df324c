from fixturescore.features.team_features import TeamFeatureExtractor, TeamFeatures, form_strength
from fixturescore.features.head_to_head import HeadToHeadAnalyzer, HeadToHeadSummary, team_abbreviation

__all__ = [
    "TeamFeatureExtractor",
    "TeamFeatures",
    "form_strength",
    "HeadToHeadAnalyzer",
    "HeadToHeadSummary",
    "team_abbreviation",
]

"""
Prediction Service - one predictive record per fixture.

Orchestrates the extractors for a single enriched match:
1. team features for both sides
2. odds snapshot and head-to-head summary
3. position gap and composite score
4. corner stats, scoring patterns, average goals and reasons
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from fixturescore.config import config
from fixturescore.features.head_to_head import HeadToHeadAnalyzer, HeadToHeadSummary
from fixturescore.features.team_features import TeamFeatureExtractor, TeamFeatures
from fixturescore.market.odds import OddsInterpreter, OddsSnapshot
from fixturescore.scoring.predictive import PredictiveScorer, average_total_goals
from fixturescore.scoring.reasons import build_reasons
from fixturescore.scoring_config import ScoringConfig, load_scoring_config
from fixturescore.stats.documents import EnrichedMatch
from fixturescore.stats.primitives import AWAY, HOME, ScoringSummary
from fixturescore.utils.numbers import mean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CornerStats:
    home_avg: Optional[float] = None
    away_avg: Optional[float] = None
    total_avg: Optional[float] = None


@dataclass(frozen=True)
class ScoringPatterns:
    home_first_goal_rate: Optional[int] = None
    away_first_goal_rate: Optional[int] = None
    home_late_goal_rate: Optional[int] = None
    away_late_goal_rate: Optional[int] = None


@dataclass(frozen=True)
class PredictiveMatchData:
    match_id: Optional[str]
    home_team: str
    away_team: str
    home: TeamFeatures
    away: TeamFeatures
    odds: OddsSnapshot
    head_to_head: HeadToHeadSummary
    competition: Optional[str] = None
    kickoff: Optional[datetime] = None
    position_gap: int = 0
    favorite: str = "draw"
    confidence_score: Optional[int] = None
    average_goals: Optional[float] = None
    expected_goals: Optional[float] = None
    defensive_strength: Optional[float] = None
    corner_stats: CornerStats = field(default_factory=CornerStats)
    scoring_patterns: ScoringPatterns = field(default_factory=ScoringPatterns)
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def is_valid_fixture(match: EnrichedMatch) -> bool:
    """A fixture is scorable when it has an id and both team names."""
    return bool(match.match_id and match.home_team.name and match.away_team.name)


def position_gap(home: TeamFeatures, away: TeamFeatures) -> int:
    if home.position <= 0 or away.position <= 0:
        return 0
    return abs(home.position - away.position)


def corner_stats(home: TeamFeatures, away: TeamFeatures) -> CornerStats:
    return CornerStats(
        home_avg=home.avg_corners,
        away_avg=away.avg_corners,
        total_avg=mean([home.avg_corners, away.avg_corners]),
    )


def scoring_patterns(home: TeamFeatures, away: TeamFeatures) -> ScoringPatterns:
    return ScoringPatterns(
        home_first_goal_rate=home.first_goal_rate,
        away_first_goal_rate=away.first_goal_rate,
        home_late_goal_rate=home.late_goal_rate,
        away_late_goal_rate=away.late_goal_rate,
    )


def _venue_goals(features: TeamFeatures, venue: str) -> Optional[float]:
    scored = getattr(features, f"avg_goals_scored_{venue}")
    conceded = getattr(features, f"avg_goals_conceded_{venue}")
    if scored is None or conceded is None:
        return None
    return scored + conceded


def average_goals(
    home_summary: Optional[ScoringSummary],
    away_summary: Optional[ScoringSummary],
    home: TeamFeatures,
    away: TeamFeatures,
    match: Optional[EnrichedMatch] = None,
    window: int = 5,
) -> Optional[float]:
    """
    Expected total goals from both season summaries.

    With both summaries: (homeScored/homeMatches + awayConceded/awayMatches +
    awayScored/awayMatches + homeConceded/homeMatches) / 2. Otherwise the mean
    of the home side's goals-per-home-match and the away side's
    goals-per-away-match, from the summaries or else the recent matches.
    """
    if home_summary is not None and away_summary is not None:
        hm, am = home_summary.matches.total, away_summary.matches.total
        if hm > 0 and am > 0:
            home_avg = home_summary.goals_scored.total / hm + away_summary.goals_conceded.total / am
            away_avg = away_summary.goals_scored.total / am + home_summary.goals_conceded.total / hm
            return round((home_avg + away_avg) / 2, 2)

    home_goals = _venue_goals(home, HOME)
    away_goals = _venue_goals(away, AWAY)
    if match is not None:
        if home_goals is None:
            home_goals = average_total_goals(match.home_history, HOME, window)
        if away_goals is None:
            away_goals = average_total_goals(match.away_history, AWAY, window)
    return mean([home_goals, away_goals])


class PredictionService:
    """
    Builds ``PredictiveMatchData`` records from enriched matches.

    All extractors share one scoring profile; the service holds no per-fixture
    state, so one instance can score fixtures from several threads.
    """

    def __init__(self, profile: Optional[ScoringConfig] = None, max_reasons: Optional[int] = None):
        if profile is None:
            profile = load_scoring_config()
        self.profile = profile
        self.team_extractor = TeamFeatureExtractor(profile)
        self.odds_interpreter = OddsInterpreter(profile)
        self.h2h_analyzer = HeadToHeadAnalyzer(profile.windows.recent_h2h)
        self.scorer = PredictiveScorer(profile)
        if max_reasons is None:
            # 0 in the environment means "use the profile limit"
            max_reasons = config.get("FIXTURESCORE_MAX_REASONS") or None
        self.max_reasons = max_reasons

    def predict(self, match: EnrichedMatch) -> PredictiveMatchData:
        home = self.team_extractor.extract(match.home_team, match.table, match.home_summary, match.home_recent)
        away = self.team_extractor.extract(match.away_team, match.table, match.away_summary, match.away_recent)
        odds = self.odds_interpreter.extract(match.markets)
        h2h = self.h2h_analyzer.analyze(match.head_to_head, match.home_team, match.away_team)
        gap = position_gap(home, away)

        score = self.scorer.score(odds, h2h, match.home_history, match.away_history, gap)
        logger.debug("Fixture %s: favorite=%s confidence=%s xg=%s",
                     match.match_id, score.favorite, score.confidence, score.expected_goals)

        reasons = build_reasons(
            match.home_team.name, match.away_team.name, home, away, odds, h2h,
            score.expected_goals, self.profile.reasons, self.max_reasons,
        )

        return PredictiveMatchData(
            match_id=match.match_id,
            home_team=match.home_team.name,
            away_team=match.away_team.name,
            competition=match.competition,
            kickoff=match.kickoff,
            home=home,
            away=away,
            odds=odds,
            head_to_head=h2h,
            position_gap=gap,
            favorite=score.favorite,
            confidence_score=score.confidence,
            average_goals=average_goals(match.home_summary, match.away_summary, home, away,
                                        match, self.profile.windows.goals_window),
            expected_goals=score.expected_goals,
            defensive_strength=score.defensive_strength,
            corner_stats=corner_stats(home, away),
            scoring_patterns=scoring_patterns(home, away),
            reasons=reasons,
        )

    def predict_document(self, doc: Mapping[str, Any]) -> PredictiveMatchData:
        return self.predict(EnrichedMatch.from_document(doc))

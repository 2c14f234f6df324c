"""
Batch scoring of a cohort of fixtures.

Each fixture is scored independently; invalid fixtures are skipped and a
failing fixture is logged and counted without stopping the batch. With
``max_workers > 1`` fixtures are fanned out over a thread pool, and
results are always reported in input order.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from fixturescore.config import config
from fixturescore.services.league_summary import LeagueSummary, aggregate, group_by_competition
from fixturescore.services.prediction import PredictionService, PredictiveMatchData, is_valid_fixture
from fixturescore.stats.documents import EnrichedMatch

logger = logging.getLogger(__name__)

FixtureInput = Union[EnrichedMatch, Mapping[str, Any]]


@dataclass
class TaskResult:
    """Result of scoring a single fixture."""
    name: str
    success: bool
    result: Any = None
    error: Optional[str] = None
    skipped: bool = False
    started_at: Optional[float] = None
    completed_at: Optional[float] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at is not None and self.completed_at is not None:
            return self.completed_at - self.started_at
        return None


@dataclass
class BatchResult:
    predictions: List[PredictiveMatchData] = field(default_factory=list)
    skipped: int = 0
    errors: int = 0
    tasks: List[TaskResult] = field(default_factory=list)
    leagues: Dict[str, LeagueSummary] = field(default_factory=dict)

    @property
    def processed(self) -> int:
        return len(self.predictions)

    @property
    def total(self) -> int:
        return len(self.tasks)


def _label(index: int, fixture: FixtureInput) -> str:
    if isinstance(fixture, EnrichedMatch):
        return fixture.match_id or f"fixture[{index}]"
    if isinstance(fixture, Mapping):
        match_id = fixture.get("matchId") or fixture.get("MatchId")
        if match_id:
            return str(match_id)
    return f"fixture[{index}]"


def _to_match(fixture: FixtureInput) -> EnrichedMatch:
    if isinstance(fixture, EnrichedMatch):
        return fixture
    return EnrichedMatch.from_document(fixture)


def _score_one(index: int, fixture: FixtureInput, service: PredictionService) -> TaskResult:
    name = _label(index, fixture)
    task = TaskResult(name=name, success=False, started_at=time.time())
    try:
        match = _to_match(fixture)
        if not is_valid_fixture(match):
            logger.warning("Skipping fixture %s: missing match id or team names", name)
            task.skipped = True
            task.result = match
        else:
            task.result = (match, service.predict(match))
            task.success = True
    except Exception as e:
        logger.exception("Failed scoring fixture %s", name)
        task.error = str(e)
    task.completed_at = time.time()
    return task


def score_fixtures(
    fixtures: Sequence[FixtureInput],
    service: Optional[PredictionService] = None,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
) -> BatchResult:
    """
    Score a cohort of fixtures.

    Args:
        fixtures: Enriched matches or raw enriched-match documents
        service: Prediction service to use (default: one built from config)
        max_workers: Thread count (default: ``FIXTURESCORE_MAX_WORKERS``)
        progress_callback: Called as ``(completed, total, name)`` after each fixture

    Returns:
        BatchResult with predictions in input order and per-competition summaries
    """
    fixtures = list(fixtures)
    service = service or PredictionService()
    if max_workers is None:
        max_workers = config.get("FIXTURESCORE_MAX_WORKERS") or 1
    max_workers = max(1, int(max_workers))

    total = len(fixtures)
    tasks: List[Optional[TaskResult]] = [None] * total

    if max_workers == 1 or total <= 1:
        for i, fixture in enumerate(fixtures):
            tasks[i] = _score_one(i, fixture, service)
            if progress_callback:
                progress_callback(i + 1, total, tasks[i].name)
    else:
        completed = 0
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(_score_one, i, fixture, service): i
                for i, fixture in enumerate(fixtures)
            }
            for future in as_completed(futures):
                idx = futures[future]
                tasks[idx] = future.result()
                completed += 1
                if progress_callback:
                    progress_callback(completed, total, tasks[idx].name)

    result = BatchResult(tasks=tasks)
    scored: List[EnrichedMatch] = []
    for task in tasks:
        if task.success:
            match, prediction = task.result
            scored.append(match)
            result.predictions.append(prediction)
            task.result = prediction
        elif task.skipped:
            result.skipped += 1
        else:
            result.errors += 1

    result.leagues = aggregate(group_by_competition(scored))
    logger.info("Scored %d/%d fixtures (%d skipped, %d errors)",
                result.processed, total, result.skipped, result.errors)
    return result

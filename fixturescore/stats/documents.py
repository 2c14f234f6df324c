"""
Enriched match documents - parse stored aggregates into primitives.

The persistence layer stores one "enriched match" document per fixture with
nested sections copied from the data provider. Any section may be missing
or partially populated. This module turns such a document (a plain dict,
camelCase or PascalCase keys) into an ``EnrichedMatch`` whose missing
sections are ``None`` or empty, so the extractors never dig through raw
dicts themselves.

Document shape::

    matchId, matchTime
    originalMatch: {teams: {home, away}, tournamentName, markets: [...]}
    teamTableSlice: {tableRows: [{team, pos, goalsForTotal, total}]}
    team1LastX / team2LastX: {matches: [match stat, ...]}
    teamVersusRecent: {matches: [match stat, ...]}
    team1ScoringConceding / team2ScoringConceding: {stats: {...}}
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from fixturescore.stats.primitives import (
    Corners,
    HistoricalMatch,
    Market,
    MatchResult,
    Outcome,
    ScoringSummary,
    TableRow,
    TeamHistory,
    TeamRef,
    VenueSplit,
)
from fixturescore.utils.date_utils import parse_kickoff

logger = logging.getLogger(__name__)


class DocumentError(ValueError):
    pass


def _pick(doc: Any, *keys: str, default: Any = None) -> Any:
    """First present key, trying each name as given and with a capitalised first letter."""
    if not isinstance(doc, Mapping):
        return default
    for key in keys:
        for candidate in (key, key[:1].upper() + key[1:]):
            if candidate in doc and doc[candidate] is not None:
                return doc[candidate]
    return default


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _as_text(value: Any, default: Optional[str] = None) -> Optional[str]:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _side_tag(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.lower() in ("home", "away"):
        return value.lower()
    return None


def _kickoff(value: Any):
    if isinstance(value, Mapping):
        value = {str(k).lower(): v for k, v in value.items()}
    return parse_kickoff(value)


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------

def parse_team(doc: Any) -> TeamRef:
    if not isinstance(doc, Mapping):
        return TeamRef()
    return TeamRef(
        id=_as_id(_pick(doc, "id", "_id", "uid")),
        name=_as_text(_pick(doc, "name"), default=""),
        medium_name=_as_text(_pick(doc, "mediumName", "mediumname")),
        abbr=_as_text(_pick(doc, "abbr")),
    )


def parse_result(doc: Any) -> MatchResult:
    if not isinstance(doc, Mapping):
        return MatchResult()
    return MatchResult(
        home=_as_int(_pick(doc, "home")),
        away=_as_int(_pick(doc, "away")),
        winner=_side_tag(_pick(doc, "winner")),
    )


def parse_match(doc: Any) -> Optional[HistoricalMatch]:
    """Parse one provider match stat; None when it names no teams at all."""
    if not isinstance(doc, Mapping):
        return None
    teams = _pick(doc, "teams", default={})
    home = parse_team(_pick(teams, "home"))
    away = parse_team(_pick(teams, "away"))
    if not (home.name or home.id) and not (away.name or away.id):
        return None

    corners_doc = _pick(doc, "corners")
    corners = None
    if isinstance(corners_doc, Mapping):
        corners = Corners(
            home=_as_int(_pick(corners_doc, "home")) or 0,
            away=_as_int(_pick(corners_doc, "away")) or 0,
        )

    return HistoricalMatch(
        result=parse_result(_pick(doc, "result")),
        home=home,
        away=away,
        corners=corners,
        first_goal=_side_tag(_pick(doc, "firstGoal", "firstgoal")),
        last_goal=_side_tag(_pick(doc, "lastGoal", "lastgoal")),
        kickoff=_kickoff(_pick(doc, "time")),
        match_id=_as_id(_pick(doc, "id", "_id")),
        status=_pick(doc, "status", "matchStatus"),
        neutral_ground=_pick(doc, "neutralGround", "neutralground"),
    )


def parse_matches(section: Any) -> List[HistoricalMatch]:
    """Matches of a ``{matches: [...]}`` section, skipping unusable entries."""
    matches = []
    for raw in _as_list(_pick(section, "matches")):
        match = parse_match(raw)
        if match is None:
            logger.debug("Skipping match entry without teams: %r", raw)
            continue
        matches.append(match)
    return matches


def parse_table_rows(section: Any) -> List[TableRow]:
    rows = []
    for raw in _as_list(_pick(section, "tableRows", "tablerows")):
        if not isinstance(raw, Mapping):
            continue
        rows.append(TableRow(
            team=parse_team(_pick(raw, "team")),
            position=_as_int(_pick(raw, "pos", "position")) or 0,
            goals_for=_as_int(_pick(raw, "goalsForTotal", "goalsfortotal")),
            matches_played=_as_int(_pick(raw, "total")),
        ))
    return rows


def parse_markets(value: Any) -> List[Market]:
    markets = []
    for raw in _as_list(value):
        if not isinstance(raw, Mapping):
            continue
        outcomes = []
        for o in _as_list(_pick(raw, "outcomes")):
            if not isinstance(o, Mapping):
                continue
            price = _pick(o, "odds", "price")
            probability = _pick(o, "probability")
            outcomes.append(Outcome(
                description=str(_pick(o, "desc", "description", default="")),
                price=None if price is None else str(price),
                probability=None if probability is None else str(probability),
            ))
        markets.append(Market(
            name=str(_pick(raw, "name", "desc", default="")),
            specifier=str(_pick(raw, "specifier", default="")),
            outcomes=tuple(outcomes),
        ))
    return markets


def _split(doc: Any) -> VenueSplit:
    if not isinstance(doc, Mapping):
        return VenueSplit()

    def _num(key):
        value = _pick(doc, key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        return 0

    return VenueSplit(total=_num("total"), home=_num("home"), away=_num("away"))


def parse_scoring_summary(section: Any) -> Optional[ScoringSummary]:
    """Team scoring/conceding stats, or None when the section is absent."""
    stats = _pick(section, "stats")
    if not isinstance(stats, Mapping):
        return None
    scoring = _pick(stats, "scoring", default={})
    conceding = _pick(stats, "conceding", default={})
    halftime = _pick(scoring, "scoringAtHalftime", "scoringathalftime")
    return ScoringSummary(
        matches=_split(_pick(stats, "totalMatches", "totalmatches")),
        wins=_split(_pick(stats, "totalWins", "totalwins")),
        goals_scored=_split(_pick(scoring, "goalsScored", "goalsscored")),
        goals_conceded=_split(_pick(conceding, "goalsConceded", "goalsconceded")),
        clean_sheets=_split(_pick(conceding, "cleanSheets", "cleansheets")),
        both_teams_scored=_split(_pick(scoring, "bothTeamsScored", "bothteamsscored")),
        scoring_at_halftime=_split(halftime) if isinstance(halftime, Mapping) else None,
    )


# ---------------------------------------------------------------------------
# Enriched match
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnrichedMatch:
    """One fixture with every enrichment section the provider supplied."""
    match_id: Optional[str]
    home_team: TeamRef
    away_team: TeamRef
    competition: Optional[str] = None
    kickoff: Optional[datetime] = None
    markets: Tuple[Market, ...] = ()
    table: Tuple[TableRow, ...] = ()
    home_recent: Tuple[HistoricalMatch, ...] = ()
    away_recent: Tuple[HistoricalMatch, ...] = ()
    head_to_head: Tuple[HistoricalMatch, ...] = ()
    home_summary: Optional[ScoringSummary] = None
    away_summary: Optional[ScoringSummary] = None

    @property
    def home_history(self) -> TeamHistory:
        return TeamHistory(self.home_team, self.home_recent)

    @property
    def away_history(self) -> TeamHistory:
        return TeamHistory(self.away_team, self.away_recent)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "EnrichedMatch":
        """
        Build an EnrichedMatch from a stored document.

        Raises:
            DocumentError: if ``doc`` is not a mapping.
        """
        if not isinstance(doc, Mapping):
            raise DocumentError(f"Enriched match document must be a mapping, got {type(doc).__name__}")

        original = _pick(doc, "originalMatch", default={})
        teams = _pick(original, "teams", default={})

        return cls(
            match_id=_as_id(_pick(doc, "matchId", "id")),
            home_team=parse_team(_pick(teams, "home")),
            away_team=parse_team(_pick(teams, "away")),
            competition=_as_text(_pick(original, "tournamentName")) or None,
            kickoff=_kickoff(_pick(doc, "matchTime")),
            markets=tuple(parse_markets(_pick(original, "markets") or _pick(doc, "markets"))),
            table=tuple(parse_table_rows(_pick(doc, "teamTableSlice"))),
            home_recent=tuple(parse_matches(_pick(doc, "team1LastX"))),
            away_recent=tuple(parse_matches(_pick(doc, "team2LastX"))),
            head_to_head=tuple(parse_matches(_pick(doc, "teamVersusRecent"))),
            home_summary=parse_scoring_summary(_pick(doc, "team1ScoringConceding")),
            away_summary=parse_scoring_summary(_pick(doc, "team2ScoringConceding")),
        )

import copy
from datetime import datetime, timedelta

import pytest
from pytz import utc

from fixturescore.scoring_config import get_default_scoring_config
from fixturescore.stats.primitives import (
    Corners,
    HistoricalMatch,
    Market,
    MatchResult,
    Outcome,
    TeamRef,
)

BASE_TIME = datetime(2024, 3, 1, 15, 0, tzinfo=utc)
BASE_UTS = 1700000000
DAY = 86400


def _team(name, team_id=None):
    return TeamRef(id=team_id, name=name)


def _match(home, away, home_goals=None, away_goals=None, *, days_ago=None, winner=None,
           first_goal=None, last_goal=None, corners=None):
    return HistoricalMatch(
        result=MatchResult(home_goals, away_goals, winner),
        home=home,
        away=away,
        corners=Corners(*corners) if corners is not None else None,
        first_goal=first_goal,
        last_goal=last_goal,
        kickoff=BASE_TIME - timedelta(days=days_ago) if days_ago is not None else None,
    )


def _market(name, specifier="", **outcomes):
    """outcomes: description=price or description=(price, probability)."""
    built = []
    for desc, value in outcomes.items():
        price, probability = value if isinstance(value, tuple) else (value, None)
        built.append(Outcome(description=desc, price=price, probability=probability))
    return Market(name=name, specifier=specifier, outcomes=tuple(built))


def _match_result_market(home="2.00", draw="3.20", away="2.00"):
    return Market("1X2", "", (
        Outcome("Home", home), Outcome("Draw", draw), Outcome("Away", away),
    ))


def _over_under(total, over_price="1.90", under_price="1.90", over_probability=None):
    return Market("Over/Under", f"total={total}", (
        Outcome(f"Over {total}", over_price, over_probability),
        Outcome(f"Under {total}", under_price),
    ))


@pytest.fixture
def team():
    return _team


@pytest.fixture
def match():
    return _match


@pytest.fixture
def market():
    return _market


@pytest.fixture
def match_result_market():
    return _match_result_market


@pytest.fixture
def over_under():
    return _over_under


@pytest.fixture
def profile():
    return get_default_scoring_config()


# ---------------------------------------------------------------------------
# Enriched match documents
# ---------------------------------------------------------------------------

def _team_doc(team_id, name):
    return {"id": team_id, "name": name}


def _stat(home, away, hg, ag, days_ago, winner=None, corners=None, first=None, last=None):
    doc = {
        "teams": {"home": home, "away": away},
        "result": {"home": hg, "away": ag, "winner": winner},
        "time": {"uts": BASE_UTS - days_ago * DAY},
    }
    if corners is not None:
        doc["corners"] = {"home": corners[0], "away": corners[1]}
    if first is not None:
        doc["firstGoal"] = first
    if last is not None:
        doc["lastGoal"] = last
    return doc


ARSENAL = _team_doc("1", "Arsenal")
CHELSEA = _team_doc("2", "Chelsea")

SAMPLE_DOCUMENT = {
    "matchId": "m1",
    "matchTime": {"uts": BASE_UTS},
    "seasonId": "s2024",
    "originalMatch": {
        "teams": {"home": ARSENAL, "away": CHELSEA},
        "tournamentName": "Premier League",
        "markets": [
            {"name": "1X2", "specifier": "", "outcomes": [
                {"desc": "Home", "odds": "1.80"},
                {"desc": "Draw", "odds": "3.50"},
                {"desc": "Away", "odds": "4.20"},
            ]},
            {"name": "Over/Under", "specifier": "total=2.5", "outcomes": [
                {"desc": "Over 2.5", "odds": "1.90", "probability": "0.6"},
                {"desc": "Under 2.5", "odds": "1.95"},
            ]},
            {"name": "Over/Under", "specifier": "total=1.5", "outcomes": [
                {"desc": "Over 1.5", "odds": "1.30", "probability": "0.8"},
                {"desc": "Under 1.5", "odds": "3.40"},
            ]},
            {"name": "Both Teams To Score", "specifier": "", "outcomes": [
                {"desc": "Yes", "odds": "1.70"},
                {"desc": "No", "odds": "2.10"},
            ]},
        ],
    },
    "teamTableSlice": {"tableRows": [
        {"team": ARSENAL, "pos": 2, "goalsForTotal": 30, "total": 15},
        {"team": CHELSEA, "pos": 9, "goalsForTotal": 21, "total": 15},
    ]},
    "team1LastX": {"matches": [
        _stat(ARSENAL, _team_doc("3", "Wolves"), 2, 0, 1, "home", (6, 3), "home", "home"),
        _stat(_team_doc("4", "Fulham"), ARSENAL, 1, 1, 8, None, (4, 5), "home", "away"),
        _stat(ARSENAL, _team_doc("5", "Spurs"), 3, 1, 15, "home", (7, 2), "away", "home"),
    ]},
    "team2LastX": {"matches": [
        _stat(CHELSEA, _team_doc("6", "Everton"), 0, 1, 2, "away", (5, 4), "away", "away"),
        _stat(_team_doc("7", "Newcastle"), CHELSEA, 2, 2, 9, None, None, "home", "away"),
    ]},
    "teamVersusRecent": {"matches": [
        _stat(CHELSEA, ARSENAL, 1, 2, 100, "away"),
        _stat(ARSENAL, CHELSEA, 1, 1, 300),
    ]},
    "team1ScoringConceding": {"stats": {
        "totalMatches": {"total": 10, "home": 5, "away": 5},
        "totalWins": {"total": 6, "home": 4, "away": 2},
        "scoring": {
            "goalsScored": {"total": 20, "home": 12, "away": 8},
            "bothTeamsScored": {"total": 5, "home": 2, "away": 3},
        },
        "conceding": {
            "goalsConceded": {"total": 8, "home": 3, "away": 5},
            "cleanSheets": {"total": 4, "home": 3, "away": 1},
        },
    }},
    "team2ScoringConceding": {"stats": {
        "totalMatches": {"total": 10, "home": 5, "away": 5},
        "totalWins": {"total": 3, "home": 2, "away": 1},
        "scoring": {
            "goalsScored": {"total": 12, "home": 7, "away": 5},
            "bothTeamsScored": {"total": 6, "home": 3, "away": 3},
        },
        "conceding": {
            "goalsConceded": {"total": 14, "home": 6, "away": 8},
            "cleanSheets": {"total": 2, "home": 1, "away": 1},
        },
    }},
}


@pytest.fixture
def sample_document():
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def make_document():
    """Copy of the sample document with top-level overrides (None removes a key)."""
    def _make(**overrides):
        doc = copy.deepcopy(SAMPLE_DOCUMENT)
        for key, value in overrides.items():
            if value is None:
                doc.pop(key, None)
            else:
                doc[key] = value
        return doc
    return _make

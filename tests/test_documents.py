from datetime import datetime

import pytest
from pytz import utc

from fixturescore.services.prediction import PredictionService
from fixturescore.stats.documents import DocumentError, EnrichedMatch, parse_markets, parse_match


def _pascal(value):
    """Recursively capitalise the first letter of every key."""
    if isinstance(value, dict):
        return {k[:1].upper() + k[1:]: _pascal(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_pascal(v) for v in value]
    return value


class TestFromDocument:
    def test_full_document(self, sample_document):
        match = EnrichedMatch.from_document(sample_document)

        assert match.match_id == "m1"
        assert match.home_team.name == "Arsenal"
        assert match.home_team.id == "1"
        assert match.away_team.name == "Chelsea"
        assert match.competition == "Premier League"
        assert match.kickoff == datetime(2023, 11, 14, 22, 13, 20, tzinfo=utc)
        assert len(match.markets) == 4
        assert len(match.table) == 2
        assert match.table[1].position == 9
        assert len(match.home_recent) == 3
        assert len(match.away_recent) == 2
        assert len(match.head_to_head) == 2
        assert match.home_summary.goals_scored.home == 12
        assert match.away_summary.clean_sheets.total == 2

    def test_match_entries(self, sample_document):
        match = EnrichedMatch.from_document(sample_document)
        first = match.home_recent[0]
        assert first.result.home == 2
        assert first.result.winner == "home"
        assert first.corners.home == 6
        assert first.first_goal == "home"
        assert first.kickoff is not None
        assert match.away_recent[1].corners is None

    def test_pascal_case_keys(self, sample_document):
        match = EnrichedMatch.from_document(_pascal(sample_document))
        assert match.match_id == "m1"
        assert match.home_team.name == "Arsenal"
        assert match.competition == "Premier League"
        assert match.kickoff == datetime(2023, 11, 14, 22, 13, 20, tzinfo=utc)
        assert len(match.home_recent) == 3
        assert match.home_summary.matches.total == 10
        assert match.markets[0].outcome("Home").price == "1.80"

    def test_missing_sections_become_empty(self):
        match = EnrichedMatch.from_document({"matchId": 42})
        assert match.match_id == "42"
        assert match.home_team.name == ""
        assert match.competition is None
        assert match.kickoff is None
        assert match.markets == ()
        assert match.home_recent == ()
        assert match.head_to_head == ()
        assert match.home_summary is None
        assert not match.home_history

    def test_non_mapping_rejected(self):
        with pytest.raises(DocumentError):
            EnrichedMatch.from_document(["not", "a", "dict"])
        with pytest.raises(ValueError):
            EnrichedMatch.from_document(None)


class TestSectionParsers:
    def test_match_without_teams_is_dropped(self):
        assert parse_match({"result": {"home": 1, "away": 0}}) is None
        assert parse_match("garbage") is None

    def test_bad_goal_values_become_unknown(self):
        m = parse_match({"teams": {"home": {"name": "A"}, "away": {"name": "B"}},
                         "result": {"home": "x", "away": 2}})
        assert m.result.home is None
        assert m.result.away == 2

    def test_markets_keep_text_prices(self):
        markets = parse_markets([
            {"name": "1X2", "outcomes": [{"desc": "Home", "odds": 1.5}, "junk"]},
            "junk",
        ])
        assert len(markets) == 1
        assert markets[0].specifier == ""
        assert markets[0].outcomes[0].price == "1.5"
        assert markets[0].outcomes[0].probability is None


class TestMalformedValues:
    def test_out_of_range_timestamp_degrades(self, make_document):
        doc = make_document(matchTime={"uts": 1e20})
        doc["team1LastX"]["matches"][0]["time"] = {"uts": 1e20}
        match = EnrichedMatch.from_document(doc)
        assert match.kickoff is None
        assert match.home_recent[0].kickoff is None

    def test_non_string_names_become_text(self):
        m = parse_match({"teams": {"home": {"name": 123, "abbr": 7}, "away": {"name": "B"}}})
        assert m.home.name == "123"
        assert m.home.abbr == "7"
        assert m.home.medium_name is None

    def test_numeric_name_in_history_still_predicts(self, profile, make_document):
        doc = make_document()
        doc["team1LastX"]["matches"].append({
            "teams": {"home": {"name": 123}, "away": {"name": "Arsenal"}},
            "result": {"home": 0, "away": 1},
        })
        doc["teamVersusRecent"]["matches"].append({
            "teams": {"home": {"name": 456}, "away": {"name": "Arsenal"}},
            "result": {"home": 1, "away": 1},
        })
        prediction = PredictionService(profile).predict_document(doc)
        assert prediction.home.matches_analyzed == 4
        assert prediction.head_to_head.matches == 3

    def test_numeric_competition_name(self, make_document):
        doc = make_document()
        doc["originalMatch"]["tournamentName"] = 2024
        assert EnrichedMatch.from_document(doc).competition == "2024"

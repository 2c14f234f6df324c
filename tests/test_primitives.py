from datetime import datetime

from pytz import utc

from fixturescore.stats.primitives import (
    AWAY,
    DRAW,
    HOME,
    HistoricalMatch,
    Market,
    MatchResult,
    Outcome,
    TeamHistory,
    TeamRef,
    most_recent_first,
)
from fixturescore.utils.date_utils import parse_gametime, parse_kickoff
from fixturescore.utils.numbers import average, mean, parse_decimal, percentage, percentage_or_zero


class TestMatchResult:
    def test_goals_decide_outcome(self):
        assert MatchResult(2, 1).outcome() == HOME
        assert MatchResult(0, 3).outcome() == AWAY
        assert MatchResult(1, 1).outcome() == DRAW

    def test_goals_win_over_contradicting_tag(self):
        assert MatchResult(0, 2, winner="home").outcome() == AWAY

    def test_winner_tag_used_without_score(self):
        assert MatchResult(None, None, winner="away").outcome() == AWAY
        assert MatchResult(1, None, winner="home").outcome() == HOME

    def test_missing_tag_without_score_is_draw(self):
        assert MatchResult().outcome() == DRAW

    def test_outcome_for_side(self):
        result = MatchResult(3, 1)
        assert result.outcome_for(HOME) == "W"
        assert result.outcome_for(AWAY) == "L"
        assert MatchResult(0, 0).outcome_for(AWAY) == "D"

    def test_total_goals(self):
        assert MatchResult(2, 2).total_goals == 4
        assert MatchResult(2, None).total_goals is None


class TestTeamRef:
    def test_ids_compared_when_both_present(self):
        assert TeamRef(id="1", name="Arsenal").matches(TeamRef(id="1", name="Arsenal FC"))
        assert not TeamRef(id="1", name="Arsenal").matches(TeamRef(id="2", name="Arsenal"))

    def test_names_compared_case_insensitively(self):
        assert TeamRef(name="Arsenal").matches(TeamRef(id="9", name="ARSENAL"))

    def test_medium_name_matches(self):
        assert TeamRef(name="Manchester United").matches(
            TeamRef(name="Man Utd FC", medium_name="Manchester United")
        )

    def test_none_and_empty_never_match(self):
        assert not TeamRef(name="Arsenal").matches(None)
        assert not TeamRef().matches(TeamRef())


class TestTeamHistory:
    def test_appearances_skip_foreign_matches(self, team, match):
        ars, che, wol = team("Arsenal"), team("Chelsea"), team("Wolves")
        history = TeamHistory(ars, [match(che, wol, 1, 0), match(ars, wol, 2, 0)])
        appearances = history.appearances()
        assert len(appearances) == 1
        assert appearances[0][1] == HOME

    def test_matches_become_tuple(self, team, match):
        history = TeamHistory(team("A"), [match(team("A"), team("B"), 1, 0)])
        assert isinstance(history.matches, tuple)
        assert history

    def test_empty_history_is_falsy(self, team):
        assert not TeamHistory(team("A"))


class TestMostRecentFirst:
    def test_sorted_by_kickoff_undated_last(self, team, match):
        a, b = team("A"), team("B")
        old = match(a, b, 1, 0, days_ago=30)
        new = match(a, b, 2, 0, days_ago=1)
        undated = match(a, b, 3, 0)
        assert most_recent_first([undated, old, new]) == [new, old, undated]

    def test_undated_keep_input_order(self, team, match):
        a, b = team("A"), team("B")
        first, second = match(a, b, 1, 0), match(a, b, 0, 1)
        assert most_recent_first([first, second]) == [first, second]

    def test_mixed_naive_and_aware_kickoffs(self, team):
        a, b = team("A"), team("B")
        naive = HistoricalMatch(MatchResult(1, 0), a, b, kickoff=datetime(2024, 3, 2, 12, 0))
        aware = HistoricalMatch(MatchResult(0, 1), a, b, kickoff=datetime(2024, 3, 1, 12, 0, tzinfo=utc))
        assert most_recent_first([aware, naive]) == [naive, aware]


class TestMarket:
    def test_outcome_lookup_is_exact(self):
        market = Market("1X2", outcomes=[Outcome("Home", "2.0"), Outcome("home", "9.0")])
        assert market.outcome("Home").price == "2.0"
        assert market.outcome("Away") is None


class TestNumbers:
    def test_percentage_zero_denominator(self):
        assert percentage(3, 0) is None
        assert percentage_or_zero(3, 0) == 0

    def test_percentage_rounds(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67

    def test_average_and_mean(self):
        assert average(5, 2) == 2.5
        assert average(5, 0) is None
        assert mean([1.0, None, 2.0]) == 1.5
        assert mean([None]) is None

    def test_parse_decimal(self):
        assert parse_decimal("1.85") == 1.85
        assert parse_decimal(" 2,50 ") == 2.5
        assert parse_decimal(3) == 3.0
        for bad in (None, "", "abc", "nan", "inf", "-1.5", True):
            assert parse_decimal(bad) is None


class TestKickoffParsing:
    def test_unix_timestamp(self):
        assert parse_kickoff({"uts": 1700000000}) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=utc)
        assert parse_kickoff(1700000000) == parse_kickoff({"timestamp": 1700000000})

    def test_iso_string(self):
        assert parse_gametime("2024-03-01T15:00:00Z") == datetime(2024, 3, 1, 15, 0, tzinfo=utc)

    def test_date_and_time_block(self):
        assert parse_kickoff({"date": "21/10/23", "time": "15:30"}) == datetime(2023, 10, 21, 15, 30, tzinfo=utc)
        assert parse_kickoff({"date": "21/10/2023"}) == datetime(2023, 10, 21, tzinfo=utc)

    def test_naive_datetime_localized(self):
        assert parse_kickoff(datetime(2024, 1, 1, 12, 0)).tzinfo is not None

    def test_unusable_values(self):
        for value in (None, 0, -5, True, "not a date", {"date": "xx"}, {}, [],
                      1e20, float("inf"), {"uts": 1e20}):
            assert parse_kickoff(value) is None

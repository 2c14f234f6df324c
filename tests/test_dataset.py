import pandas as pd

from fixturescore.pipeline.dataset import frame_columns, prediction_row, predictions_to_frame
from fixturescore.services.prediction import PredictionService


class TestPredictionsToFrame:
    def test_one_row_per_prediction(self, profile, make_document):
        service = PredictionService(profile)
        predictions = [service.predict_document(make_document(matchId=f"m{i}")) for i in range(3)]
        df = predictions_to_frame(predictions)

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 3
        assert list(df.columns) == frame_columns()
        assert list(df["match_id"]) == ["m0", "m1", "m2"]
        assert df.loc[0, "home_form"] == "WDW"
        assert df.loc[0, "away_form"] == "LD"
        assert df.loc[0, "confidence_score"] == 30
        assert df.loc[0, "odds_home_win"] == 1.80
        assert df.loc[0, "h2h_matches"] == 2
        assert df.loc[0, "h2h_recent"] == "CHE 1-2 ARS | ARS 1-1 CHE"
        assert df.loc[0, "corners_total_avg"] == 4.25

    def test_empty_frame_has_columns(self):
        df = predictions_to_frame([])
        assert df.empty
        assert list(df.columns) == frame_columns()

    def test_row_is_flat(self, profile, sample_document):
        row = prediction_row(PredictionService(profile).predict_document(sample_document))
        assert not any(isinstance(v, (dict, list)) for v in row.values())
        assert row["home_position"] == 2
        assert row["away_position"] == 9

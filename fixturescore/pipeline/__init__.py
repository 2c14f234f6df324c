"""
Analyst-facing exports of prediction batches.
"""

from fixturescore.pipeline.dataset import frame_columns, prediction_row, predictions_to_frame

__all__ = [
    "frame_columns",
    "prediction_row",
    "predictions_to_frame",
]

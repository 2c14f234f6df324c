"""
Fixturescore - Predictive features and confidence scoring for sporting fixtures.

This package turns partially-populated enriched-match data into:
- Per-team features (forms, rates, goal averages) via ``features``
- Canonical odds snapshots via ``market``
- Head-to-head summaries and a composite predictive score (``scoring``)
- Per-fixture prediction records, batch runs and league rollups (``services``)
- Flat DataFrame export for analysts (``pipeline``)
- Scoring profiles (weights, windows, market labels via ``scoring_config``)
"""

__version__ = "0.1.0"

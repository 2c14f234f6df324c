"""
Odds interpreter - canonical prices from a fixture's betting markets.

Markets are located by exact name + specifier (first match wins) and
outcomes by exact description. A missing market, outcome or unparsable
price yields ``0.0``; callers treat ``0.0`` as "unavailable".
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from fixturescore.scoring_config import MarketSpec, ScoringConfig, get_default_scoring_config
from fixturescore.stats.primitives import Market, Outcome
from fixturescore.utils.numbers import parse_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OddsSnapshot:
    home_win: float = 0.0
    draw: float = 0.0
    away_win: float = 0.0
    over_15: float = 0.0
    under_15: float = 0.0
    over_25: float = 0.0
    under_25: float = 0.0
    btts_yes: float = 0.0
    btts_no: float = 0.0
    # Implied probabilities of the "over" outcomes, in [0, 1]
    over_15_probability: Optional[float] = None
    over_25_probability: Optional[float] = None
    market_count: int = 0

    @property
    def has_markets(self) -> bool:
        return self.market_count > 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "home_win": self.home_win,
            "draw": self.draw,
            "away_win": self.away_win,
            "over_15": self.over_15,
            "under_15": self.under_15,
            "over_25": self.over_25,
            "under_25": self.under_25,
            "btts_yes": self.btts_yes,
            "btts_no": self.btts_no,
        }


def find_market(markets: Sequence[Market], name: str, specifier: str = "") -> Optional[Market]:
    """First market whose name and specifier both match exactly."""
    for market in markets:
        if market.name == name and (market.specifier or "") == specifier:
            return market
    return None


def _price(outcome: Optional[Outcome]) -> float:
    if outcome is None:
        return 0.0
    value = parse_decimal(outcome.price)
    if value is None:
        if outcome.price is not None:
            logger.debug("Unusable price %r for outcome %r", outcome.price, outcome.description)
        return 0.0
    return value


def _probability(outcome: Optional[Outcome]) -> Optional[float]:
    if outcome is None:
        return None
    value = parse_decimal(outcome.probability)
    if value is None or value > 1:
        return None
    return value


class OddsInterpreter:
    """Reads canonical prices using the market labels of a scoring profile."""

    def __init__(self, profile: Optional[ScoringConfig] = None):
        self.profile = profile or get_default_scoring_config()
        self._specs: Dict[str, MarketSpec] = self.profile.markets

    def _outcome(self, markets: Sequence[Market], role: str, key: str) -> Optional[Outcome]:
        spec = self._specs[role]
        market = find_market(markets, spec.name, spec.specifier)
        if market is None:
            return None
        label = spec.outcomes.get(key)
        return market.outcome(label) if label else None

    def extract(self, markets: Optional[Sequence[Market]]) -> OddsSnapshot:
        markets = list(markets or [])
        if not markets:
            return OddsSnapshot()

        def price(role, key):
            return _price(self._outcome(markets, role, key))

        return OddsSnapshot(
            home_win=price("match_result", "home"),
            draw=price("match_result", "draw"),
            away_win=price("match_result", "away"),
            over_15=price("over_under_15", "over"),
            under_15=price("over_under_15", "under"),
            over_25=price("over_under_25", "over"),
            under_25=price("over_under_25", "under"),
            btts_yes=price("btts", "yes"),
            btts_no=price("btts", "no"),
            over_15_probability=_probability(self._outcome(markets, "over_under_15", "over")),
            over_25_probability=_probability(self._outcome(markets, "over_under_25", "over")),
            market_count=len(markets),
        )

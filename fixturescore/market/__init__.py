from fixturescore.market.odds import OddsInterpreter, OddsSnapshot, find_market

__all__ = [
    "OddsInterpreter",
    "OddsSnapshot",
    "find_market",
]

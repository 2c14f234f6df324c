"""
Null-safe numeric helpers shared by the extractors.

Team and scorer rates report ``None`` when the denominator is zero; league
rates report ``0``. Both conventions go through the helpers below so the
choice stays explicit at each call site.
"""

import logging
import math
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)


def percentage(count: float, denominator: float) -> Optional[int]:
    """``round(count * 100 / denominator)``, or None when denominator is 0."""
    if not denominator:
        return None
    return int(round(count * 100 / denominator))


def percentage_or_zero(count: float, denominator: float) -> int:
    """League-style percentage: zero denominator gives 0."""
    rate = percentage(count, denominator)
    return 0 if rate is None else rate


def average(total: float, count: float, ndigits: int = 2) -> Optional[float]:
    if not count:
        return None
    return round(total / count, ndigits)


def mean(values: Iterable[Optional[float]], ndigits: int = 2) -> Optional[float]:
    """Mean of the non-null values, or None if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round(sum(present) / len(present), ndigits)


def parse_decimal(text: Any) -> Optional[float]:
    """
    Parse provider price/probability text into a float.

    Returns None for missing, unparsable, non-finite or negative input.
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        try:
            value = float(str(text).strip().replace(",", "."))
        except (TypeError, ValueError):
            logger.debug("Unparsable decimal text %r", text)
            return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

"""
Derived views over mapped entity lists.

Pure functions: inputs are never mutated and every call returns a new list or
a scalar. Elements missing the field an aggregate needs are excluded rather
than counted as zero.
"""

import math
from typing import Optional, Protocol, Sequence, TypeVar


class Timestamped(Protocol):
    timestamp: int


T = TypeVar("T", bound=Timestamped)


def sort_ascending_by_timestamp(items: Sequence[T]) -> list[T]:
    """Oldest first. Stable for equal timestamps."""
    return sorted(items, key=lambda item: item.timestamp)


def sort_descending_by_timestamp(items: Sequence[T]) -> list[T]:
    """Newest first. Stable for equal timestamps."""
    return sorted(items, key=lambda item: item.timestamp, reverse=True)


def filter_by_inclusive_range(items: Sequence[T], start: int, end: int) -> list[T]:
    """
    Keep elements with start <= timestamp <= end, in their original order.

    Args:
        items: Any timestamped entities (quotes, dividends, splits, ...)
        start: Lower bound (epoch seconds, inclusive)
        end: Upper bound (epoch seconds, inclusive)

    Returns:
        New list of the matching elements
    """
    return [item for item in items if start <= item.timestamp <= end]


def total_amount(items: Sequence) -> float:
    """Sum of ``amount`` over dividends or capital gains."""
    return sum(item.amount for item in items if item.amount is not None)


def total_volume(quotes: Sequence) -> int:
    return sum(q.volume for q in quotes if q.volume is not None)


def average_volume(quotes: Sequence) -> Optional[float]:
    volumes = [q.volume for q in quotes if q.volume is not None]
    if not volumes:
        return None
    return sum(volumes) / len(volumes)


def highest_high(quotes: Sequence) -> Optional[float]:
    highs = [q.high for q in quotes if q.high is not None]
    return max(highs) if highs else None


def lowest_low(quotes: Sequence) -> Optional[float]:
    lows = [q.low for q in quotes if q.low is not None]
    return min(lows) if lows else None


def simple_moving_average(quotes: Sequence, window: int) -> list[Optional[float]]:
    """
    Simple moving average of closing prices.

    Produces one value per full window, i.e. ``len(quotes) - window + 1``
    values. Bars without a close are excluded from their window's mean; a
    window with no closes at all yields None.

    Args:
        quotes: Bars in the order the average should run over
        window: Number of bars per window (>= 1)

    Returns:
        Averages, or an empty list when there are fewer bars than ``window``

    Raises:
        ValueError: If window < 1
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    if len(quotes) < window:
        return []

    averages = []
    for i in range(len(quotes) - window + 1):
        closes = [q.close for q in quotes[i:i + window] if q.close is not None]
        averages.append(sum(closes) / len(closes) if closes else None)
    return averages


def percentile(values: Sequence[Optional[float]], q: float) -> Optional[float]:
    """
    Linear-interpolated percentile of the non-null values.

    Args:
        values: Numbers; None entries are ignored
        q: Percentile in [0, 100]

    Raises:
        ValueError: If q is outside [0, 100]
    """
    if not 0 <= q <= 100:
        raise ValueError(f"percentile must be within [0, 100], got {q}")

    present = sorted(v for v in values if v is not None)
    if not present:
        return None

    rank = (len(present) - 1) * q / 100.0
    lower = math.floor(rank)
    upper = math.ceil(rank)
    if lower == upper:
        return present[int(rank)]
    return present[lower] + (present[upper] - present[lower]) * (rank - lower)


def close_percentile(quotes: Sequence, q: float) -> Optional[float]:
    return percentile([quote.close for quote in quotes], q)


def percentage_change(old: Optional[float], new: Optional[float]) -> Optional[float]:
    """Percent change from old to new; None when either is absent or old is zero."""
    if old is None or new is None or old == 0:
        return None
    return (new - old) / old * 100.0


def price_change_percent(quotes: Sequence) -> Optional[float]:
    """Percent change between the first and last available close."""
    closes = [q.close for q in quotes if q.close is not None]
    if len(closes) < 2:
        return None
    return percentage_change(closes[0], closes[-1])

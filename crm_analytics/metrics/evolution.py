"""Trailing-window projections and trends over monthly series"""

from collections.abc import Sequence

from .ratios import finite_sum, percentage

POSITIVE = "positive"
STABLE = "stable"
NEGATIVE = "negative"


def trailing(values: Sequence[float], window: int = 3) -> Sequence[float]:
    """Last ``window`` values of a chronological series."""
    if window <= 0:
        return values[:0]
    return values[-window:]


def trailing_average(values: Sequence[float], window: int = 3) -> float:
    """
    Mean of the trailing window.

    Averages over however many buckets exist when fewer than ``window``
    are available, and is 0.0 for an empty series.
    """
    recent = trailing(values, window)
    if not recent:
        return 0.0
    return finite_sum(recent) / len(recent)


def projected_annual(values: Sequence[float], window: int = 3, months_per_year: int = 12) -> float:
    """Trailing monthly average extrapolated to a full year."""
    return trailing_average(values, window) * months_per_year


def growth_rate(values: Sequence[float], window: int = 3, floor: float = 1.0) -> float:
    """
    Growth from the first to the last bucket of the trailing window, in percent.

    The denominator is floored at ``floor`` so a zero or tiny first bucket
    cannot divide by zero. This biases small-base growth downward and is
    kept as is for comparability with historical figures. Fewer than two
    buckets give 0.0.
    """
    recent = trailing(values, window)
    if len(recent) < 2:
        return 0.0

    first, last = recent[0], recent[-1]
    return (last - first) / max(first, floor) * 100


def trend_label(growth: float, positive_threshold: float = 5.0,
                negative_threshold: float = -5.0) -> str:
    """Classify a growth rate as positive, negative or stable."""
    if growth >= positive_threshold:
        return POSITIVE
    if growth <= negative_threshold:
        return NEGATIVE
    return STABLE


def best_bucket(keys: Sequence[str], values: Sequence[float]) -> tuple[str, float]:
    """
    Key and value of the highest bucket.

    The earliest bucket wins ties; an empty series gives ``("", 0.0)``.
    """
    best_key, best_value = "", 0.0
    for index, (key, value) in enumerate(zip(keys, values)):
        if index == 0 or value > best_value:
            best_key, best_value = key, value
    return best_key, best_value


def performance_vs_target(values: Sequence[float], monthly_target: float,
                          window: int = 3) -> float:
    """Trailing monthly average as a percentage of the monthly target."""
    return percentage(trailing_average(values, window), monthly_target)

"""Guarded ratios and portfolio-level financial metrics"""

import math
import sys
from collections.abc import Iterable


def finite_sum(values: Iterable[float]) -> float:
    """
    Correctly rounded sum that stays finite.

    Totals beyond the float range are clamped to the largest finite float
    of the same sign.
    """
    values = list(values)
    try:
        total = math.fsum(values)
    except OverflowError:
        # Halving is exact, so only the final doubling can overflow
        total = math.fsum(value / 2.0 for value in values) * 2.0
    if math.isinf(total):
        return math.copysign(sys.float_info.max, total)
    return total


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    Divide, returning 0.0 when the denominator is zero or the result
    would not be finite.
    """
    if not denominator:
        return 0.0

    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def percentage(numerator: float, denominator: float) -> float:
    """Ratio expressed in percent, 0.0 on a zero denominator."""
    return safe_ratio(numerator, denominator) * 100


def conversion_rate(contract_count: int, project_count: int) -> float:
    """
    Contracts signed per project opened, in percent.

    Not capped at 100: a project may carry several contracts.
    """
    return percentage(contract_count, project_count)


def global_margin(commission_year1: float, premium: float) -> float:
    """Year-1 commission as a percentage of annual premium."""
    return percentage(commission_year1, premium)


def recurring_potential(commission_recurring: float, multiplier: float = 10.0) -> float:
    """
    Recurring commission projected over a flat number of years.

    This is a business simplification (no discounting, no churn), not a
    net present value.
    """
    return commission_recurring * multiplier


def portfolio_valuation(premium: float, recurring_value: float) -> float:
    """Annual premium plus recurring commission potential."""
    return premium + recurring_value


def customer_lifetime_value(commission_year1: float, commission_recurring: float,
                            contract_count: int, multiplier: float = 10.0) -> float:
    """Average year-1 commission plus average recurring commission over ``multiplier`` years."""
    return (safe_ratio(commission_year1, contract_count)
            + safe_ratio(commission_recurring, contract_count) * multiplier)

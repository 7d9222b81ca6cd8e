"""
Descriptive statistics for Likert rating samples.

Every helper returns 0.0 for an empty sample rather than raising.
"""

import math
import statistics
from typing import Sequence


def median(sorted_values: Sequence[float]) -> float:
    """Median of a sample (midpoint of the middle pair when even)."""
    if not sorted_values:
        return 0.0
    return float(statistics.median(sorted_values))


def quartile(sorted_values: Sequence[float], percentile: float) -> float:
    """
    Interpolated percentile of an ascending-sorted sample.

    Linear interpolation between closest ranks: the position is (n - 1) * p,
    and the result lies between the values at floor(pos) and floor(pos) + 1.
    Unlike statistics.quantiles(), a single-value sample is accepted.

    Args:
        sorted_values: Sample sorted ascending
        percentile: Target percentile in [0, 1] (0.25 for Q1, 0.75 for Q3)

    Returns:
        Interpolated value, or 0.0 for an empty sample
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0

    pos = (n - 1) * percentile
    base = math.floor(pos)
    rest = pos - base

    if base + 1 < n:
        return sorted_values[base] + rest * (sorted_values[base + 1] - sorted_values[base])
    return float(sorted_values[base])


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return statistics.fmean(values)


def population_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by n, not n - 1)."""
    if not values:
        return 0.0
    return statistics.pstdev(values)


def net_agreement_percentage(
    values: Sequence[float],
    likert_min: int,
    likert_max: int,
) -> float:
    """
    Net agreement as a percentage of the sample.

    The scale [likert_min, likert_max] is split into thirds of size
    ceil(scale / 3). Ratings in the top third count as high, ratings in the
    bottom third as low, and the result is |high - low| / n * 100.

    This measures the gap between high and low responders: a panel split
    evenly between the two extremes scores 0, not 100.

    Args:
        values: Ratings (any order)
        likert_min: Lowest point of the scale
        likert_max: Highest point of the scale

    Returns:
        Percentage in [0, 100], or 0.0 for an empty sample
    """
    if not values:
        return 0.0

    scale = likert_max - likert_min + 1
    upper_third = math.ceil(scale / 3)

    high_count = sum(1 for v in values if v >= likert_max - upper_third + 1)
    low_count = sum(1 for v in values if v <= likert_min + upper_third - 1)

    net_agreement = abs(high_count - low_count)
    return (net_agreement / len(values)) * 100

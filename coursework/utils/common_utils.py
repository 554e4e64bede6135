"""
Utility functions for data analysis.

This module provides the statistical primitives used by the item analysis
engine. All dispersion measures are population measures (divisor N), since
item analysis observes every respondent rather than a sample.
"""

from typing import Dict, List, Optional, Sequence
import math


# Statistical Utilities


def calculate_mean(values: Sequence[float]) -> float:
    """
    Calculate the arithmetic mean of a list of values.

    Args:
        values: List of values

    Returns:
        float: Mean, or 0.0 for an empty list
    """
    if not values:
        return 0.0
    return sum(values) / len(values)


def calculate_population_variance(values: Sequence[float]) -> float:
    """
    Calculate the population variance (divide by N, not N - 1).

    Args:
        values: List of values

    Returns:
        float: Population variance, or 0.0 for an empty list
    """
    if not values:
        return 0.0

    mean = calculate_mean(values)
    return sum((x - mean) ** 2 for x in values) / len(values)


def calculate_standard_deviation(values: Sequence[float]) -> float:
    """
    Calculate the population standard deviation.

    Args:
        values: List of values

    Returns:
        float: Square root of the population variance
    """
    return math.sqrt(calculate_population_variance(values))


def calculate_difficulty_index(correctness: Sequence[bool]) -> float:
    """
    Calculate the difficulty index of an item.

    Args:
        correctness: One entry per respondent who answered, True if correct

    Returns:
        float: Fraction of respondents who answered correctly, 0.0 if nobody answered
    """
    if not correctness:
        return 0.0
    return sum(1 for correct in correctness if correct) / len(correctness)


def calculate_correlation(x: Sequence[float], y: Sequence[float]) -> Optional[float]:
    """
    Calculate Pearson correlation coefficient between two lists of values.

    Args:
        x: First list of values
        y: Second list of values

    Returns:
        Optional[float]: Correlation coefficient (-1 to 1), or None when it is
        undefined (mismatched or too short lists, or zero variance in either)
    """
    if len(x) != len(y) or len(x) < 2:
        return None

    mean_x = calculate_mean(x)
    mean_y = calculate_mean(y)

    covariance = sum((x_i - mean_x) * (y_i - mean_y) for x_i, y_i in zip(x, y))
    stdev_x = math.sqrt(sum((x_i - mean_x) ** 2 for x_i in x))
    stdev_y = math.sqrt(sum((y_i - mean_y) ** 2 for y_i in y))

    if stdev_x == 0 or stdev_y == 0:
        return None

    # Rounding can push |r| a hair past 1
    return max(-1.0, min(1.0, covariance / (stdev_x * stdev_y)))


def calculate_point_biserial(
    scores: Sequence[float], indicator: Sequence[int]
) -> Optional[float]:
    """
    Calculate the point-biserial correlation between scores and group membership.

    This is the Pearson correlation between a continuous score and a binary
    membership indicator, e.g. total quiz scores against "picked this answer".

    Args:
        scores: Total score of each respondent
        indicator: 1 if the respondent belongs to the group, otherwise 0

    Returns:
        Optional[float]: Correlation, or None when undefined (every
        respondent has the same score, or everyone/no one is in the group)
    """
    return calculate_correlation(
        [float(s) for s in scores], [1.0 if flag else 0.0 for flag in indicator]
    )


def calculate_cronbach_alpha(item_scores: List[List[float]]) -> Optional[float]:
    """
    Calculate Cronbach's alpha, the internal consistency of a set of items.

    Args:
        item_scores: One list per item, each holding one score per respondent
            (all lists must be aligned on the same respondents)

    Returns:
        Optional[float]: Alpha, or None with fewer than two items or when the
        respondents' totals have zero variance
    """
    k = len(item_scores)
    if k < 2:
        return None

    totals = [sum(scores) for scores in zip(*item_scores)]
    total_variance = calculate_population_variance(totals)
    if total_variance == 0:
        return None

    item_variance = sum(calculate_population_variance(s) for s in item_scores)
    return (k / (k - 1)) * (1 - item_variance / total_variance)


def calculate_summary_statistics(values: List[float]) -> Dict[str, float]:
    """
    Calculate summary statistics for a list of values.

    Args:
        values: List of values to analyze

    Returns:
        Dict with summary statistics
    """
    if not values:
        return {
            "count": 0,
            "mean": 0.0,
            "median": 0.0,
            "min": 0.0,
            "max": 0.0,
            "std_dev": 0.0,
        }

    n = len(values)
    sorted_values = sorted(values)
    median = (
        sorted_values[n // 2]
        if n % 2 == 1
        else (sorted_values[n // 2 - 1] + sorted_values[n // 2]) / 2
    )

    return {
        "count": n,
        "mean": calculate_mean(values),
        "median": median,
        "min": sorted_values[0],
        "max": sorted_values[-1],
        "std_dev": calculate_standard_deviation(values),
    }

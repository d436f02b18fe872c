"""
Pearson correlation between price series and the cross-symbol matrix.

Series are paired by index, not by timestamp: callers supply equal-length
series covering the same window. Degenerate inputs yield 0 so the matrix
is defined for every pair.
"""

import math
from typing import Mapping
import numpy as np
from stockdash.entities import CorrelationMatrix, PriceSeries
from stockdash.analytics.statistics import PriceInput, to_price_array

NEUTRAL_CORRELATION = 0.0


def correlation(series_a: PriceInput, series_b: PriceInput) -> float:
    """
    Compute the Pearson correlation of two price series.

    Preconditions:
        - None; degenerate input returns NEUTRAL_CORRELATION

    Postconditions:
        - Result is rounded to 2 decimals, then clamped to [-1, 1]
        - correlation(a, b) == correlation(b, a)
        - Returns 0.0 if lengths differ, either series has fewer than 2
          points, or either series is constant

    Args:
        series_a: First price series
        series_b: Second price series

    Returns:
        Correlation coefficient in [-1, 1]
    """
    a = to_price_array(series_a)
    b = to_price_array(series_b)

    if len(a) != len(b) or len(a) < 2:
        return NEUTRAL_CORRELATION

    # All-identical prices: the float mean may not reproduce the value exactly
    if np.ptp(a) == 0 or np.ptp(b) == 0:
        return NEUTRAL_CORRELATION

    n = len(a)
    diff_a = a - a.sum() / n
    diff_b = b - b.sum() / n

    covariance = np.sum(diff_a * diff_b) / n
    std_a = math.sqrt(np.sum(diff_a * diff_a) / n)
    std_b = math.sqrt(np.sum(diff_b * diff_b) / n)

    if std_a == 0 or std_b == 0:
        return NEUTRAL_CORRELATION

    coefficient = float(covariance / (std_a * std_b))
    if not math.isfinite(coefficient):
        return NEUTRAL_CORRELATION

    return max(-1.0, min(1.0, round(coefficient, 2)))


def build_correlation_matrix(series_by_symbol: Mapping[str, PriceSeries]) -> CorrelationMatrix:
    """
    Assemble the correlation matrix for a set of series.

    Each series is used for both its row and its column, so the result is
    symmetric. Diagonal entries are 1.0 without computing anything.

    Args:
        series_by_symbol: Ordered mapping from symbol to its series

    Returns:
        CorrelationMatrix in the mapping's iteration order
    """
    symbols = list(series_by_symbol)
    n = len(symbols)
    data = [[1.0] * n for _ in range(n)]

    for i in range(n):
        for j in range(i + 1, n):
            value = correlation(series_by_symbol[symbols[i]], series_by_symbol[symbols[j]])
            data[i][j] = value
            data[j][i] = value

    return CorrelationMatrix(symbols=tuple(symbols), data=data)


def correlation_strength(value: float) -> str:
    """
    Describe a correlation coefficient in words.

    Examples:
        >>> correlation_strength(0.85)
        'Strong positive correlation'
        >>> correlation_strength(0.1)
        'Little to no correlation'
        >>> correlation_strength(-0.75)
        'Strong negative correlation'
    """
    if value > 0.7:
        label = "Strong positive"
    elif value > 0.5:
        label = "Moderate positive"
    elif value > 0.3:
        label = "Weak positive"
    elif value > -0.3:
        label = "Little to no"
    elif value > -0.5:
        label = "Weak negative"
    elif value > -0.7:
        label = "Moderate negative"
    else:
        label = "Strong negative"
    return f"{label} correlation"

"""
Descriptive statistics over price series.

This module provides pure functions for the average price, the
population standard deviation, and the summary shown next to a price
chart. All results are rounded to 2 decimals.
"""

from collections.abc import Mapping
from typing import Optional, Sequence, Union
import numpy as np
from stockdash.entities import PricePoint, PriceSeries, SeriesStatistics
from stockdash.errors import EmptySeriesError

PriceInput = Union[PriceSeries, Sequence[PricePoint], Sequence[float]]


def to_price_array(series: PriceInput) -> np.ndarray:
    """
    Extract prices from any supported series representation.

    Accepts a PriceSeries, a sequence of PricePoint objects, a sequence of
    {"price": ...} mappings, or a sequence of numbers.

    Returns:
        1-D float array of prices, oldest first
    """
    if isinstance(series, PriceSeries):
        return series.prices

    values = []
    for item in series:
        if isinstance(item, PricePoint):
            values.append(item.price)
        elif isinstance(item, Mapping):
            values.append(float(item["price"]))
        else:
            values.append(float(item))
    return np.array(values, dtype=float)


def average_price(series: PriceInput) -> float:
    """
    Compute the arithmetic mean price.

    Preconditions:
        - series has at least one point

    Postconditions:
        - Result is rounded to 2 decimals

    Args:
        series: Price series

    Returns:
        Mean price

    Raises:
        EmptySeriesError: If the series has no points
    """
    prices = to_price_array(series)
    if prices.size == 0:
        raise EmptySeriesError("Cannot compute average price of an empty series")
    return round(float(np.mean(prices)), 2)


def standard_deviation(series: PriceInput) -> float:
    """
    Compute the population standard deviation of prices.

    Deviations are taken from average_price(series), i.e. the mean already
    rounded to 2 decimals, and the sum of squares is divided by N (not N-1).

    Preconditions:
        - series has at least one point

    Postconditions:
        - Result is >= 0 and rounded to 2 decimals

    Args:
        series: Price series

    Returns:
        Population standard deviation

    Raises:
        EmptySeriesError: If the series has no points
    """
    prices = to_price_array(series)
    if prices.size == 0:
        raise EmptySeriesError("Cannot compute standard deviation of an empty series")

    mean = average_price(prices)
    variance = np.mean((prices - mean) ** 2)
    return round(float(np.sqrt(variance)), 2)


def series_statistics(
    series: PriceInput,
    current_price: Optional[float] = None
) -> SeriesStatistics:
    """
    Summarize a series for the statistics panel.

    Args:
        series: Price series
        current_price: Price to compare against the average (defaults to
            the last price in the series)

    Returns:
        SeriesStatistics

    Raises:
        EmptySeriesError: If the series has no points
    """
    prices = to_price_array(series)
    average = average_price(prices)
    std = standard_deviation(prices)

    latest = float(prices[-1]) if current_price is None else float(current_price)
    difference = latest - average

    if average == 0:
        volatility_pct = 0.0
        difference_pct = 0.0
    else:
        volatility_pct = round(std / average * 100, 2)
        difference_pct = round(difference / average * 100, 2)

    return SeriesStatistics(
        average=average,
        standard_deviation=std,
        volatility_percent=volatility_pct,
        latest_price=round(latest, 2),
        difference_from_average=round(difference, 2),
        difference_from_average_percent=difference_pct
    )

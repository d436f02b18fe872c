"""
Core entity classes (ADTs) for the market data engine.

These classes represent the value types handed to dashboard consumers:
symbol profiles, price points and series, snapshots, and correlation
matrices. Each enforces its representation invariants on construction.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple
import numpy as np
import pandas as pd
from stockdash.errors import UnknownSymbolError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclass(frozen=True)
class SymbolProfile:
    """
    Static simulation parameters for one synthetic instrument.

    Attributes:
        symbol: Ticker symbol (e.g., "AAPL")
        name: Human-readable name (e.g., "Apple Inc.")
        base_price: Price every random walk starts from
        volatility: Fraction of price used to scale each random step

    Representation Invariants:
        - symbol is non-empty
        - name is non-empty
        - base_price is finite and > 0
        - volatility is finite and > 0
    """
    symbol: str
    name: str
    base_price: float
    volatility: float

    def __post_init__(self):
        """Validate representation invariants."""
        if not self.symbol:
            raise ValueError("symbol cannot be empty")
        if not self.name:
            raise ValueError("name cannot be empty")
        if not (math.isfinite(self.base_price) and self.base_price > 0):
            raise ValueError(f"base_price must be positive and finite, got {self.base_price}")
        if not (math.isfinite(self.volatility) and self.volatility > 0):
            raise ValueError(f"volatility must be positive and finite, got {self.volatility}")


@dataclass(frozen=True)
class PricePoint:
    """
    A single (timestamp, price) observation.

    Attributes:
        timestamp: Local wall-clock time, whole seconds
        price: Price rounded to 2 decimals
    """
    timestamp: datetime
    price: float

    def __post_init__(self):
        if not math.isfinite(self.price):
            raise ValueError(f"price must be finite, got {self.price}")

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.strftime(TIMESTAMP_FORMAT),
            "price": self.price,
        }


class PriceSeries:
    """
    An ordered sequence of price points for one symbol, oldest first.

    Attributes:
        symbol: Optional ticker this series belongs to
        points: Tuple of PricePoint objects

    Representation Invariants:
        - timestamps are strictly increasing
    """

    def __init__(self, points: Iterable[PricePoint], symbol: Optional[str] = None):
        """
        Initialize a PriceSeries.

        Preconditions:
            - points are ordered by timestamp, with no duplicates

        Postconditions:
            - self.points is an immutable tuple

        Raises:
            ValueError: If timestamps are not strictly increasing
        """
        self._points = tuple(points)
        self._symbol = symbol
        self._check_invariants()

    @classmethod
    def from_prices(
        cls,
        prices: Iterable[float],
        start: Optional[datetime] = None,
        symbol: Optional[str] = None
    ) -> "PriceSeries":
        """
        Build a series from bare prices spaced one minute apart.

        Args:
            prices: Prices, oldest first
            start: Timestamp of the first point (defaults to 2024-01-01 09:30)
            symbol: Optional ticker

        Returns:
            PriceSeries with one point per price
        """
        if start is None:
            start = datetime(2024, 1, 1, 9, 30)
        points = [
            PricePoint(timestamp=start + timedelta(minutes=i), price=float(price))
            for i, price in enumerate(prices)
        ]
        return cls(points, symbol=symbol)

    def _check_invariants(self):
        """Check representation invariants."""
        for previous, current in zip(self._points, self._points[1:]):
            if current.timestamp <= previous.timestamp:
                raise ValueError("timestamps must be strictly increasing")

    @property
    def symbol(self) -> Optional[str]:
        return self._symbol

    @property
    def points(self) -> Tuple[PricePoint, ...]:
        return self._points

    @property
    def prices(self) -> np.ndarray:
        """Return the prices as a float array."""
        return np.array([p.price for p in self._points], dtype=float)

    @property
    def timestamps(self) -> List[datetime]:
        return [p.timestamp for p in self._points]

    def to_series(self) -> pd.Series:
        """Return the prices as a pandas Series indexed by timestamp."""
        return pd.Series(
            self.prices,
            index=pd.DatetimeIndex(self.timestamps, name="timestamp"),
            name=self._symbol or "price"
        )

    def to_dicts(self) -> List[dict]:
        return [p.to_dict() for p in self._points]

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, index: int) -> PricePoint:
        return self._points[index]

    def __repr__(self) -> str:
        """String representation."""
        symbol_str = f" ({self._symbol})" if self._symbol else ""
        return f"PriceSeries({len(self)} points{symbol_str})"


@dataclass(frozen=True)
class Snapshot:
    """
    Latest simulated quote for one symbol.

    Attributes:
        symbol: Ticker symbol
        name: Human-readable name
        price: Current price (2 decimals)
        change: Absolute change vs. base price (2 decimals)
        change_percent: Percent change vs. base price (2 decimals)
        volume: Traded volume
        market_cap: Market capitalization (2 decimals)
        timestamp: Time the snapshot was generated
    """
    symbol: str
    name: str
    price: float
    change: float
    change_percent: float
    volume: int
    market_cap: float
    timestamp: datetime

    def to_dict(self) -> dict:
        """Serialize with the dashboard's field names."""
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "volume": self.volume,
            "marketCap": self.market_cap,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class CorrelationMatrix:
    """
    Pairwise correlations across an ordered set of symbols.

    Attributes:
        symbols: Ordered symbols (row/column order)
        data: N x N correlations, data[i][j] for symbols[i] vs symbols[j]

    Representation Invariants:
        - data is square with one row per symbol
        - every value lies in [-1, 1]
        - diagonal entries are exactly 1.0
    """
    symbols: Tuple[str, ...]
    data: Tuple[Tuple[float, ...], ...]

    def __post_init__(self):
        """Validate representation invariants."""
        object.__setattr__(self, "symbols", tuple(self.symbols))
        object.__setattr__(self, "data", tuple(tuple(row) for row in self.data))

        n = len(self.symbols)
        if len(self.data) != n:
            raise ValueError(f"expected {n} rows, got {len(self.data)}")
        for i, row in enumerate(self.data):
            if len(row) != n:
                raise ValueError(f"expected {n} columns, got {len(row)}")
            for value in row:
                if not -1.0 <= value <= 1.0:
                    raise ValueError(f"correlation out of range: {value}")
            if row[i] != 1.0:
                raise ValueError(f"diagonal entry for {self.symbols[i]} must be 1.0, got {row[i]}")

    def get(self, symbol_a: str, symbol_b: str) -> float:
        """
        Look up the correlation between two symbols.

        Raises:
            UnknownSymbolError: If either symbol is not in the matrix
        """
        for symbol in (symbol_a, symbol_b):
            if symbol not in self.symbols:
                raise UnknownSymbolError(symbol)
        i = self.symbols.index(symbol_a)
        j = self.symbols.index(symbol_b)
        return self.data[i][j]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [list(row) for row in self.data],
            index=list(self.symbols),
            columns=list(self.symbols)
        )

    def to_dict(self) -> Dict[str, list]:
        return {
            "symbols": list(self.symbols),
            "data": [list(row) for row in self.data],
        }

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self) -> str:
        """String representation."""
        return f"CorrelationMatrix({len(self)}x{len(self)})"


@dataclass(frozen=True)
class SeriesStatistics:
    """
    Descriptive statistics of one price series.

    Attributes:
        average: Mean price (2 decimals)
        standard_deviation: Population standard deviation (2 decimals)
        volatility_percent: standard_deviation / average * 100
        latest_price: Most recent price in the series
        difference_from_average: latest_price - average
        difference_from_average_percent: difference relative to average, in percent
    """
    average: float
    standard_deviation: float
    volatility_percent: float
    latest_price: float
    difference_from_average: float
    difference_from_average_percent: float

    def to_dict(self) -> dict:
        return {
            "averagePrice": self.average,
            "standardDeviation": self.standard_deviation,
            "volatilityPercent": self.volatility_percent,
            "latestPrice": self.latest_price,
            "differenceFromAverage": self.difference_from_average,
            "differenceFromAveragePercent": self.difference_from_average_percent,
        }

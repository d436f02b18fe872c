"""
Synthetic market data engine.

The engine owns the symbol catalog and turns it into random-walk price
series, quote snapshots, descriptive statistics, and correlation
matrices. It keeps no state between calls beyond the read-only catalog.
"""

import logging
import numbers
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple
from stockdash.catalog import SymbolCatalog, default_catalog
from stockdash.entities import (
    CorrelationMatrix, PricePoint, PriceSeries, SeriesStatistics,
    Snapshot, SymbolProfile
)
from stockdash.random_source import NumpyRandomSource, RandomSource
from stockdash.analytics import statistics
from stockdash.analytics.correlation import build_correlation_matrix
from stockdash.analytics.correlation import correlation as pearson_correlation
from stockdash.analytics.statistics import PriceInput

logger = logging.getLogger(__name__)

MIN_VOLUME = 1_000_000
VOLUME_RANGE = 10_000_000
MIN_MARKET_CAP_MULTIPLIER = 1e9
MARKET_CAP_MULTIPLIER_RANGE = 1e9


class MarketDataEngine:
    """
    Generates synthetic prices and computes statistics over them.

    Every price step is a multiplicative random perturbation:

        price_t = price_{t-1} * (1 + (U - 0.5) * volatility)

    where U is drawn from the injected RandomSource and volatility comes
    from the symbol's profile.

    Representation Invariants:
        - catalog is non-empty and never modified
    """

    def __init__(
        self,
        catalog: Optional[SymbolCatalog] = None,
        random_source: Optional[RandomSource] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the engine.

        Args:
            catalog: Symbol catalog (defaults to the built-in 8 symbols)
            random_source: Uniform random source (defaults to unseeded numpy)
            clock: Callable returning the current local time (defaults to
                datetime.now)
        """
        self.catalog = catalog if catalog is not None else default_catalog()
        self.random_source = random_source if random_source is not None else NumpyRandomSource()
        self.clock = clock if clock is not None else datetime.now

    def list_symbols(self) -> Tuple[str, ...]:
        """Return the catalog symbols in display order."""
        return self.catalog.symbols

    def _perturb(self, price: float, volatility: float) -> float:
        """Apply one random step to a price."""
        change = (self.random_source.next_uniform() - 0.5) * volatility
        return price * (1 + change)

    def generate_series(self, symbol: str, minutes: int) -> PriceSeries:
        """
        Generate a one-minute random walk ending now.

        Preconditions:
            - symbol is in the catalog
            - minutes is a non-negative integer

        Postconditions:
            - Returns exactly minutes + 1 points, oldest first
            - Timestamps are one minute apart, the last one is now
            - Prices are rounded to 2 decimals; the walk itself carries
              the unrounded price from step to step

        Args:
            symbol: Ticker symbol
            minutes: Number of minutes of history before now

        Returns:
            PriceSeries for the symbol

        Raises:
            UnknownSymbolError: If symbol is not in the catalog
            ValueError: If minutes is negative or not an integer
        """
        profile = self.catalog.profile(symbol)
        minutes = _check_minutes(minutes)

        now = self.clock().replace(microsecond=0)
        price = profile.base_price
        points = []

        for step in range(minutes + 1):
            price = self._perturb(price, profile.volatility)
            points.append(PricePoint(
                timestamp=now - timedelta(minutes=minutes - step),
                price=round(price, 2)
            ))

        logger.debug("Generated %d points for %s", len(points), symbol)
        return PriceSeries(points, symbol=symbol)

    def _snapshot(self, profile: SymbolProfile, timestamp: datetime) -> Snapshot:
        """Draw one quote for a profile: price, then volume, then market cap."""
        price = self._perturb(profile.base_price, profile.volatility)
        change = price - profile.base_price
        change_percent = change / profile.base_price * 100

        volume = int(self.random_source.next_uniform() * VOLUME_RANGE) + MIN_VOLUME
        cap_multiplier = (
            self.random_source.next_uniform() * MARKET_CAP_MULTIPLIER_RANGE
            + MIN_MARKET_CAP_MULTIPLIER
        )

        return Snapshot(
            symbol=profile.symbol,
            name=profile.name,
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change_percent, 2),
            volume=volume,
            market_cap=round(price * cap_multiplier, 2),
            timestamp=timestamp
        )

    def snapshot(self, symbol: str) -> Snapshot:
        """
        Generate a fresh quote for one symbol.

        Raises:
            UnknownSymbolError: If symbol is not in the catalog
        """
        return self._snapshot(self.catalog.profile(symbol), self.clock())

    def snapshot_all(self) -> List[Snapshot]:
        """
        Generate a fresh quote for every symbol.

        Postconditions:
            - Exactly one Snapshot per catalog symbol, in catalog order
            - Each symbol gets its own random draws
            - Nothing is retained between calls

        Returns:
            List of Snapshot objects
        """
        timestamp = self.clock()
        snapshots = [self._snapshot(profile, timestamp) for profile in self.catalog.values()]
        logger.debug("Generated %d snapshots", len(snapshots))
        return snapshots

    def average_price(self, series: PriceInput) -> float:
        """Mean price rounded to 2 decimals; raises EmptySeriesError on no points."""
        return statistics.average_price(series)

    def standard_deviation(self, series: PriceInput) -> float:
        """Population standard deviation; raises EmptySeriesError on no points."""
        return statistics.standard_deviation(series)

    def correlation(self, series_a: PriceInput, series_b: PriceInput) -> float:
        """Pearson correlation in [-1, 1]; 0 for mismatched or degenerate series."""
        return pearson_correlation(series_a, series_b)

    def series_statistics(
        self,
        series: PriceInput,
        current_price: Optional[float] = None
    ) -> SeriesStatistics:
        return statistics.series_statistics(series, current_price=current_price)

    def generate_all_series(self, minutes: int) -> Dict[str, PriceSeries]:
        """
        Generate one independent series per symbol.

        Returns:
            Dict from symbol to series, in catalog order
        """
        return {symbol: self.generate_series(symbol, minutes) for symbol in self.catalog}

    def correlation_matrix(self, minutes: int) -> CorrelationMatrix:
        """
        Compute the correlation matrix across the whole catalog.

        Each symbol's series is generated exactly once and reused for its
        row and its column, so the matrix is symmetric.

        Preconditions:
            - minutes is a non-negative integer

        Postconditions:
            - Matrix is N x N in catalog order
            - Diagonal entries are exactly 1.0
            - data[i][j] == data[j][i]

        Args:
            minutes: Window length passed to generate_series

        Returns:
            CorrelationMatrix
        """
        series_by_symbol = self.generate_all_series(minutes)
        matrix = build_correlation_matrix(series_by_symbol)
        logger.debug("Built %dx%d correlation matrix over %d minutes", len(matrix), len(matrix), minutes)
        return matrix

    def symbol_statistics(self, minutes: int) -> Dict[str, SeriesStatistics]:
        """
        Compute series statistics for every symbol over a fresh window.

        Returns:
            Dict from symbol to SeriesStatistics, in catalog order
        """
        return {
            symbol: statistics.series_statistics(series)
            for symbol, series in self.generate_all_series(minutes).items()
        }

    def __repr__(self) -> str:
        return f"MarketDataEngine({len(self.catalog)} symbols)"


def _check_minutes(minutes: int) -> int:
    """Validate a window length and return it as an int."""
    if isinstance(minutes, bool) or not isinstance(minutes, numbers.Integral):
        raise ValueError(f"minutes must be an integer, got {minutes!r}")
    if minutes < 0:
        raise ValueError(f"minutes must be non-negative, got {minutes}")
    return int(minutes)

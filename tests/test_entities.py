"""
Tests for the entity ADTs.

Tests cover:
- SymbolProfile invariants
- PriceSeries ordering and conversions
- Snapshot serialization
- CorrelationMatrix shape and range checks
"""

import pytest
import pandas as pd
import numpy as np
from datetime import datetime, timedelta
from stockdash.entities import (
    CorrelationMatrix, PricePoint, PriceSeries, Snapshot, SymbolProfile
)
from stockdash.errors import UnknownSymbolError


class TestSymbolProfile:
    """Tests for SymbolProfile."""

    def test_valid_profile(self):
        """Test creating a valid profile."""
        profile = SymbolProfile("AAPL", "Apple Inc.", 187.32, 0.015)
        assert profile.symbol == "AAPL"
        assert profile.base_price == 187.32

    def test_empty_symbol_raises(self):
        with pytest.raises(ValueError, match="symbol cannot be empty"):
            SymbolProfile("", "Apple Inc.", 187.32, 0.015)

    def test_non_positive_base_price_raises(self):
        with pytest.raises(ValueError, match="base_price must be positive"):
            SymbolProfile("AAPL", "Apple Inc.", 0.0, 0.015)

    def test_non_positive_volatility_raises(self):
        with pytest.raises(ValueError, match="volatility must be positive"):
            SymbolProfile("AAPL", "Apple Inc.", 187.32, -0.01)

    def test_infinite_values_raise(self):
        """Test that infinite prices and volatilities are rejected."""
        with pytest.raises(ValueError, match="finite"):
            SymbolProfile("AAPL", "Apple Inc.", float("inf"), 0.015)
        with pytest.raises(ValueError, match="finite"):
            SymbolProfile("AAPL", "Apple Inc.", 187.32, float("inf"))

    def test_profile_is_immutable(self):
        """Test that profiles cannot be modified."""
        profile = SymbolProfile("AAPL", "Apple Inc.", 187.32, 0.015)
        with pytest.raises(Exception):
            profile.base_price = 1.0


class TestPriceSeries:
    """Tests for PriceSeries ADT."""

    def test_from_prices_spacing(self):
        """Test that from_prices spaces points one minute apart."""
        start = datetime(2024, 1, 2, 9, 30)
        series = PriceSeries.from_prices([10, 11, 12], start=start, symbol="AAPL")

        assert len(series) == 3
        assert series.symbol == "AAPL"
        assert series.timestamps == [start + timedelta(minutes=i) for i in range(3)]
        np.testing.assert_array_equal(series.prices, [10.0, 11.0, 12.0])

    def test_empty_series_allowed(self):
        """Test that an empty series can be built."""
        series = PriceSeries([])
        assert len(series) == 0
        assert series.prices.size == 0

    def test_unordered_timestamps_raise(self):
        """Test that out-of-order timestamps are rejected."""
        t = datetime(2024, 1, 2, 9, 30)
        points = [PricePoint(t, 10.0), PricePoint(t - timedelta(minutes=1), 11.0)]
        with pytest.raises(ValueError, match="strictly increasing"):
            PriceSeries(points)

    def test_duplicate_timestamps_raise(self):
        t = datetime(2024, 1, 2, 9, 30)
        with pytest.raises(ValueError, match="strictly increasing"):
            PriceSeries([PricePoint(t, 10.0), PricePoint(t, 11.0)])

    def test_nan_price_raises(self):
        with pytest.raises(ValueError, match="finite"):
            PricePoint(datetime(2024, 1, 2), float("nan"))

    def test_to_series(self):
        """Test conversion to a pandas Series."""
        series = PriceSeries.from_prices([10, 11], symbol="MSFT")
        pd_series = series.to_series()

        assert isinstance(pd_series, pd.Series)
        assert isinstance(pd_series.index, pd.DatetimeIndex)
        assert pd_series.name == "MSFT"
        assert list(pd_series.values) == [10.0, 11.0]

    def test_to_dicts_timestamp_format(self):
        """Test that timestamps serialize with second precision."""
        series = PriceSeries.from_prices([10.5], start=datetime(2024, 1, 2, 9, 30, 15))
        assert series.to_dicts() == [{"timestamp": "2024-01-02T09:30:15", "price": 10.5}]

    def test_repr(self):
        series = PriceSeries.from_prices([1, 2, 3], symbol="TSLA")
        assert repr(series) == "PriceSeries(3 points (TSLA))"


class TestSnapshot:
    """Tests for Snapshot."""

    def test_to_dict_keys(self):
        """Test that snapshots serialize with dashboard field names."""
        snapshot = Snapshot(
            symbol="AAPL", name="Apple Inc.", price=188.0, change=0.68,
            change_percent=0.36, volume=5_000_000, market_cap=2.5e11,
            timestamp=datetime(2024, 1, 2, 9, 30)
        )
        data = snapshot.to_dict()

        assert data["changePercent"] == 0.36
        assert data["marketCap"] == 2.5e11
        assert data["volume"] == 5_000_000
        assert data["timestamp"] == "2024-01-02T09:30:00"

    def test_to_dict_drops_microseconds(self):
        """Test that snapshot timestamps serialize with second precision."""
        snapshot = Snapshot(
            symbol="AAPL", name="Apple Inc.", price=188.0, change=0.68,
            change_percent=0.36, volume=5_000_000, market_cap=2.5e11,
            timestamp=datetime(2024, 3, 15, 10, 30, 45, 123456)
        )
        assert snapshot.to_dict()["timestamp"] == "2024-03-15T10:30:45"


class TestCorrelationMatrix:
    """Tests for CorrelationMatrix."""

    def test_valid_matrix(self):
        matrix = CorrelationMatrix(("A", "B"), [[1.0, 0.5], [0.5, 1.0]])
        assert len(matrix) == 2
        assert matrix.get("A", "B") == 0.5
        assert isinstance(matrix.data, tuple)

    def test_wrong_row_count_raises(self):
        with pytest.raises(ValueError, match="rows"):
            CorrelationMatrix(("A", "B"), [[1.0, 0.5]])

    def test_wrong_column_count_raises(self):
        with pytest.raises(ValueError, match="columns"):
            CorrelationMatrix(("A", "B"), [[1.0], [0.5, 1.0]])

    def test_out_of_range_raises(self):
        with pytest.raises(ValueError, match="out of range"):
            CorrelationMatrix(("A", "B"), [[1.0, 1.5], [1.5, 1.0]])

    def test_diagonal_must_be_one(self):
        """Test that a non-unit diagonal is rejected."""
        with pytest.raises(ValueError, match="diagonal"):
            CorrelationMatrix(("A", "B"), [[0.2, 0.5], [-0.9, 0.0]])

    def test_get_unknown_symbol_raises(self):
        matrix = CorrelationMatrix(("A", "B"), [[1.0, 0.5], [0.5, 1.0]])
        with pytest.raises(UnknownSymbolError):
            matrix.get("A", "Z")

    def test_to_frame(self):
        """Test conversion to a labelled DataFrame."""
        matrix = CorrelationMatrix(("A", "B"), [[1.0, -0.2], [-0.2, 1.0]])
        frame = matrix.to_frame()

        assert list(frame.index) == ["A", "B"]
        assert list(frame.columns) == ["A", "B"]
        assert frame.loc["A", "B"] == -0.2

    def test_to_dict(self):
        matrix = CorrelationMatrix(("A", "B"), [[1.0, 0.3], [0.3, 1.0]])
        assert matrix.to_dict() == {"symbols": ["A", "B"], "data": [[1.0, 0.3], [0.3, 1.0]]}

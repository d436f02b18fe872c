"""
Tests for report generation.

Tests cover:
- Markdown structure
- Heatmap asset creation
- Sections with no data
"""

import pytest
from pathlib import Path
from stockdash.engine import MarketDataEngine
from stockdash.entities import CorrelationMatrix
from stockdash.random_source import NumpyRandomSource
from stockdash.reporting.report import DashboardReport, format_market_cap


@pytest.fixture
def engine(fixed_clock):
    return MarketDataEngine(random_source=NumpyRandomSource(5), clock=fixed_clock)


class TestDashboardReport:
    """Tests for DashboardReport."""

    def test_report_sections(self, engine, tmp_path):
        """Test that a full report has every section and a heatmap."""
        report = DashboardReport(output_dir=str(tmp_path))
        path = report.generate_report(
            snapshots=engine.snapshot_all(),
            matrix=engine.correlation_matrix(30),
            statistics=engine.symbol_statistics(30),
            minutes=30
        )

        content = Path(path).read_text()
        assert content.startswith("# Stock Dashboard Report")
        assert "## Stocks" in content
        assert "## Window Statistics" in content
        assert "## Correlation Matrix" in content
        assert "**Strongest pair:**" in content
        assert "| **BRK.A** |" in content
        assert content.rstrip().endswith("*Report generated by stockdash*")

        assets = list((tmp_path / "assets").glob("correlation_*.png"))
        assert len(assets) == 1
        assert f"assets/{assets[0].name}" in content

    def test_report_without_data(self, tmp_path):
        report = DashboardReport(output_dir=str(tmp_path))
        path = report.generate_report(snapshots=[], matrix=None, statistics={}, minutes=5)

        content = Path(path).read_text()
        assert "*No quotes available.*" in content
        assert "*No statistics available.*" in content
        assert "*No correlation data available.*" in content
        assert not list((tmp_path / "assets").glob("*.png"))

    def test_single_symbol_matrix_has_no_pair(self, tmp_path):
        report = DashboardReport(output_dir=str(tmp_path))
        matrix = CorrelationMatrix(("AAPL",), [[1.0]])
        content = Path(report.generate_report([], matrix, {}, 30)).read_text()
        assert "Strongest pair" not in content

    def test_output_dir_created(self, tmp_path):
        target = tmp_path / "nested" / "reports"
        DashboardReport(output_dir=str(target))
        assert target.is_dir()


class TestFormatMarketCap:
    """Tests for format_market_cap."""

    @pytest.mark.parametrize("value,expected", [
        (2.5e12, "$2.50T"),
        (3.1e9, "$3.10B"),
        (450e6, "$450.00M"),
        (999.0, "$999.00"),
    ])
    def test_suffixes(self, value, expected):
        assert format_market_cap(value) == expected

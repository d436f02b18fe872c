"""
Markdown report generation.

This module writes a point-in-time dashboard report: the quote table,
per-symbol window statistics, and the correlation matrix with its
heatmap.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
from stockdash.analytics.correlation import correlation_strength
from stockdash.entities import CorrelationMatrix, SeriesStatistics, Snapshot
from stockdash.reporting.charts import create_report_assets_dir, plot_correlation_heatmap


def format_market_cap(market_cap: float) -> str:
    """
    Format a market cap with a T/B/M suffix.

    Examples:
        >>> format_market_cap(2.5e12)
        '$2.50T'
        >>> format_market_cap(3.1e9)
        '$3.10B'
    """
    if market_cap >= 1e12:
        return f"${market_cap / 1e12:.2f}T"
    if market_cap >= 1e9:
        return f"${market_cap / 1e9:.2f}B"
    if market_cap >= 1e6:
        return f"${market_cap / 1e6:.2f}M"
    return f"${market_cap:.2f}"


class DashboardReport:
    """
    Generates markdown dashboard reports.

    This class assembles snapshots, window statistics, and the correlation
    matrix into one markdown file with a heatmap chart.
    """

    def __init__(self, output_dir: str = "reports"):
        """
        Initialize report generator.

        Args:
            output_dir: Directory to save reports
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_report(
        self,
        snapshots: List[Snapshot],
        matrix: Optional[CorrelationMatrix],
        statistics: Dict[str, SeriesStatistics],
        minutes: int
    ) -> str:
        """
        Generate complete markdown report.

        Args:
            snapshots: Latest quotes, in display order
            matrix: Correlation matrix (None to skip the section)
            statistics: Window statistics keyed by symbol
            minutes: Window length the statistics and matrix cover

        Returns:
            Path to generated report file
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = self.output_dir / f"dashboard_{timestamp}.md"

        assets_dir = create_report_assets_dir(self.output_dir)

        content = self._generate_header(minutes)
        content += self._generate_stock_section(snapshots)
        content += self._generate_statistics_section(statistics, minutes)
        content += self._generate_correlation_section(matrix, assets_dir, timestamp)
        content += "*Report generated by stockdash*\n"

        with open(report_path, "w") as f:
            f.write(content)

        return str(report_path)

    def _generate_header(self, minutes: int) -> str:
        """Generate report header."""
        generated = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"""# Stock Dashboard Report

**Window:** last {minutes} minutes
**Generated:** {generated}

> Prices are simulated random walks, not market data.

---

"""

    def _generate_stock_section(self, snapshots: List[Snapshot]) -> str:
        """Generate quote table."""
        section = "## Stocks\n\n"

        if not snapshots:
            return section + "*No quotes available.*\n\n---\n\n"

        section += "| Symbol | Name | Price | Change | Change % | Volume | Market Cap |\n"
        section += "|--------|------|-------|--------|----------|--------|------------|\n"
        for s in snapshots:
            sign = "+" if s.change >= 0 else ""
            section += (
                f"| {s.symbol} | {s.name} | {s.price:.2f} | {sign}{s.change:.2f} "
                f"| {sign}{s.change_percent:.2f}% | {s.volume / 1e6:.1f}M "
                f"| {format_market_cap(s.market_cap)} |\n"
            )

        return section + "\n---\n\n"

    def _generate_statistics_section(
        self,
        statistics: Dict[str, SeriesStatistics],
        minutes: int
    ) -> str:
        """Generate per-symbol statistics table."""
        section = "## Window Statistics\n\n"

        if not statistics:
            return section + "*No statistics available.*\n\n---\n\n"

        section += f"Average and population standard deviation over the last {minutes} minutes.\n\n"
        section += "| Symbol | Average | Std Dev | Volatility | vs Average |\n"
        section += "|--------|---------|---------|------------|------------|\n"
        for symbol, stats in statistics.items():
            sign = "+" if stats.difference_from_average >= 0 else ""
            section += (
                f"| {symbol} | {stats.average:.2f} | {stats.standard_deviation:.2f} "
                f"| {stats.volatility_percent:.2f}% "
                f"| {sign}{stats.difference_from_average:.2f} ({stats.difference_from_average_percent:.2f}%) |\n"
            )

        return section + "\n---\n\n"

    def _generate_correlation_section(
        self,
        matrix: Optional[CorrelationMatrix],
        assets_dir: Path,
        timestamp: str
    ) -> str:
        """Generate correlation matrix section."""
        section = "## Correlation Matrix\n\n"

        if matrix is None:
            return section + "*No correlation data available.*\n\n---\n\n"

        section += "> Correlation values range from -1 (opposite moves) to 1 (moves together).\n\n"

        section += "| | " + " | ".join(matrix.symbols) + " |\n"
        section += "|---" * (len(matrix) + 1) + "|\n"
        for symbol, row in zip(matrix.symbols, matrix.data):
            section += f"| **{symbol}** | " + " | ".join(f"{v:.2f}" for v in row) + " |\n"
        section += "\n"

        pairs = [
            (matrix.data[i][j], matrix.symbols[i], matrix.symbols[j])
            for i in range(len(matrix))
            for j in range(i + 1, len(matrix))
        ]
        if pairs:
            strongest = max(pairs, key=lambda p: abs(p[0]))
            section += (
                f"**Strongest pair:** {strongest[1]}-{strongest[2]} "
                f"({strongest[0]:.2f}, {correlation_strength(strongest[0]).lower()})\n\n"
            )

        chart_name = f"correlation_{timestamp}.png"
        plot_correlation_heatmap(matrix, str(assets_dir / chart_name))
        section += f"![Correlation Heatmap](assets/{chart_name})\n\n"

        return section + "---\n\n"

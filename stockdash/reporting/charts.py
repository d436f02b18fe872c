"""
Chart generation for dashboard reports.

This module creates matplotlib charts for price histories and the
cross-symbol correlation heatmap.
"""

from pathlib import Path
from typing import BinaryIO, Optional, Union
import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap
from stockdash.entities import CorrelationMatrix, PriceSeries

# Red for inverse movement, grey for none, green for co-movement
CORRELATION_CMAP = LinearSegmentedColormap.from_list(
    "correlation", ["#dc2626", "#fb923c", "#e5e7eb", "#4ade80", "#16a34a"]
)


def plot_price_history(
    series: PriceSeries,
    average: Optional[float],
    symbol: str,
    save_path: str
) -> None:
    """
    Plot a price history with the window average as a reference line.

    Args:
        series: Price series to plot
        average: Average price for the reference line (None to omit)
        symbol: Ticker for the title
        save_path: Path to save chart
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    prices = series.to_series()
    ax.plot(prices.index, prices.values, label=symbol, linewidth=2, color="#3b82f6")

    if average is not None:
        ax.axhline(
            y=average, color="gray", linestyle="--", alpha=0.7,
            label=f"Average ${average:.2f}"
        )

    ax.set_xlabel("Time")
    ax.set_ylabel("Price ($)")
    ax.set_title(f"{symbol} Price History ({len(series)} points)")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.autofmt_xdate()

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


def plot_correlation_heatmap(matrix: CorrelationMatrix, save_path: Union[str, BinaryIO]) -> None:
    """
    Plot the correlation matrix as an annotated heatmap.

    Args:
        matrix: CorrelationMatrix to plot
        save_path: Path or binary file object to write the PNG to
    """
    frame = matrix.to_frame()
    n = len(matrix)

    fig, ax = plt.subplots(figsize=(max(6, n * 0.9), max(5, n * 0.8)))
    image = ax.imshow(frame.values, cmap=CORRELATION_CMAP, vmin=-1, vmax=1)

    ax.set_xticks(range(n))
    ax.set_yticks(range(n))
    ax.set_xticklabels(frame.columns, rotation=45, ha="right")
    ax.set_yticklabels(frame.index)

    for i in range(n):
        for j in range(n):
            value = frame.iat[i, j]
            ax.text(
                j, i, f"{value:.2f}", ha="center", va="center", fontsize=8,
                color="white" if abs(value) > 0.7 else "black"
            )

    fig.colorbar(image, ax=ax, label="Correlation")
    ax.set_title("Stock Price Correlation")

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight", format="png")
    plt.close(fig)


def create_report_assets_dir(report_dir: Path) -> Path:
    """
    Create assets directory for report charts.

    Args:
        report_dir: Report directory path

    Returns:
        Path to assets directory
    """
    assets_dir = report_dir / "assets"
    assets_dir.mkdir(parents=True, exist_ok=True)
    return assets_dir

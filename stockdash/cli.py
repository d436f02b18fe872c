"""
Command-line interface for the dashboard engine.

This module provides CLI commands for listing quotes, generating price
histories, computing the correlation matrix, polling snapshots, writing
reports, and serving the web API.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Tuple

from stockdash.analytics.correlation import correlation_strength
from stockdash.catalog import load_catalog
from stockdash.config import Settings, load_settings
from stockdash.engine import MarketDataEngine
from stockdash.entities import Snapshot
from stockdash.errors import EngineError
from stockdash.random_source import NumpyRandomSource
from stockdash.reporting.charts import plot_correlation_heatmap, plot_price_history
from stockdash.reporting.report import DashboardReport, format_market_cap
from stockdash.service import MarketDataService, SnapshotPoller

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_settings(args) -> Settings:
    """Load settings from --config, or use the defaults."""
    if args.config:
        return load_settings(args.config)
    return Settings()


def build_engine(args, settings: Settings) -> MarketDataEngine:
    """Build an engine from --catalog / settings and --seed."""
    catalog_path = args.catalog or settings.catalog_path
    catalog = load_catalog(catalog_path) if catalog_path else None
    return MarketDataEngine(catalog=catalog, random_source=NumpyRandomSource(args.seed))


def resolve_minutes(args, settings: Settings) -> int:
    if args.minutes is None:
        return settings.default_minutes
    return settings.validate_minutes(args.minutes)


def print_snapshots(snapshots: List[Snapshot]) -> None:
    """Print a quote table."""
    print(f"{'Symbol':<8}{'Price':>14}{'Change':>12}{'Change %':>10}{'Volume':>10}{'Mkt Cap':>12}")
    for s in snapshots:
        print(
            f"{s.symbol:<8}{s.price:>14,.2f}{s.change:>+12.2f}{s.change_percent:>+9.2f}%"
            f"{s.volume / 1e6:>9.1f}M{format_market_cap(s.market_cap):>12}"
        )


def symbols_command(args, engine: MarketDataEngine, settings: Settings):
    """List catalog symbols."""
    for symbol in engine.list_symbols():
        profile = engine.catalog.profile(symbol)
        print(f"{symbol:<8}{profile.name:<28}base={profile.base_price:,.2f}  vol={profile.volatility}")


def snapshot_command(args, engine: MarketDataEngine, settings: Settings):
    """Print one snapshot of every symbol."""
    print_snapshots(engine.snapshot_all())


def history_command(args, engine: MarketDataEngine, settings: Settings):
    """Print a price history and its statistics."""
    symbol = args.symbol.strip().upper()
    minutes = resolve_minutes(args, settings)
    series = engine.generate_series(symbol, minutes)
    stats = engine.series_statistics(series)

    print(f"{symbol} - last {minutes} minutes")
    for point in series:
        print(f"  {point.timestamp:%Y-%m-%d %H:%M:%S}  {point.price:>14,.2f}")

    print(f"\n  Average:            {stats.average:,.2f}")
    print(f"  Standard deviation: {stats.standard_deviation:,.2f} (volatility {stats.volatility_percent:.2f}%)")
    print(f"  Latest vs average:  {stats.difference_from_average:+,.2f} ({stats.difference_from_average_percent:+.2f}%)")

    if args.chart:
        plot_price_history(series, stats.average, symbol, args.chart)
        print(f"\n✓ Chart saved to: {args.chart}")


def parse_pair(pair: str) -> Tuple[str, str]:
    """Split "AAPL,MSFT" into two upper-cased symbols."""
    parts = [s.strip().upper() for s in pair.split(",")]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"--pair expects two comma-separated symbols (e.g. AAPL,MSFT), got {pair!r}")
    return parts[0], parts[1]


def correlation_command(args, engine: MarketDataEngine, settings: Settings):
    """Print the correlation matrix."""
    minutes = resolve_minutes(args, settings)
    pair = parse_pair(args.pair) if args.pair else None
    matrix = engine.correlation_matrix(minutes)

    print(f"Correlation over the last {minutes} minutes\n")
    print(" " * 8 + "".join(f"{s:>8}" for s in matrix.symbols))
    for symbol, row in zip(matrix.symbols, matrix.data):
        print(f"{symbol:<8}" + "".join(f"{v:>8.2f}" for v in row))

    if pair:
        a, b = pair
        value = matrix.get(a, b)
        print(f"\n{a}-{b}: {value:.2f} ({correlation_strength(value)})")

    if args.heatmap:
        plot_correlation_heatmap(matrix, args.heatmap)
        print(f"\n✓ Heatmap saved to: {args.heatmap}")


def watch_command(args, engine: MarketDataEngine, settings: Settings):
    """Poll snapshots on an interval and print each refresh."""
    service = MarketDataService(engine, settings.without_latency())
    interval = args.interval if args.interval is not None else settings.refresh_seconds

    def on_update(snapshots: List[Snapshot]) -> None:
        print(f"\n--- {snapshots[0].timestamp:%H:%M:%S} ---" if snapshots else "\n---")
        print_snapshots(snapshots)

    poller = SnapshotPoller(service, interval=interval, on_update=on_update)
    try:
        asyncio.run(poller.run(iterations=args.count))
    except KeyboardInterrupt:
        print("\nStopped.")


def report_command(args, engine: MarketDataEngine, settings: Settings):
    """Write a markdown dashboard report."""
    minutes = resolve_minutes(args, settings)
    print(f"Generating dashboard report ({minutes} minute window)...")

    report = DashboardReport(output_dir=args.output_dir)
    report_path = report.generate_report(
        snapshots=engine.snapshot_all(),
        matrix=engine.correlation_matrix(minutes),
        statistics=engine.symbol_statistics(minutes),
        minutes=minutes
    )

    print(f"\n✓ Report saved to: {report_path}")


def serve_command(args, engine: MarketDataEngine, settings: Settings):
    """Serve the web API with uvicorn."""
    import uvicorn
    from stockdash.web import create_app

    uvicorn.run(create_app(engine, settings), host=args.host, port=args.port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Synthetic Stock Dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--config", help="Settings YAML file")
    parser.add_argument("--catalog", help="Symbol catalog YAML file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: unseeded)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("symbols", help="List catalog symbols")
    subparsers.add_parser("snapshot", help="Print current quotes")

    history_parser = subparsers.add_parser("history", help="Print a price history")
    history_parser.add_argument("symbol", help="Ticker symbol")
    history_parser.add_argument("--minutes", type=int, default=None, help="Window length (5-60, step 5)")
    history_parser.add_argument("--chart", help="Save a price chart PNG to this path")

    corr_parser = subparsers.add_parser("correlation", help="Print the correlation matrix")
    corr_parser.add_argument("--minutes", type=int, default=None, help="Window length (5-60, step 5)")
    corr_parser.add_argument("--pair", help="Comma-separated pair to describe (e.g. AAPL,MSFT)")
    corr_parser.add_argument("--heatmap", help="Save a heatmap PNG to this path")

    watch_parser = subparsers.add_parser("watch", help="Refresh quotes on an interval")
    watch_parser.add_argument("--interval", type=float, default=None, help="Seconds between refreshes")
    watch_parser.add_argument("--count", type=int, default=None, help="Stop after this many refreshes")

    report_parser = subparsers.add_parser("report", help="Write a markdown dashboard report")
    report_parser.add_argument("--minutes", type=int, default=None, help="Window length (5-60, step 5)")
    report_parser.add_argument("--output-dir", default="reports", help="Report directory")

    serve_parser = subparsers.add_parser("serve", help="Serve the web API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    return parser


COMMANDS = {
    "symbols": symbols_command,
    "snapshot": snapshot_command,
    "history": history_command,
    "correlation": correlation_command,
    "watch": watch_command,
    "report": report_command,
    "serve": serve_command,
}


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    try:
        settings = build_settings(args)
        engine = build_engine(args, settings)
        command(args, engine, settings)
    except (EngineError, ValueError) as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

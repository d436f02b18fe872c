"""
FastAPI web interface for the dashboard.

This module exposes the engine as a JSON API for the dashboard front end
and renders a minimal HTML overview. Calls go through MarketDataService,
so configured latencies apply here.
"""

import io
import logging
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, Response
from jinja2 import Environment, FileSystemLoader, select_autoescape
from stockdash.analytics.correlation import correlation_strength
from stockdash.catalog import load_catalog
from stockdash.config import Settings
from stockdash.engine import MarketDataEngine
from stockdash.errors import UnknownSymbolError
from stockdash.reporting.charts import plot_correlation_heatmap
from stockdash.service import MarketDataService

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

template_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"])
)


def create_app(
    engine: Optional[MarketDataEngine] = None,
    settings: Optional[Settings] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        engine: Engine to serve (built from settings.catalog_path or the
            built-in catalog when None)
        settings: Dashboard settings (defaults to Settings())

    Returns:
        Configured FastAPI app
    """
    settings = settings if settings is not None else Settings()
    if engine is None:
        catalog = load_catalog(settings.catalog_path) if settings.catalog_path else None
        engine = MarketDataEngine(catalog=catalog)

    service = MarketDataService(engine, settings)
    app = FastAPI(title="Stock Dashboard")
    app.state.service = service

    def resolve_minutes(minutes: Optional[int]) -> int:
        if minutes is None:
            return settings.default_minutes
        try:
            return settings.validate_minutes(minutes)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    def check_symbol(symbol: str) -> str:
        symbol = symbol.strip().upper()
        if symbol not in engine.catalog:
            raise HTTPException(status_code=404, detail=str(UnknownSymbolError(symbol)))
        return symbol

    @app.get("/", response_class=HTMLResponse)
    async def home(minutes: Optional[int] = Query(None)):
        """Overview page: quotes and correlation matrix."""
        window = resolve_minutes(minutes)
        snapshots = await service.get_stocks()
        matrix = await service.get_correlation_matrix(window)

        template = template_env.get_template("index.html")
        return HTMLResponse(template.render(
            snapshots=snapshots,
            matrix=matrix,
            minutes=window,
            strength=correlation_strength
        ))

    @app.get("/api/symbols")
    async def list_symbols():
        """List catalog symbols in display order."""
        return {"symbols": list(engine.list_symbols())}

    @app.get("/api/stocks")
    async def get_stocks():
        """Fresh snapshot for every symbol."""
        snapshots = await service.get_stocks()
        return [s.to_dict() for s in snapshots]

    @app.get("/api/stocks/{symbol}/history")
    async def get_history(symbol: str, minutes: Optional[int] = Query(None)):
        """Price history with its average and standard deviation."""
        symbol = check_symbol(symbol)
        window = resolve_minutes(minutes)
        series = await service.get_stock_history(symbol, window)
        return {
            "symbol": symbol,
            "minutes": window,
            "points": series.to_dicts(),
            "averagePrice": engine.average_price(series),
            "standardDeviation": engine.standard_deviation(series),
        }

    @app.get("/api/stocks/{symbol}/stats")
    async def get_stats(symbol: str, minutes: Optional[int] = Query(None)):
        """Latest quote compared against the window statistics."""
        symbol = check_symbol(symbol)
        window = resolve_minutes(minutes)
        series = await service.get_stock_history(symbol, window)
        snapshot = engine.snapshot(symbol)
        stats = engine.series_statistics(series, current_price=snapshot.price)
        return {
            "stock": snapshot.to_dict(),
            "minutes": window,
            "statistics": stats.to_dict(),
        }

    @app.get("/api/correlation")
    async def get_correlation(minutes: Optional[int] = Query(None)):
        """Correlation matrix plus per-symbol averages and deviations."""
        window = resolve_minutes(minutes)
        matrix = await service.get_correlation_matrix(window)
        stats = await service.get_symbol_statistics(window)
        payload = matrix.to_dict()
        payload["minutes"] = window
        payload["averages"] = {s: v.average for s, v in stats.items()}
        payload["standardDeviations"] = {s: v.standard_deviation for s, v in stats.items()}
        return payload

    @app.get("/api/correlation/heatmap.png")
    async def get_heatmap(minutes: Optional[int] = Query(None)):
        """Correlation heatmap as a PNG image."""
        window = resolve_minutes(minutes)
        matrix = await service.get_correlation_matrix(window)
        buffer = io.BytesIO()
        plot_correlation_heatmap(matrix, buffer)
        return Response(content=buffer.getvalue(), media_type="image/png")

    logger.info("Dashboard app ready with %d symbols", len(engine.catalog))
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)

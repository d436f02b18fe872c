"""
Async access to the engine with simulated network latency and polling.

The engine itself is synchronous. This module plays the role of a remote
market data API: each call waits for a configurable round-trip delay
before returning, and SnapshotPoller refreshes quotes on a fixed cadence.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union
from stockdash.config import Settings
from stockdash.engine import MarketDataEngine
from stockdash.entities import CorrelationMatrix, PriceSeries, SeriesStatistics, Snapshot

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[List[Snapshot]], Union[None, Awaitable[None]]]


class MarketDataService:
    """
    Async facade over MarketDataEngine.

    Attributes:
        engine: Engine that produces the data
        settings: Source of the simulated latencies
    """

    def __init__(
        self,
        engine: Optional[MarketDataEngine] = None,
        settings: Optional[Settings] = None
    ):
        self.engine = engine if engine is not None else MarketDataEngine()
        self.settings = settings if settings is not None else Settings()

    async def _delay(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)

    async def get_stocks(self) -> List[Snapshot]:
        """Fetch a fresh snapshot for every symbol."""
        await self._delay(self.settings.stocks_latency)
        return self.engine.snapshot_all()

    async def get_stock_history(self, symbol: str, minutes: int) -> PriceSeries:
        """
        Fetch a price history for one symbol.

        Raises:
            UnknownSymbolError: If symbol is not in the catalog
        """
        await self._delay(self.settings.history_latency)
        return self.engine.generate_series(symbol, minutes)

    async def get_correlation_matrix(self, minutes: int) -> CorrelationMatrix:
        """Fetch the catalog-wide correlation matrix."""
        await self._delay(self.settings.correlation_latency)
        return self.engine.correlation_matrix(minutes)

    async def get_symbol_statistics(self, minutes: int) -> Dict[str, SeriesStatistics]:
        """Fetch average / standard deviation for every symbol."""
        await self._delay(self.settings.history_latency)
        return self.engine.symbol_statistics(minutes)


class SnapshotPoller:
    """
    Refreshes snapshots on a fixed interval.

    The first refresh happens immediately; later ones follow every
    `interval` seconds. A failed refresh is logged and polling continues.

    Representation Invariants:
        - interval > 0
    """

    def __init__(
        self,
        service: MarketDataService,
        interval: Optional[float] = None,
        on_update: Optional[SnapshotCallback] = None
    ):
        """
        Initialize the poller.

        Args:
            service: Service to poll
            interval: Seconds between refreshes (defaults to settings.refresh_seconds)
            on_update: Optional callback (sync or async) given each snapshot list
        """
        if interval is None:
            interval = service.settings.refresh_seconds
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.service = service
        self.interval = interval
        self.on_update = on_update
        self.latest: Optional[List[Snapshot]] = None
        self.refresh_count = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> Optional[List[Snapshot]]:
        """Fetch once and notify the callback. Returns None if the fetch failed."""
        try:
            snapshots = await self.service.get_stocks()
        except Exception:
            logger.warning("Snapshot refresh failed", exc_info=True)
            return None

        self.latest = snapshots
        self.refresh_count += 1

        if self.on_update is not None:
            try:
                result = self.on_update(snapshots)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.warning("Snapshot callback failed", exc_info=True)

        return snapshots

    async def run(self, iterations: Optional[int] = None) -> None:
        """
        Poll until cancelled, or for a fixed number of refreshes.

        Args:
            iterations: Number of refreshes to perform (None = forever)
        """
        count = 0
        while iterations is None or count < iterations:
            await self.refresh()
            count += 1
            if iterations is not None and count >= iterations:
                break
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        """
        Start polling in a background task on the running event loop.

        Raises:
            RuntimeError: If the poller is already running
        """
        if self.running:
            raise RuntimeError("poller is already running")
        logger.info("Starting snapshot poller (every %.1fs)", self.interval)
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Stopped snapshot poller after %d refreshes", self.refresh_count)

"""Refresh scheduler fanning out parallel fetches on a fixed interval."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from loguru import logger

from botdash.data.models import FeatureData, MarketDataPoint, Order, Position, StrategyConfig, Wallet
from botdash.data.sources import DataSource
from botdash.polling.exceptions import SchedulerError

DATA_KINDS = ("features", "position", "orders", "strategy", "wallet", "market")


@dataclass
class DashboardSnapshot:
    """
    Aggregated result of one refresh round.

    Attributes:
        features: Feature name → samples
        position: Open position or None
        orders: Recent orders
        strategy: Strategy configuration or None
        wallet: Wallet balances or None
        market: Market price series
        source_name: Name of the data source that produced the snapshot
        is_live: Whether the data came from the live API
        fetched_at: Time the round completed
    """

    features: FeatureData = field(default_factory=dict)
    position: Optional[Position] = None
    orders: List[Order] = field(default_factory=list)
    strategy: Optional[StrategyConfig] = None
    wallet: Optional[Wallet] = None
    market: List[MarketDataPoint] = field(default_factory=list)
    source_name: str = ""
    is_live: bool = False
    fetched_at: datetime = field(default_factory=datetime.now)


class RefreshScheduler:
    """
    Polls a data source on a fixed interval.

    Each round runs one fetch per data kind concurrently inside an
    asyncio.TaskGroup and waits for all of them before publishing a
    DashboardSnapshot. A single background task drives the rounds;
    stop() cancels it together with any round in flight.

    Args:
        source: Data source to poll
        interval_seconds: Seconds between the end of one round and the next
        on_snapshot: Optional callback invoked with every new snapshot

    Example:
        >>> scheduler = RefreshScheduler(source, interval_seconds=10)
        >>> snapshot = await scheduler.refresh_now()
        >>> scheduler.start()
        >>> ...
        >>> await scheduler.stop()
    """

    def __init__(
        self,
        source: DataSource,
        interval_seconds: float = 10.0,
        on_snapshot: Optional[Callable[[DashboardSnapshot], None]] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise SchedulerError(f"interval_seconds must be positive, got {interval_seconds}")

        self.source = source
        self.interval_seconds = interval_seconds
        self.on_snapshot = on_snapshot

        self.last_snapshot: Optional[DashboardSnapshot] = None
        self.rounds_completed = 0
        self._task: Optional[asyncio.Task] = None

        logger.info(
            f"RefreshScheduler initialized: source={source.name}, interval={interval_seconds}s"
        )

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_now(self) -> DashboardSnapshot:
        """
        Run one round: fetch every data kind concurrently and aggregate.

        Returns:
            The new snapshot (also stored in last_snapshot)

        Raises:
            SchedulerError: If any fetch raised (the whole round is discarded)
        """
        try:
            async with asyncio.TaskGroup() as group:
                features = group.create_task(self.source.fetch_features())
                position = group.create_task(self.source.fetch_position())
                orders = group.create_task(self.source.fetch_orders())
                strategy = group.create_task(self.source.fetch_strategy())
                wallet = group.create_task(self.source.fetch_wallet())
                market = group.create_task(self.source.fetch_market())
        except ExceptionGroup as eg:
            details = "; ".join(f"{type(e).__name__}: {e}" for e in eg.exceptions)
            raise SchedulerError(f"Refresh round failed ({details})") from eg

        snapshot = DashboardSnapshot(
            features=features.result(),
            position=position.result(),
            orders=orders.result(),
            strategy=strategy.result(),
            wallet=wallet.result(),
            market=market.result(),
            source_name=self.source.name,
            is_live=self.source.is_live,
        )

        self.last_snapshot = snapshot
        self.rounds_completed += 1
        logger.debug(
            f"Refresh round {self.rounds_completed} complete: "
            f"{len(snapshot.features)} features, {len(snapshot.orders)} orders"
        )

        if self.on_snapshot is not None:
            self.on_snapshot(snapshot)

        return snapshot

    async def run(self, max_rounds: Optional[int] = None) -> None:
        """
        Refresh continuously until cancelled (or max_rounds is reached).

        A failing round is logged and the loop continues with the next one.

        Args:
            max_rounds: Stop after this many rounds (None runs forever)
        """
        logger.info("Starting refresh loop")

        rounds = 0
        while max_rounds is None or rounds < max_rounds:
            rounds += 1
            try:
                await self.refresh_now()
            except Exception as e:
                logger.error(f"Refresh round {rounds} failed: {e}")

            if max_rounds is not None and rounds >= max_rounds:
                break
            await asyncio.sleep(self.interval_seconds)

        logger.info(f"Refresh loop finished after {rounds} rounds")

    def start(self) -> asyncio.Task:
        """
        Launch the refresh loop as a background task on the running loop.

        Raises:
            SchedulerError: If the loop is already running
        """
        if self.running:
            raise SchedulerError("Refresh loop already running")

        self._task = asyncio.get_running_loop().create_task(self.run(), name="botdash-refresh")
        return self._task

    async def stop(self) -> None:
        """Cancel the refresh loop and wait for it to unwind."""
        if self._task is None:
            return

        task = self._task
        self._task = None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Refresh loop cancelled")

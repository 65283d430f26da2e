"""Background event loop hosting the data source and refresh scheduler.

Streamlit reruns the page script synchronously on every interaction, while
the data layer is async. DashboardRuntime keeps one event loop alive in a
daemon thread for the lifetime of the app and exposes blocking helpers the
pages can call.
"""

import asyncio
import threading
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Coroutine, Optional

import httpx
from loguru import logger

from botdash.data.models import StrategyConfig
from botdash.data.sources import DataSource, select_data_source
from botdash.polling.config import DashboardConfig
from botdash.polling.exceptions import SchedulerError
from botdash.polling.scheduler import DashboardSnapshot, RefreshScheduler
from botdash.utils.notifications import NotificationCenter


class DashboardRuntime:
    """
    Owns the event loop thread, the selected data source and the scheduler.

    Args:
        config: Dashboard configuration
        notifications: Notification center shared with the UI
        transport: Optional httpx transport (for tests)
        call_timeout_seconds: Upper bound for blocking calls into the loop

    Example:
        >>> runtime = DashboardRuntime(config)
        >>> runtime.start()
        >>> snapshot = runtime.snapshot()
        >>> runtime.close()
    """

    def __init__(
        self,
        config: DashboardConfig,
        notifications: Optional[NotificationCenter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        call_timeout_seconds: float = 30.0,
    ) -> None:
        self.config = config
        self.notifications = notifications or NotificationCenter(config.notification_limit)
        self.call_timeout_seconds = call_timeout_seconds
        self._transport = transport

        self.source: Optional[DataSource] = None
        self.scheduler: Optional[RefreshScheduler] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def started(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def call(self, coro: Coroutine[Any, Any, Any]) -> Any:
        """
        Run a coroutine on the runtime loop and block for its result.

        Raises:
            SchedulerError: If the runtime is not started or the call times out
        """
        if not self.started:
            coro.close()
            raise SchedulerError("DashboardRuntime is not started")

        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        try:
            return future.result(timeout=self.call_timeout_seconds)
        except FutureTimeoutError as e:
            future.cancel()
            raise SchedulerError(
                f"Call did not complete within {self.call_timeout_seconds}s"
            ) from e

    async def _bootstrap(self) -> None:
        self.source = await select_data_source(self.config, self.notifications, self._transport)
        self.scheduler = RefreshScheduler(self.source, self.config.refresh_interval_seconds)
        if self.config.auto_refresh:
            self.scheduler.start()

    def start(self) -> "DashboardRuntime":
        """Start the loop thread, select the data source and launch polling."""
        if self.started:
            return self

        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name="botdash-runtime", daemon=True)
        self._thread.start()

        self.call(self._bootstrap())
        logger.info(f"DashboardRuntime started with {self.source.name} data source")
        return self

    @property
    def is_live(self) -> bool:
        return bool(self.source and self.source.is_live)

    def snapshot(self) -> DashboardSnapshot:
        """Latest snapshot, fetching one first if no round has completed yet."""
        if self.scheduler is not None and self.scheduler.last_snapshot is not None:
            return self.scheduler.last_snapshot
        return self.refresh()

    def refresh(self) -> DashboardSnapshot:
        """Run a refresh round now and wait until every fetch has settled."""
        if self.scheduler is None:
            raise SchedulerError("DashboardRuntime is not started")
        return self.call(self.scheduler.refresh_now())

    def fetch_strategy(self) -> Optional[StrategyConfig]:
        if self.source is None:
            raise SchedulerError("DashboardRuntime is not started")
        return self.call(self.source.fetch_strategy())

    def update_strategy(self, strategy: StrategyConfig) -> StrategyConfig:
        if self.source is None:
            raise SchedulerError("DashboardRuntime is not started")
        return self.call(self.source.update_strategy(strategy))

    async def _shutdown(self) -> None:
        if self.scheduler is not None:
            await self.scheduler.stop()
        if self.source is not None:
            await self.source.aclose()

    def close(self) -> None:
        """Stop polling, release the data source and stop the loop thread."""
        if not self.started:
            return

        self.call(self._shutdown())
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
        self._loop.close()
        self._thread = None
        logger.info("DashboardRuntime closed")

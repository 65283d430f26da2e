"""Unit tests for RefreshScheduler."""

import asyncio
from typing import List

import pytest

from botdash.data.mock import MockDataGenerator
from botdash.data.sources import SimulatedDataSource
from botdash.polling.exceptions import SchedulerError
from botdash.polling.scheduler import DATA_KINDS, DashboardSnapshot, RefreshScheduler
from botdash.utils.notifications import NotificationCenter


class CountingSource(SimulatedDataSource):
    """Simulated source that records every fetch."""

    def __init__(self, fail_orders: bool = False) -> None:
        super().__init__(MockDataGenerator(seed=5, feature_points=3, market_points=4), NotificationCenter())
        self.calls: List[str] = []
        self.fail_orders = fail_orders

    async def fetch_features(self):
        self.calls.append("features")
        return await super().fetch_features()

    async def fetch_position(self):
        self.calls.append("position")
        return await super().fetch_position()

    async def fetch_orders(self):
        self.calls.append("orders")
        if self.fail_orders:
            raise RuntimeError("orders exploded")
        return await super().fetch_orders()

    async def fetch_strategy(self):
        self.calls.append("strategy")
        return await super().fetch_strategy()

    async def fetch_wallet(self):
        self.calls.append("wallet")
        return await super().fetch_wallet()

    async def fetch_market(self):
        self.calls.append("market")
        return await super().fetch_market()


class SlowSource(CountingSource):
    """Source whose market fetch never finishes on its own."""

    def __init__(self) -> None:
        super().__init__()
        self.cancelled = False

    async def fetch_market(self):
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise


class TestRefreshScheduler:
    """Tests for RefreshScheduler."""

    def test_invalid_interval(self) -> None:
        with pytest.raises(SchedulerError, match="interval_seconds must be positive"):
            RefreshScheduler(CountingSource(), interval_seconds=0)

    @pytest.mark.asyncio
    async def test_one_fetch_per_kind(self) -> None:
        """Test a round fetches every data kind exactly once."""
        source = CountingSource()
        received: List[DashboardSnapshot] = []
        scheduler = RefreshScheduler(source, interval_seconds=1, on_snapshot=received.append)

        snapshot = await scheduler.refresh_now()

        assert sorted(source.calls) == sorted(DATA_KINDS)
        assert received == [snapshot]
        assert scheduler.last_snapshot is snapshot
        assert scheduler.rounds_completed == 1
        assert snapshot.source_name == "simulated"
        assert snapshot.is_live is False
        assert len(snapshot.market) == 4

    @pytest.mark.asyncio
    async def test_failing_fetch_raises_scheduler_error(self) -> None:
        """Test an unexpected fetch error surfaces as SchedulerError, not ExceptionGroup."""
        scheduler = RefreshScheduler(CountingSource(fail_orders=True), interval_seconds=1)

        with pytest.raises(SchedulerError, match="RuntimeError: orders exploded"):
            await scheduler.refresh_now()

        assert scheduler.last_snapshot is None
        assert scheduler.rounds_completed == 0

    @pytest.mark.asyncio
    async def test_run_tolerates_failing_round(self) -> None:
        """Test a failing fetch does not stop the loop."""
        source = CountingSource(fail_orders=True)
        scheduler = RefreshScheduler(source, interval_seconds=0.01)

        await scheduler.run(max_rounds=3)

        assert source.calls.count("orders") == 3
        assert scheduler.rounds_completed == 0
        assert scheduler.last_snapshot is None

    @pytest.mark.asyncio
    async def test_run_max_rounds(self) -> None:
        scheduler = RefreshScheduler(CountingSource(), interval_seconds=0.01)

        await scheduler.run(max_rounds=2)

        assert scheduler.rounds_completed == 2

    @pytest.mark.asyncio
    async def test_start_and_stop(self) -> None:
        """Test the background loop runs until stopped."""
        scheduler = RefreshScheduler(CountingSource(), interval_seconds=0.01)

        scheduler.start()
        with pytest.raises(SchedulerError, match="already running"):
            scheduler.start()

        for _ in range(100):
            if scheduler.rounds_completed >= 2:
                break
            await asyncio.sleep(0.01)

        await scheduler.stop()

        assert scheduler.rounds_completed >= 2
        assert not scheduler.running

    @pytest.mark.asyncio
    async def test_stop_cancels_round_in_flight(self) -> None:
        """Test stop() cancels fetches that are still running."""
        source = SlowSource()
        scheduler = RefreshScheduler(source, interval_seconds=1)

        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        assert source.cancelled
        assert scheduler.rounds_completed == 0

    @pytest.mark.asyncio
    async def test_stop_without_start(self) -> None:
        await RefreshScheduler(CountingSource(), interval_seconds=1).stop()

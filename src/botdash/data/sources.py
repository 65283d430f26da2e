"""
Data sources feeding the dashboard.

Two interchangeable implementations share the DataSource interface:

    - LiveDataSource: reads the bot's REST API and degrades to safe
      defaults (empty/None) when a request fails
    - SimulatedDataSource: serves generated data

select_data_source() picks one at startup according to the configured
mode, probing the live API once in 'auto' mode.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Awaitable, List, Optional

import httpx
from loguru import logger

from botdash.data.client import DashboardAPIClient
from botdash.data.exceptions import DataSourceError
from botdash.data.mock import MockDataGenerator
from botdash.data.models import FeatureData, MarketDataPoint, Order, Position, StrategyConfig, Wallet
from botdash.utils.notifications import NotificationCenter

if TYPE_CHECKING:
    from botdash.polling.config import DashboardConfig


class DataSource(ABC):
    """
    Abstract interface for everything the dashboard reads or writes.

    Fetch methods never raise for transport problems: implementations
    return a safe default instead. update_strategy() does raise, because
    the settings page must tell the user the save did not happen.
    """

    name: str = "base"
    is_live: bool = False

    @abstractmethod
    async def fetch_features(self) -> FeatureData:
        """Feature name → chronological samples."""
        pass

    @abstractmethod
    async def fetch_position(self) -> Optional[Position]:
        """Current open position, or None."""
        pass

    @abstractmethod
    async def fetch_orders(self) -> List[Order]:
        """Recent orders."""
        pass

    @abstractmethod
    async def fetch_strategy(self) -> Optional[StrategyConfig]:
        """Active strategy configuration."""
        pass

    @abstractmethod
    async def fetch_wallet(self) -> Optional[Wallet]:
        """Wallet balances."""
        pass

    @abstractmethod
    async def fetch_market(self) -> List[MarketDataPoint]:
        """Market price series."""
        pass

    @abstractmethod
    async def update_strategy(self, strategy: StrategyConfig) -> StrategyConfig:
        """Persist strategy changes and return the stored configuration."""
        pass

    async def aclose(self) -> None:
        """Release resources held by the source."""
        return None


class LiveDataSource(DataSource):
    """
    Data source backed by the trading bot REST API.

    Failures are caught here: logged, posted as an error notification, and
    replaced with an empty or None value so rendering never breaks.

    Args:
        client: API client
        notifications: Notification center for user-facing errors
    """

    name = "live"
    is_live = True

    def __init__(self, client: DashboardAPIClient, notifications: NotificationCenter) -> None:
        self.client = client
        self.notifications = notifications

    async def _guarded(self, label: str, call: Awaitable[Any], default: Any) -> Any:
        try:
            return await call
        except DataSourceError as e:
            logger.error(f"Error fetching {label} data: {e}")
            self.notifications.error(f"Failed to fetch {label} data")
            return default

    async def fetch_features(self) -> FeatureData:
        return await self._guarded("feature", self.client.get_features(), {})

    async def fetch_position(self) -> Optional[Position]:
        return await self._guarded("position", self.client.get_position(), None)

    async def fetch_orders(self) -> List[Order]:
        return await self._guarded("orders", self.client.get_orders(), [])

    async def fetch_strategy(self) -> Optional[StrategyConfig]:
        return await self._guarded("strategy", self.client.get_strategy_config(), None)

    async def fetch_wallet(self) -> Optional[Wallet]:
        return await self._guarded("wallet", self.client.get_wallet(), None)

    async def fetch_market(self) -> List[MarketDataPoint]:
        return await self._guarded("market", self.client.get_market(), [])

    async def update_strategy(self, strategy: StrategyConfig) -> StrategyConfig:
        try:
            updated = await self.client.update_strategy(strategy)
        except DataSourceError as e:
            logger.error(f"Error updating strategy: {e}")
            self.notifications.error("Failed to update strategy settings")
            raise
        self.notifications.success("Strategy settings updated successfully")
        return updated

    async def aclose(self) -> None:
        await self.client.aclose()


class SimulatedDataSource(DataSource):
    """
    Data source serving generated data.

    The strategy configuration is generated once and then kept, so edits
    made on the settings page survive refreshes for the session.

    Args:
        generator: Mock data generator
        notifications: Notification center (used for update confirmations)
    """

    name = "simulated"
    is_live = False

    def __init__(self, generator: MockDataGenerator, notifications: NotificationCenter) -> None:
        self.generator = generator
        self.notifications = notifications
        self._strategy: Optional[StrategyConfig] = None

    async def fetch_features(self) -> FeatureData:
        return self.generator.features()

    async def fetch_position(self) -> Optional[Position]:
        return self.generator.position()

    async def fetch_orders(self) -> List[Order]:
        return self.generator.orders()

    async def fetch_strategy(self) -> Optional[StrategyConfig]:
        if self._strategy is None:
            self._strategy = self.generator.strategy()
        return self._strategy

    async def fetch_wallet(self) -> Optional[Wallet]:
        return self.generator.wallet()

    async def fetch_market(self) -> List[MarketDataPoint]:
        return self.generator.market()

    async def update_strategy(self, strategy: StrategyConfig) -> StrategyConfig:
        self._strategy = replace(strategy, last_updated=datetime.now().isoformat(timespec="seconds"))
        logger.info(f"Simulated strategy '{strategy.name}' updated")
        self.notifications.success("Strategy settings updated successfully")
        return self._strategy


def build_simulated_source(
    config: "DashboardConfig", notifications: NotificationCenter
) -> SimulatedDataSource:
    generator = MockDataGenerator(
        seed=config.mock_seed,
        feature_points=config.mock_feature_points,
        market_points=config.mock_market_points,
    )
    return SimulatedDataSource(generator, notifications)


async def select_data_source(
    config: "DashboardConfig",
    notifications: NotificationCenter,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DataSource:
    """
    Choose the data source for this session.

    - 'simulated': always generated data
    - 'live': always the REST API (failures degrade per request)
    - 'auto': wait probe_delay_seconds, probe GET /api/features
      once; use the API if it answers, generated data otherwise

    Args:
        config: Dashboard configuration
        notifications: Notification center shared with the UI
        transport: Optional httpx transport (for tests)

    Returns:
        Selected DataSource

    Example:
        >>> source = asyncio.run(select_data_source(config, NotificationCenter()))
        >>> source.name
        'simulated'
    """
    if config.data_mode == "simulated":
        logger.info("Using simulated data source")
        return build_simulated_source(config, notifications)

    client = DashboardAPIClient(
        config.api_base_url,
        timeout_seconds=config.request_timeout_seconds,
        transport=transport,
    )

    if config.data_mode == "live":
        logger.info(f"Using live data source at {config.api_base_url}")
        return LiveDataSource(client, notifications)

    if config.probe_delay_seconds > 0:
        await asyncio.sleep(config.probe_delay_seconds)

    if await client.probe():
        notifications.success("Connected to live API")
        return LiveDataSource(client, notifications)

    await client.aclose()
    logger.info("API not available, using simulated data")
    return build_simulated_source(config, notifications)

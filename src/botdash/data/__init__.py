"""
Data layer for BotDash.

Key Components:
    - models: Typed records for the API payloads
    - client: Async HTTP client for the bot's REST endpoints
    - mock: Randomized generators for simulated mode
    - sources: Live and simulated DataSource implementations
"""

from botdash.data.client import DashboardAPIClient
from botdash.data.exceptions import (
    DataSourceError,
    FetchError,
    PayloadError,
    StrategyValidationError,
)
from botdash.data.mock import MockDataGenerator
from botdash.data.models import (
    FeatureData,
    FeatureDataPoint,
    MarketDataPoint,
    Order,
    Position,
    StrategyConfig,
    StrategyParameter,
    Wallet,
    parse_feature_data,
    points_to_frame,
)
from botdash.data.sources import (
    DataSource,
    LiveDataSource,
    SimulatedDataSource,
    select_data_source,
)

__all__ = [
    # Models
    "FeatureData",
    "FeatureDataPoint",
    "MarketDataPoint",
    "Order",
    "Position",
    "StrategyConfig",
    "StrategyParameter",
    "Wallet",
    "parse_feature_data",
    "points_to_frame",
    # Client and sources
    "DashboardAPIClient",
    "MockDataGenerator",
    "DataSource",
    "LiveDataSource",
    "SimulatedDataSource",
    "select_data_source",
    # Exceptions
    "DataSourceError",
    "FetchError",
    "PayloadError",
    "StrategyValidationError",
]

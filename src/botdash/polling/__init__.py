"""
Polling module.

Drives periodic data refresh for the dashboard.

Key Components:
    - DashboardConfig: Configuration for data source selection and refresh
    - RefreshScheduler: Fans out one fetch per data kind each round
    - DashboardSnapshot: Aggregated result of a refresh round
    - DashboardRuntime: Background event loop used by the Streamlit app

Example:
    >>> from botdash.polling import DashboardConfig, DashboardRuntime
    >>>
    >>> config = DashboardConfig.from_yaml("configs/dashboard/default.yaml")
    >>> runtime = DashboardRuntime(config).start()
    >>> snapshot = runtime.snapshot()
    >>> runtime.close()
"""

from botdash.polling.config import DashboardConfig
from botdash.polling.exceptions import ConfigError, PollingError, SchedulerError
from botdash.polling.runtime import DashboardRuntime
from botdash.polling.scheduler import DATA_KINDS, DashboardSnapshot, RefreshScheduler

__all__ = [
    "DashboardConfig",
    "ConfigError",
    "PollingError",
    "SchedulerError",
    "DashboardRuntime",
    "DashboardSnapshot",
    "RefreshScheduler",
    "DATA_KINDS",
]

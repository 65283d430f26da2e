"""Configuration for the dashboard data layer and refresh loop."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger

from botdash.polling.exceptions import ConfigError

DATA_MODES = ("auto", "live", "simulated")
API_URL_ENV = "BOTDASH_API_URL"


@dataclass
class DashboardConfig:
    """
    Configuration for the dashboard.

    Attributes:
        data_mode: Data source selection ('auto', 'live' or 'simulated')
        api_base_url: Root URL of the trading bot API
        request_timeout_seconds: Per-request HTTP timeout
        probe_delay_seconds: Delay before probing the live API in 'auto' mode
        refresh_interval_seconds: Seconds between refresh rounds
        auto_refresh: Whether the app reruns on the refresh interval
        mock_seed: Seed for simulated data (None for random)
        mock_feature_points: Samples per simulated feature series
        mock_market_points: Samples in the simulated market series
        notification_limit: Maximum queued notifications
        log_level: Logging level
        log_file: Path to log file

    Example:
        >>> config = DashboardConfig.from_yaml("configs/dashboard/default.yaml")
        >>> print(config.data_mode)
        'auto'
    """

    # Data source settings
    data_mode: str = "auto"  # auto | live | simulated
    api_base_url: str = "http://localhost:8000"
    request_timeout_seconds: float = 5.0
    probe_delay_seconds: float = 1.0

    # Refresh settings
    refresh_interval_seconds: float = 10.0
    auto_refresh: bool = True

    # Simulated data settings
    mock_seed: Optional[int] = None
    mock_feature_points: int = 20
    mock_market_points: int = 100

    # Notifications
    notification_limit: int = 50

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/dashboard.log"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: If configuration is invalid
        """
        if self.data_mode not in DATA_MODES:
            raise ConfigError(
                f"Invalid data mode: {self.data_mode}. Must be one of {DATA_MODES}"
            )

        if not self.api_base_url.startswith(("http://", "https://")):
            raise ConfigError(f"api_base_url must be an http(s) URL, got {self.api_base_url!r}")

        if self.request_timeout_seconds <= 0:
            raise ConfigError("request_timeout_seconds must be positive")

        if self.probe_delay_seconds < 0:
            raise ConfigError("probe_delay_seconds must be >= 0")

        if self.refresh_interval_seconds <= 0:
            raise ConfigError("refresh_interval_seconds must be positive")

        if self.mock_feature_points < 1 or self.mock_market_points < 1:
            raise ConfigError("mock point counts must be >= 1")

        if self.notification_limit < 1:
            raise ConfigError("notification_limit must be >= 1")

        logger.debug(
            f"DashboardConfig validated: mode={self.data_mode}, "
            f"refresh={self.refresh_interval_seconds}s"
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "DashboardConfig":
        """
        Load configuration from YAML file.

        The BOTDASH_API_URL environment variable overrides data.api_base_url.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            DashboardConfig instance

        Raises:
            FileNotFoundError: If YAML file not found
            ConfigError: If YAML is invalid

        Example:
            >>> config = DashboardConfig.from_yaml("configs/dashboard/default.yaml")
        """
        yaml_file = Path(yaml_path)

        if not yaml_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_file, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {yaml_path}")

        # Extract nested configuration
        data_section = data.get("data", {})
        refresh = data.get("refresh", {})
        mock = data.get("mock", {})
        notifications = data.get("notifications", {})
        logging_config = data.get("logging", {})

        config = cls(
            # Data source
            data_mode=data_section.get("mode", "auto"),
            api_base_url=os.getenv(
                API_URL_ENV, data_section.get("api_base_url", "http://localhost:8000")
            ),
            request_timeout_seconds=data_section.get("request_timeout_seconds", 5.0),
            probe_delay_seconds=data_section.get("probe_delay_seconds", 1.0),
            # Refresh
            refresh_interval_seconds=refresh.get("interval_seconds", 10.0),
            auto_refresh=refresh.get("auto_refresh", True),
            # Simulated data
            mock_seed=mock.get("seed"),
            mock_feature_points=mock.get("feature_points", 20),
            mock_market_points=mock.get("market_points", 100),
            # Notifications
            notification_limit=notifications.get("limit", 50),
            # Logging
            log_level=logging_config.get("level", "INFO"),
            log_file=logging_config.get("file", "logs/dashboard.log"),
        )

        logger.info(f"Loaded configuration from {yaml_path}")
        return config

    def to_dict(self) -> dict:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary with the same nesting as the YAML file
        """
        return {
            "data": {
                "mode": self.data_mode,
                "api_base_url": self.api_base_url,
                "request_timeout_seconds": self.request_timeout_seconds,
                "probe_delay_seconds": self.probe_delay_seconds,
            },
            "refresh": {
                "interval_seconds": self.refresh_interval_seconds,
                "auto_refresh": self.auto_refresh,
            },
            "mock": {
                "seed": self.mock_seed,
                "feature_points": self.mock_feature_points,
                "market_points": self.mock_market_points,
            },
            "notifications": {
                "limit": self.notification_limit,
            },
            "logging": {
                "level": self.log_level,
                "file": self.log_file,
            },
        }

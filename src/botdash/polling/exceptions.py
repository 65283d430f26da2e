"""Custom exceptions for polling module."""


class PollingError(Exception):
    """Base exception for polling errors."""

    pass


class ConfigError(PollingError):
    """Exception raised for invalid dashboard configuration."""

    pass


class SchedulerError(PollingError):
    """Exception raised for refresh scheduler errors."""

    pass

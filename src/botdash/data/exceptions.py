"""Custom exceptions for the data module."""

from typing import Dict, Optional


class DataSourceError(Exception):
    """
    Base exception for data source errors.

    All data-related exceptions inherit from this class.
    """

    pass


class FetchError(DataSourceError):
    """
    Exception raised when an API request fails.

    Covers transport errors (connection refused, timeouts) and non-2xx
    responses. ``status_code`` is None for transport errors.

    Example:
        >>> if response.status_code >= 400:
        ...     raise FetchError("/api/orders", "API error: 503", status_code=503)
    """

    def __init__(self, endpoint: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint
        self.status_code = status_code


class PayloadError(DataSourceError):
    """
    Exception raised when a response body does not match the expected shape.

    Example:
        >>> if "symbol" not in payload:
        ...     raise PayloadError("Position payload missing 'symbol'")
    """

    pass


class StrategyValidationError(DataSourceError):
    """
    Exception raised when strategy form values fail validation.

    Attributes:
        errors: Mapping of field name to error message

    Example:
        >>> raise StrategyValidationError({"name": "Strategy name is required"})
    """

    def __init__(self, errors: Dict[str, str]) -> None:
        details = "; ".join(f"{field}: {message}" for field, message in errors.items())
        super().__init__(f"Invalid strategy settings ({details})")
        self.errors = errors

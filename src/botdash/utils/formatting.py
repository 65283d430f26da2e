"""Formatting helpers for timestamps, metric values and money."""

from datetime import datetime
from typing import Optional, Union

TimestampLike = Union[int, float, str, datetime]

# strftime patterns per time range selector value
TIMEFRAME_FORMATS = {
    "1h": "%H:%M:%S",
    "1d": "%H:%M",
    "1w": "%b %d %H:%M",
    "1m": "%b %d",
    "all": "%b %d",
}

DEFAULT_TIMESTAMP_FORMAT = "%H:%M:%S"


def parse_timestamp(timestamp: TimestampLike) -> datetime:
    """
    Convert a timestamp into a local datetime.

    Numbers are epoch milliseconds. ISO strings may carry a "Z" suffix or
    an offset; aware values are converted to local time. Anything that
    cannot be parsed falls back to now.

    Args:
        timestamp: Epoch milliseconds, ISO-8601 string or datetime

    Returns:
        Naive local datetime

    Example:
        >>> parse_timestamp("2024-03-01T12:30:05")
        datetime.datetime(2024, 3, 1, 12, 30, 5)
    """
    if isinstance(timestamp, datetime):
        parsed = timestamp
    elif isinstance(timestamp, bool):
        return datetime.now()
    elif isinstance(timestamp, (int, float)):
        try:
            return datetime.fromtimestamp(timestamp / 1000)
        except (OverflowError, OSError, ValueError):
            return datetime.now()
    elif isinstance(timestamp, str):
        text = timestamp.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return datetime.now()
    else:
        return datetime.now()

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_timestamp(timestamp: TimestampLike, timeframe: Optional[str] = None) -> str:
    """
    Format a timestamp for chart axes and panel footers.

    Args:
        timestamp: Epoch milliseconds, ISO-8601 string or datetime
        timeframe: Time range selector value ("1h", "1d", "1w", "1m", "all")

    Returns:
        Formatted string (e.g., "14:05:09")

    Example:
        >>> format_timestamp("2024-03-01T14:05:09")
        '14:05:09'
        >>> format_timestamp("2024-03-01T14:05:09", timeframe="1m")
        'Mar 01'
    """
    pattern = TIMEFRAME_FORMATS.get(timeframe or "", DEFAULT_TIMESTAMP_FORMAT)
    return parse_timestamp(timestamp).strftime(pattern)


def format_value(feature: str, value: float) -> str:
    """
    Format a metric value according to the feature it belongs to.

    Args:
        feature: Feature name (e.g., "CPU Usage")
        value: Raw metric value

    Returns:
        Formatted string with the feature's unit

    Example:
        >>> format_value("CPU Usage", 42.345)
        '42.3%'
        >>> format_value("Network Traffic", 1500)
        '1.50MB/s'
    """
    if "Usage" in feature:
        return f"{value:.1f}%"
    elif feature == "Response Time":
        return f"{value:.0f}ms"
    elif feature == "Network Traffic":
        return f"{value / 1000:.2f}MB/s"
    elif feature == "Disk I/O":
        return f"{value:.1f}MB/s"

    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_currency(value: float) -> str:
    """
    Format value as US dollars.

    Example:
        >>> format_currency(105000)
        '$105,000.00'
        >>> format_currency(-12.5)
        '-$12.50'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percentage(value: float, decimals: int = 2) -> str:
    """
    Format value as percentage.

    Args:
        value: Percentage value (e.g., 5.25 for 5.25%)
        decimals: Number of decimal places

    Example:
        >>> format_percentage(5.25)
        '5.25%'
    """
    return f"{value:.{decimals}f}%"


def calculate_color(value: float) -> str:
    """
    Pick a display color for a signed value.

    Example:
        >>> calculate_color(5.5)
        'green'
        >>> calculate_color(-2.3)
        'red'
    """
    if value > 0:
        return "green"
    elif value < 0:
        return "red"
    else:
        return "gray"


def format_delta(value: float, is_percentage: bool = True) -> str:
    """
    Format delta with an explicit sign.

    Example:
        >>> format_delta(5.5)
        '+5.50%'
        >>> format_delta(-2.3, is_percentage=False)
        '-2.30'
    """
    sign = "+" if value >= 0 else ""

    if is_percentage:
        return f"{sign}{value:.2f}%"
    else:
        return f"{sign}{value:,.2f}"

"""Shared helpers for BotDash."""

from botdash.utils.formatting import (
    calculate_color,
    format_currency,
    format_delta,
    format_percentage,
    format_timestamp,
    format_value,
    parse_timestamp,
)
from botdash.utils.logging_setup import setup_logging
from botdash.utils.notifications import Notification, NotificationCenter

__all__ = [
    "calculate_color",
    "format_currency",
    "format_delta",
    "format_percentage",
    "format_timestamp",
    "format_value",
    "parse_timestamp",
    "Notification",
    "NotificationCenter",
    "setup_logging",
]

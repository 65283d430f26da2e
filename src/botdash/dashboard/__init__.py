"""
Streamlit dashboard for BotDash.

This module provides the web dashboard for monitoring a trading bot:
feature metrics, position, orders, wallet, strategy settings and an
interactive analysis chart.

Key Components:
    - Main app: Multi-page dashboard with navigation and auto-refresh
    - Overview page: Feature cards and trading panels
    - Analysis page: Annotated chart and statistics
    - Strategy page: Strategy settings form

Usage:
    Launch dashboard:
    $ python scripts/dashboard.py

    Or directly:
    $ streamlit run src/botdash/dashboard/app.py
"""

from botdash.dashboard.charts import ChartBuilder
from botdash.utils.formatting import format_currency, format_percentage, calculate_color

__all__ = [
    "ChartBuilder",
    "format_currency",
    "format_percentage",
    "calculate_color",
]

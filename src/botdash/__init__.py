"""BotDash: Real-time metrics dashboard for trading bots."""

__version__ = "0.1.0"
__author__ = "Gopal Joshi"
__description__ = "Streamlit dashboard for trading bot feature metrics, positions, orders and strategy settings"

# Package-level exports
__all__ = [
    "__version__",
    "__author__",
    "__description__",
]

"""Dashboard pages.

Each page module exports a render(runtime: DashboardRuntime) function
that displays the page content using Streamlit.

Available pages:
- overview: Feature cards, position, orders, wallet, strategy, market
- analysis: Interactive chart with annotations and statistics
- strategy: Strategy settings form
"""

from botdash.dashboard.pages import analysis, overview, strategy

__all__ = ["overview", "analysis", "strategy"]

"""Overview dashboard page."""

import streamlit as st

from botdash.charting.interaction import ChartType
from botdash.dashboard import panels
from botdash.dashboard.charts import TIME_RANGES, ChartBuilder
from botdash.data.models import points_to_frame
from botdash.polling import DashboardRuntime, SchedulerError

ANALYSIS_TARGET_KEY = "analysis_target"
PAGE_KEY = "page"
NAVIGATE_KEY = "navigate_to"


def render(runtime: DashboardRuntime) -> None:
    """
    Render overview dashboard page.

    Args:
        runtime: Started DashboardRuntime

    Displays:
        - Feature metric cards with sparklines
        - Position, orders, strategy and wallet panels
        - Market chart
        - Status footer
    """
    header, actions = st.columns([3, 1])

    with header:
        st.title("📈 Trading Bot Dashboard")
        st.caption("Real-time monitoring of your trading bot metrics and performance.")

    with actions:
        refresh_clicked = st.button("🔄 Refresh", use_container_width=True)
        st.caption("🟢 Live Data" if runtime.is_live else "🟡 Demo Mode")

    try:
        if refresh_clicked:
            with st.spinner("Refreshing..."):
                snapshot = runtime.refresh()
            st.toast("Data refreshed", icon="✅")
        else:
            snapshot = runtime.snapshot()
    except SchedulerError as e:
        st.error(f"⚠️ Failed to load dashboard data: {e}")
        if st.button("Try Again"):
            st.rerun()
        return

    if not snapshot.features:
        st.warning("⚠️ No feature data available.")
    else:
        st.subheader("Trading Metrics")
        columns = st.columns(3)
        for i, (title, points) in enumerate(snapshot.features.items()):
            with columns[i % 3]:
                if panels.feature_card(title, points, key=f"feature-{i}"):
                    st.session_state[ANALYSIS_TARGET_KEY] = title
                    st.session_state[NAVIGATE_KEY] = "🔬 Analysis"
                    st.rerun()

    st.markdown("---")

    left, right = st.columns([3, 2])

    with left:
        panels.position_panel(snapshot.position)
        st.markdown("---")
        panels.orders_panel(snapshot.orders)

    with right:
        panels.wallet_panel(snapshot.wallet)
        st.markdown("---")
        panels.strategy_panel(snapshot.strategy)

    st.markdown("---")

    # Market chart
    st.subheader("Market")

    type_col, range_col = st.columns(2)
    with type_col:
        chart_type = st.radio(
            "Chart type",
            [t.value for t in ChartType],
            horizontal=True,
            key="market-chart-type",
            label_visibility="collapsed",
        )
    with range_col:
        time_range = st.radio(
            "Time range",
            list(TIME_RANGES),
            index=1,
            horizontal=True,
            key="market-time-range",
            label_visibility="collapsed",
        )
    st.plotly_chart(
        ChartBuilder.market_chart(
            points_to_frame(snapshot.market),
            title="Market Price",
            chart_type=ChartType(chart_type),
            time_range=TIME_RANGES[time_range],
        ),
        use_container_width=True,
    )
    if snapshot.market and st.button("Analyze market", key="market-analyze"):
        st.session_state[ANALYSIS_TARGET_KEY] = "Market"
        st.session_state[NAVIGATE_KEY] = "🔬 Analysis"
        st.rerun()

    # Status footer
    st.markdown("---")
    col1, col2 = st.columns(2)
    col1.caption(f"Next refresh in {runtime.config.refresh_interval_seconds:.0f}s")
    col2.caption(
        "Connected to API endpoints" if snapshot.is_live else "Using simulated data"
    )

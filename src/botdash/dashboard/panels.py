"""Streamlit panels for feature cards and trading information."""

from typing import List, Optional

import pandas as pd
import streamlit as st

from botdash.analysis.statistics import latest_change
from botdash.dashboard.charts import ChartBuilder
from botdash.data.models import FeatureDataPoint, Order, Position, StrategyConfig, Wallet, points_to_frame
from botdash.utils.formatting import (
    calculate_color,
    format_currency,
    format_delta,
    format_timestamp,
    format_value,
)

ORDER_STATUS_ICONS = {
    "filled": "🟢",
    "open": "🔵",
    "canceled": "🟡",
    "rejected": "🔴",
}


def _last_updated(timestamp) -> None:
    if timestamp is not None:
        st.caption(f"Last updated: {format_timestamp(timestamp, timeframe='1w')}")


def feature_card(title: str, points: List[FeatureDataPoint], key: str) -> bool:
    """
    Render one feature card.

    Args:
        title: Feature name
        points: Chronological samples
        key: Unique widget key

    Returns:
        True if the user asked to open the feature in the analysis view
    """
    with st.container(border=True):
        if not points:
            st.markdown(f"**{title}**")
            st.info("No data")
            return False

        change = latest_change(points)
        # Rising response times or errors are bad news, so invert the delta color
        inverse = "Response" in title or "Error" in title

        st.metric(
            title,
            format_value(title, change.current),
            delta=format_delta(change.change_percent) if change.change != 0 else None,
            delta_color="inverse" if inverse else "normal",
        )
        st.plotly_chart(
            ChartBuilder.feature_sparkline(points_to_frame(points), title=title),
            use_container_width=True,
            config={"displayModeBar": False},
            key=f"{key}-sparkline",
        )
        st.caption(f"Updated {format_timestamp(points[-1].timestamp)}")
        return st.button("Analyze", key=f"{key}-analyze", use_container_width=True)


def position_panel(position: Optional[Position]) -> None:
    """Render the open position, or an empty state."""
    st.subheader("Current Position")

    if position is None:
        st.info("No open position.")
        return

    col1, col2, col3 = st.columns(3)

    with col1:
        st.metric("Symbol", position.symbol)
        st.metric("Quantity", f"{position.quantity:g}")

    with col2:
        st.metric("Entry Price", format_currency(position.entry_price))
        st.metric("Current Price", format_currency(position.current_price))

    with col3:
        st.metric(
            "P&L",
            format_currency(position.pnl),
            delta=format_delta(position.pnl_percentage),
        )

    _last_updated(position.timestamp)


def orders_panel(orders: List[Order]) -> None:
    """Render the recent orders table, or an empty state."""
    st.subheader("Recent Orders")

    if not orders:
        st.info("No recent orders.")
        return

    df = pd.DataFrame(
        [
            {
                "Time": format_timestamp(order.timestamp, timeframe="1w"),
                "Symbol": order.symbol,
                "Side": order.side.upper(),
                "Type": order.type.capitalize(),
                "Qty": order.quantity,
                "Price": format_currency(order.price),
                "Status": f"{ORDER_STATUS_ICONS.get(order.status, '')} {order.status.capitalize()}",
            }
            for order in orders
        ]
    )

    st.dataframe(df, use_container_width=True, hide_index=True)


def parameter_label(key: str) -> str:
    """camelCase parameter key → spaced title ("stopLossPercent" → "Stop Loss Percent")."""
    spaced = "".join(f" {char}" if char.isupper() else char for char in key).strip()
    return spaced[:1].upper() + spaced[1:]


def strategy_panel(strategy: Optional[StrategyConfig]) -> None:
    """Render the strategy summary, or an empty state."""
    st.subheader("Strategy")

    if strategy is None:
        st.info("No strategy configuration available.")
        return

    status = "🟢 Active" if strategy.enabled else "🔴 Inactive"
    st.markdown(f"**{strategy.name}** · {status}")
    if strategy.description:
        st.caption(strategy.description)

    for key, param in strategy.parameters.items():
        if param.type == "boolean":
            value = "✅" if param.value else "❌"
        else:
            value = str(param.value)
        col1, col2 = st.columns([2, 1])
        col1.markdown(parameter_label(key))
        col2.markdown(f"`{value}`")
        if param.description:
            col1.caption(param.description)

    _last_updated(strategy.last_updated)


def wallet_panel(wallet: Optional[Wallet]) -> None:
    """Render balances and running profit."""
    st.subheader("Wallet")

    if wallet is None:
        st.info("Wallet data unavailable.")
        return

    col1, col2, col3 = st.columns(3)

    col1.metric("Balance", format_currency(wallet.balance))
    col2.metric("Available", format_currency(wallet.available))

    color = calculate_color(wallet.profit_loss)
    col3.metric(
        "Profit / Loss",
        format_currency(wallet.profit_loss),
        delta=format_delta(wallet.profit_loss_percentage),
        delta_color="normal" if color != "gray" else "off",
    )

    _last_updated(wallet.last_updated)

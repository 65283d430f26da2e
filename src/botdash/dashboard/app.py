"""
Main Streamlit dashboard application for BotDash.

This is the entry point for the web dashboard. It provides navigation
between pages, owns the background data runtime and handles auto-refresh.

Usage:
    streamlit run src/botdash/dashboard/app.py

    Or via CLI:
    python scripts/dashboard.py
"""

import os
import sys
import time
from datetime import datetime
from pathlib import Path

import streamlit as st
from loguru import logger

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from botdash.dashboard.pages import analysis, overview, strategy
from botdash.dashboard.pages.overview import NAVIGATE_KEY, PAGE_KEY
from botdash.polling import ConfigError, DashboardConfig, DashboardRuntime, SchedulerError
from botdash.utils import NotificationCenter, setup_logging

DEFAULT_CONFIG_PATH = os.environ.get("BOTDASH_CONFIG", "configs/dashboard/default.yaml")

PAGES = {
    "📈 Overview": overview,
    "🔬 Analysis": analysis,
    "⚙️ Strategy": strategy,
}

TOAST_ICONS = {
    "success": "✅",
    "info": "ℹ️",
    "warning": "⚠️",
    "error": "❌",
}

# Per-session toast cursor; the runtime and its notifications are shared
SESSION_STARTED_KEY = "session_started_at"
TOAST_CURSOR_KEY = "toast_cursor"


def load_config(config_path: str) -> DashboardConfig:
    """Load the YAML config, falling back to defaults when the file is absent."""
    if Path(config_path).exists():
        return DashboardConfig.from_yaml(config_path)
    logger.warning(f"Config file not found: {config_path}, using defaults")
    return DashboardConfig()


@st.cache_resource
def get_runtime(config_path: str) -> DashboardRuntime:
    """One runtime per config path, shared by every session of the app.

    Toasts are read per session through show_notifications, never drained.
    """
    config = load_config(config_path)
    setup_logging(config.log_level, config.log_file)

    runtime = DashboardRuntime(config, NotificationCenter(config.notification_limit))
    return runtime.start()


def show_notifications(runtime: DashboardRuntime) -> None:
    """Toast every notification this browser session has not shown yet."""
    center = runtime.notifications
    if TOAST_CURSOR_KEY not in st.session_state:
        st.session_state[TOAST_CURSOR_KEY] = center.sequence_before(
            st.session_state[SESSION_STARTED_KEY]
        )

    for notification in center.after(st.session_state[TOAST_CURSOR_KEY]):
        st.toast(notification.message, icon=TOAST_ICONS.get(notification.level))
        st.session_state[TOAST_CURSOR_KEY] = notification.sequence


def main():
    """Main dashboard application."""
    # Page configuration
    st.set_page_config(
        page_title="BotDash",
        page_icon="📈",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    if SESSION_STARTED_KEY not in st.session_state:
        st.session_state[SESSION_STARTED_KEY] = datetime.now()

    # Custom CSS
    st.markdown(
        """
        <style>
        .main-header {
            font-size: 2.5rem;
            font-weight: bold;
            color: #2563eb;
            padding-bottom: 1rem;
            border-bottom: 2px solid #2563eb;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )

    # Sidebar
    with st.sidebar:
        st.markdown(
            '<h1 class="main-header">📈 BotDash</h1>',
            unsafe_allow_html=True,
        )

        st.markdown("---")

        # Navigation (pages may request a switch before the radio is drawn)
        if NAVIGATE_KEY in st.session_state:
            st.session_state[PAGE_KEY] = st.session_state.pop(NAVIGATE_KEY)

        page = st.radio(
            "Navigation",
            list(PAGES.keys()),
            key=PAGE_KEY,
            label_visibility="collapsed",
        )

        st.markdown("---")

        # Settings
        st.subheader("Settings")

        config_path = st.text_input(
            "Config file",
            value=DEFAULT_CONFIG_PATH,
            help="Path to dashboard YAML config",
        )

    # Initialize runtime
    try:
        runtime = get_runtime(config_path)
    except (ConfigError, SchedulerError, FileNotFoundError) as e:
        st.error(f"Failed to start dashboard: {e}")
        st.stop()

    with st.sidebar:
        # Auto-refresh toggle
        auto_refresh = st.checkbox("Auto-refresh", value=runtime.config.auto_refresh)

        if auto_refresh:
            refresh_interval = st.slider(
                "Refresh interval (seconds)",
                min_value=1,
                max_value=60,
                value=min(int(runtime.config.refresh_interval_seconds), 60),
                step=1,
            )

        st.markdown("---")

        # Info
        st.caption("🟢 Live API" if runtime.is_live else "🟡 Simulated data")
        st.caption("BotDash v0.1.0")
        st.caption("Trading Bot Metrics Dashboard")

    # Render selected page
    PAGES[page].render(runtime)

    show_notifications(runtime)

    # Auto-refresh logic (the analysis page keeps its frozen series)
    if auto_refresh:
        refresh_placeholder = st.sidebar.empty()

        # Countdown timer
        for remaining in range(refresh_interval, 0, -1):
            with refresh_placeholder.container():
                st.info(f"🔄 Auto-refreshing in {remaining} seconds...")
            time.sleep(1)

        refresh_placeholder.empty()

        # Trigger rerun
        st.rerun()


if __name__ == "__main__":
    main()

"""Strategy settings page."""

from typing import Any, Dict, List, MutableMapping

import streamlit as st

from botdash.dashboard.panels import parameter_label
from botdash.data.exceptions import DataSourceError, StrategyValidationError
from botdash.data.models import StrategyConfig, StrategyParameter
from botdash.polling import DashboardRuntime, SchedulerError
from botdash.utils.formatting import format_timestamp

WIDGET_KEY_PREFIX = "strategy-field-"


def widget_key(field: str) -> str:
    return f"{WIDGET_KEY_PREFIX}{field}"


def reset_form(state: MutableMapping[str, Any], strategy: StrategyConfig) -> List[str]:
    """
    Drop the form's widget values so the next run shows the stored settings.

    Args:
        state: Streamlit session state (any mutable mapping)
        strategy: Strategy whose form is being reset

    Returns:
        Keys that were removed
    """
    removed = []
    for field in strategy.form_values():
        key = widget_key(field)
        if key in state:
            del state[key]
            removed.append(key)
    return removed


def _number_input(key: str, param: StrategyParameter) -> Any:
    bounds = [param.value, param.min, param.max, param.step]
    # st.number_input needs value, bounds and step of one numeric type
    integral = all(b is None or (isinstance(b, int) and not isinstance(b, bool)) for b in bounds)
    cast = int if integral else float

    kwargs: Dict[str, Any] = {"value": cast(param.value)}
    for name, bound in (("min_value", param.min), ("max_value", param.max), ("step", param.step)):
        if bound is not None:
            kwargs[name] = cast(bound)

    return st.number_input(
        parameter_label(key),
        help=param.description or None,
        key=widget_key(key),
        **kwargs,
    )


def _parameter_input(key: str, param: StrategyParameter) -> Any:
    if param.type == "number":
        return _number_input(key, param)
    if param.type == "boolean":
        return st.checkbox(
            parameter_label(key),
            value=bool(param.value),
            help=param.description or None,
            key=widget_key(key),
        )
    return st.text_input(
        parameter_label(key),
        value=str(param.value),
        help=param.description or None,
        key=widget_key(key),
    )


def _save(runtime: DashboardRuntime, strategy: StrategyConfig, values: Dict[str, Any]) -> None:
    try:
        updated = strategy.apply_form_values(values)
    except StrategyValidationError as e:
        st.error("❌ Please fix the highlighted settings:")
        for field, message in e.errors.items():
            st.markdown(f"- **{parameter_label(field)}**: {message}")
        return

    try:
        with st.spinner("Saving..."):
            runtime.update_strategy(updated)
    except (DataSourceError, SchedulerError) as e:
        st.error(f"❌ Failed to update strategy settings: {e}")
        return

    st.success("✅ Strategy settings saved")


def render(runtime: DashboardRuntime) -> None:
    """
    Render strategy settings page.

    Args:
        runtime: Started DashboardRuntime

    Displays:
        - Strategy name and enabled switch
        - One input per strategy parameter (number, checkbox or text)
        - Save and reset buttons, validation and save errors
        - Retry button when the strategy cannot be loaded
    """
    st.title("⚙️ Strategy Settings")

    try:
        strategy = runtime.fetch_strategy()
    except SchedulerError as e:
        st.error(f"⚠️ Failed to load strategy: {e}")
        if st.button("Retry"):
            st.rerun()
        return

    if strategy is None:
        st.warning("⚠️ No strategy configuration available.")
        if st.button("Retry"):
            st.rerun()
        return

    if strategy.description:
        st.caption(strategy.description)
    if strategy.last_updated is not None:
        st.caption(f"Last updated: {format_timestamp(strategy.last_updated, timeframe='1w')}")

    with st.form("strategy-form"):
        values: Dict[str, Any] = {
            "name": st.text_input("Strategy name", value=strategy.name, key=widget_key("name")),
            "enabled": st.toggle("Enabled", value=strategy.enabled, key=widget_key("enabled")),
        }

        if strategy.parameters:
            st.subheader("Parameters")
            for key, param in strategy.parameters.items():
                values[key] = _parameter_input(key, param)

        save_col, reset_col = st.columns([1, 1])
        submitted = save_col.form_submit_button("💾 Save settings", type="primary")
        reset = reset_col.form_submit_button("↩️ Reset")

    if reset:
        reset_form(st.session_state, strategy)
        st.rerun()

    if submitted:
        _save(runtime, strategy, values)

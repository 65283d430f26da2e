"""Advanced chart and statistical analysis page."""

from typing import Any, Dict, List, Optional, Sequence

import streamlit as st
from loguru import logger

from botdash.analysis import StatisticalAnalyzer
from botdash.charting import (
    ChartBounds,
    ChartState,
    ChartType,
    DrawingType,
    InteractionMode,
    PointerEvent,
    PointerEventKind,
    clear_drawings,
    data_to_pixel,
    handle_pointer,
    load_series,
    pan,
    reset,
    set_chart_type,
    set_drawing_type,
    set_mode,
    trend_line_segment,
    value_domain,
    visible_points,
    zoom_in,
    zoom_out,
)
from botdash.dashboard.charts import ChartBuilder
from botdash.dashboard.pages.overview import ANALYSIS_TARGET_KEY
from botdash.data.models import points_to_frame
from botdash.polling import DashboardRuntime, DashboardSnapshot, SchedulerError
from botdash.utils.formatting import format_value

MARKET_SERIES = "Market"

SERIES_KEY = "analysis_series"
STATE_KEY = "analysis_chart_state"
SELECTIONS_KEY = "analysis_seen_selections"

# Plotly reports selections in data space; they are mapped onto this nominal
# plot area before going through the pointer handler.
SELECTION_BOUNDS = ChartBounds(left=0, top=0, width=1000, height=1000)


def _series_for(snapshot: DashboardSnapshot, title: str) -> List[Any]:
    if title == MARKET_SERIES:
        return list(snapshot.market)
    return list(snapshot.features.get(title, []))


def _load(title: str, points: Sequence[Any]) -> None:
    """Freeze ``points`` as the analysed series and reset the chart for them."""
    st.session_state[SERIES_KEY] = {"title": title, "points": list(points)}

    state: Optional[ChartState] = st.session_state.get(STATE_KEY)
    if state is None:
        st.session_state[STATE_KEY] = ChartState.for_series(len(points))
    else:
        st.session_state[STATE_KEY] = load_series(state, len(points))

    st.session_state[SELECTIONS_KEY] = set()
    logger.debug(f"Loaded {len(points)} points of {title} into analysis view")


def _pointer_events(selection: Dict[str, Any], state: ChartState, points: Sequence[Any]) -> List[PointerEvent]:
    """
    Translate a Plotly selection into pointer events.

    A single clicked point becomes down+up; a box or multi-point selection
    becomes down at its first point, move to its last point, then up.
    """
    selected = sorted(
        (p for p in selection.get("points", []) if p.get("curve_number", 0) == 0),
        key=lambda p: p["point_index"],
    )
    if not selected:
        return []

    domain = value_domain(visible_points(state, points))

    def to_pixel(point: Dict[str, Any]):
        index = state.view.start + int(point["point_index"])
        return data_to_pixel(SELECTION_BOUNDS, index, float(point["y"]), state.view, domain)

    first_x, first_y = to_pixel(selected[0])
    events = [PointerEvent(PointerEventKind.DOWN, first_x, first_y)]

    if len(selected) > 1:
        last_x, last_y = to_pixel(selected[-1])
        events.append(PointerEvent(PointerEventKind.MOVE, last_x, last_y))

    events.append(PointerEvent(PointerEventKind.UP, first_x, first_y))
    return events


def _selection_signature(selection: Dict[str, Any]) -> tuple:
    return tuple(sorted(int(p["point_index"]) for p in selection.get("points", [])))


def _apply_selection(event: Any, title: str, points: Sequence[Any]) -> None:
    if event is None:
        return

    selection = event.get("selection") if isinstance(event, dict) else getattr(event, "selection", None)
    if not selection:
        return

    signature = _selection_signature(selection)
    seen = st.session_state[SELECTIONS_KEY]
    if not signature or signature in seen:
        return
    seen.add(signature)

    state: ChartState = st.session_state[STATE_KEY]
    for pointer_event in _pointer_events(selection, state, points):
        state = handle_pointer(state, pointer_event, points, SELECTION_BOUNDS, title=title)

    st.session_state[STATE_KEY] = state
    st.rerun()


def _toolbar(state: ChartState) -> ChartState:
    col1, col2, col3 = st.columns(3)

    with col1:
        chart_type = st.radio(
            "Chart type",
            [t.value for t in ChartType],
            index=list(ChartType).index(state.chart_type),
            horizontal=True,
            format_func=str.capitalize,
        )
    with col2:
        mode = st.radio(
            "Mode",
            [m.value for m in InteractionMode],
            index=list(InteractionMode).index(state.mode),
            horizontal=True,
            format_func=str.capitalize,
        )
    with col3:
        drawing_type = st.radio(
            "Drawing",
            [d.value for d in DrawingType],
            index=list(DrawingType).index(state.drawing_type),
            horizontal=True,
            format_func=str.capitalize,
            disabled=mode != InteractionMode.DRAW.value,
        )

    if ChartType(chart_type) is not state.chart_type:
        state = set_chart_type(state, ChartType(chart_type))
    if InteractionMode(mode) is not state.mode:
        state = set_mode(state, InteractionMode(mode))
    if DrawingType(drawing_type) is not state.drawing_type:
        state = set_drawing_type(state, DrawingType(drawing_type))

    buttons = st.columns(6)
    step = max(1, state.view.span // 4)

    if buttons[0].button("🔍 Zoom in", use_container_width=True):
        state = zoom_in(state)
    if buttons[1].button("🔎 Zoom out", use_container_width=True):
        state = zoom_out(state)
    if buttons[2].button("◀ Pan", use_container_width=True):
        state = pan(state, -step)
    if buttons[3].button("Pan ▶", use_container_width=True):
        state = pan(state, step)
    if buttons[4].button("↺ Reset", use_container_width=True):
        state = reset(state)
    if buttons[5].button("🧹 Clear", use_container_width=True):
        state = clear_drawings(state)

    return state


def _render_chart(title: str, points: Sequence[Any]) -> None:
    state = _toolbar(st.session_state[STATE_KEY])
    st.session_state[STATE_KEY] = state

    shown = visible_points(state, points)
    segments = {
        line.id: segment
        for line in state.trend_lines
        if (segment := trend_line_segment(line, state, points)) is not None
    }
    temp_segment = (
        trend_line_segment(state.temp_line, state, points) if state.temp_line is not None else None
    )
    vertical_positions = {
        line.id: points[line.index].timestamp
        for line in state.reference_lines
        if line.orientation is DrawingType.VERTICAL
        and state.view.contains(line.index)
        and line.index < len(points)
    }

    fig = ChartBuilder.series_chart(
        points_to_frame(shown),
        title=title,
        chart_type=state.chart_type,
        value_range=value_domain(shown) if shown else None,
        trend_segments=segments,
        reference_lines=state.reference_lines,
        vertical_positions=vertical_positions,
        temp_segment=temp_segment,
    )

    if state.mode is InteractionMode.DRAW:
        st.caption(
            "Click a point to place a line, or box-select a range to draw a trend line."
        )
        event = st.plotly_chart(
            fig,
            use_container_width=True,
            key=f"analysis-chart-{title}",
            on_select="rerun",
            selection_mode=("points", "box"),
        )
        _apply_selection(event, title, points)
    else:
        st.plotly_chart(fig, use_container_width=True, key=f"analysis-chart-{title}")

    st.caption(
        f"Showing points {state.view.start}–{state.view.end} of {state.series_length} · "
        f"{len(state.trend_lines)} trend line(s), {len(state.reference_lines)} reference line(s)"
    )


def _render_statistics(title: str, points: Sequence[Any]) -> None:
    """Render summary metrics and the four statistics tabs."""
    report = StatisticalAnalyzer().analyze(points, title=title)
    summary = report.summary

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Mean", format_value(title, summary.mean))
    col2.metric("Median", format_value(title, summary.median))
    col3.metric("Std. Deviation", format_value(title, summary.std_dev))
    col4.metric("Range", format_value(title, summary.range))

    col1, col2, col3 = st.columns(3)
    col1.metric("Min", format_value(title, summary.min))
    col2.metric("Max", format_value(title, summary.max))
    col3.metric("Data Points", summary.count)

    tab1, tab2, tab3, tab4 = st.tabs(["Distribution", "Cumulative", "Moving Averages", "% Change"])

    with tab1:
        st.plotly_chart(ChartBuilder.distribution_chart(report), use_container_width=True)
    with tab2:
        st.plotly_chart(ChartBuilder.cumulative_chart(report), use_container_width=True)
    with tab3:
        st.plotly_chart(
            ChartBuilder.moving_average_chart(points_to_frame(points), report.moving_averages),
            use_container_width=True,
        )
    with tab4:
        st.plotly_chart(ChartBuilder.percentage_change_chart(report), use_container_width=True)


def render(runtime: DashboardRuntime) -> None:
    """
    Render analysis page.

    The analysed series is frozen when it is opened so drawn annotations stay
    aligned with their indices; "Load latest data" replaces it explicitly.

    Args:
        runtime: Started DashboardRuntime
    """
    st.title("🔬 Analysis")

    try:
        snapshot = runtime.snapshot()
    except SchedulerError as e:
        st.error(f"⚠️ Failed to load data: {e}")
        return

    options = list(snapshot.features.keys())
    if snapshot.market:
        options.append(MARKET_SERIES)

    if not options:
        st.warning("⚠️ No series available for analysis.")
        return

    target = st.session_state.get(ANALYSIS_TARGET_KEY, options[0])
    if target not in options:
        target = options[0]

    col1, col2 = st.columns([3, 1])
    title = col1.selectbox("Series", options, index=options.index(target))
    st.session_state[ANALYSIS_TARGET_KEY] = title

    current = st.session_state.get(SERIES_KEY)
    with col2:
        st.write("")
        reload_clicked = st.button("🔄 Load latest data", use_container_width=True)

    if current is None or current["title"] != title or reload_clicked:
        _load(title, _series_for(snapshot, title))
        current = st.session_state[SERIES_KEY]

    points = current["points"]
    if not points:
        st.info("No data points for this series yet.")
        return

    chart_tab, stats_tab = st.tabs(["📈 Chart", "📊 Statistics"])

    with chart_tab:
        _render_chart(title, points)

    with stats_tab:
        _render_statistics(title, points)

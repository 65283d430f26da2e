"""
Chart interaction state for the advanced chart view.

The chart is driven by an immutable ChartState. Every user action is a pure
function (state, ...) -> new state:

    - set_mode / set_drawing_type / set_chart_type
    - handle_pointer for pointer down/move/up/leave in draw mode
    - zoom_in / zoom_out / pan / reset / clear_drawings / load_series

Pointer coordinates are mapped to data space with pixel_to_data(), using the
chart's bounding box, the visible index range and a value domain padded 5%
below the minimum and 5% above the maximum.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Sequence, Tuple

from loguru import logger

from botdash.charting import view_range as vr
from botdash.charting.view_range import ViewRange
from botdash.utils.formatting import format_timestamp, format_value

ANNOTATION_COLOR = "#ff0000"
DOMAIN_PADDING_LOW = 0.95
DOMAIN_PADDING_HIGH = 1.05


class InteractionMode(Enum):
    """Mutually exclusive pointer modes."""

    VIEW = "view"
    PAN = "pan"
    ZOOM = "zoom"
    DRAW = "draw"


class DrawingType(Enum):
    """Annotation drawn in draw mode."""

    TRENDLINE = "trendline"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ChartType(Enum):
    """Series renderer."""

    LINE = "line"
    AREA = "area"
    BAR = "bar"


class PointerEventKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


# Any mode may be selected from any other; the table is the single place
# to restrict that.
MODE_TRANSITIONS: Dict[InteractionMode, FrozenSet[InteractionMode]] = {
    InteractionMode.VIEW: frozenset(InteractionMode),
    InteractionMode.PAN: frozenset(InteractionMode),
    InteractionMode.ZOOM: frozenset(InteractionMode),
    InteractionMode.DRAW: frozenset(InteractionMode),
}


@dataclass(frozen=True)
class ChartBounds:
    """Rendered bounding box of the plot area, in pixels."""

    left: float
    top: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("ChartBounds width and height must be positive")


@dataclass(frozen=True)
class PointerEvent:
    """Pointer event in client (page) coordinates."""

    kind: PointerEventKind
    x: float
    y: float = 0.0


@dataclass(frozen=True)
class DataCoordinate:
    index: int
    value: float


@dataclass(frozen=True)
class TrendLine:
    """Segment between two series indices."""

    id: str
    start_index: int
    end_index: int
    color: str = ANNOTATION_COLOR
    label: Optional[str] = None


@dataclass(frozen=True)
class ReferenceLine:
    """
    Horizontal or vertical marker.

    Horizontal lines sit at ``value`` (index is 0); vertical lines sit at
    ``index`` (value is 0).
    """

    id: str
    orientation: DrawingType
    index: int
    value: float
    label: str
    color: str = ANNOTATION_COLOR


@dataclass(frozen=True)
class ChartState:
    """
    Complete view state of one chart.

    Attributes:
        series_length: Number of points in the underlying series
        view: Visible index window
        mode: Active pointer mode
        drawing_type: Annotation created in draw mode
        chart_type: Series renderer
        trend_lines: Committed trend lines
        reference_lines: Committed horizontal/vertical lines
        temp_line: Trend line being drawn (None when idle)
        next_id: Counter used to build annotation ids
    """

    series_length: int
    view: ViewRange
    mode: InteractionMode = InteractionMode.VIEW
    drawing_type: DrawingType = DrawingType.TRENDLINE
    chart_type: ChartType = ChartType.LINE
    trend_lines: Tuple[TrendLine, ...] = ()
    reference_lines: Tuple[ReferenceLine, ...] = ()
    temp_line: Optional[TrendLine] = None
    next_id: int = 1

    @property
    def is_drawing(self) -> bool:
        return self.temp_line is not None

    @classmethod
    def for_series(cls, series_length: int, **kwargs: Any) -> "ChartState":
        return cls(series_length=series_length, view=vr.full_range(series_length), **kwargs)


def _value_of(point: Any) -> float:
    if isinstance(point, Mapping):
        return float(point["value"])
    return float(point.value)


def _timestamp_of(point: Any) -> Any:
    if isinstance(point, Mapping):
        return point["timestamp"]
    return point.timestamp


def value_domain(points: Sequence[Any]) -> Tuple[float, float]:
    """
    Y-axis domain of the visible points: [min * 0.95, max * 1.05].

    Raises:
        ValueError: If points is empty
    """
    if not points:
        raise ValueError("value_domain requires at least one point")
    values = [_value_of(point) for point in points]
    return min(values) * DOMAIN_PADDING_LOW, max(values) * DOMAIN_PADDING_HIGH


def _clamp_ratio(ratio: float) -> float:
    return min(max(ratio, 0.0), 1.0)


def pixel_to_data(
    bounds: ChartBounds,
    x: float,
    y: float,
    view: ViewRange,
    domain: Tuple[float, float],
) -> DataCoordinate:
    """
    Map a pointer position to a series index and value.

    index = floor(x_ratio * (visible_length - 1)) + view.start
    value = domain_min + (1 - y_ratio) * (domain_max - domain_min)

    Ratios are measured inside ``bounds`` and clamped to [0, 1].

    Example:
        >>> bounds = ChartBounds(left=0, top=0, width=100, height=100)
        >>> pixel_to_data(bounds, 50, 25, ViewRange(10, 20), (0.0, 200.0))
        DataCoordinate(index=15, value=150.0)
    """
    x_ratio = _clamp_ratio((x - bounds.left) / bounds.width)
    y_ratio = _clamp_ratio((y - bounds.top) / bounds.height)

    index = math.floor(x_ratio * (view.length - 1)) + view.start
    domain_min, domain_max = domain
    value = domain_min + (1 - y_ratio) * (domain_max - domain_min)
    return DataCoordinate(index=index, value=value)


def data_to_pixel(
    bounds: ChartBounds,
    index: int,
    value: float,
    view: ViewRange,
    domain: Tuple[float, float],
) -> Tuple[float, float]:
    """
    Inverse of pixel_to_data: position of a data point inside ``bounds``.

    Used to replay selections reported in data space (as Plotly does)
    through the pointer pipeline. The x position sits half an index past
    the point so that flooring in pixel_to_data recovers the same index.
    """
    if view.length > 1:
        x_ratio = (index - view.start + 0.5) / (view.length - 1)
    else:
        x_ratio = 0.0

    domain_min, domain_max = domain
    if domain_max != domain_min:
        y_ratio = 1 - (value - domain_min) / (domain_max - domain_min)
    else:
        y_ratio = 0.5

    return (
        bounds.left + _clamp_ratio(x_ratio) * bounds.width,
        bounds.top + _clamp_ratio(y_ratio) * bounds.height,
    )


def visible_points(state: ChartState, points: Sequence[Any]) -> Sequence[Any]:
    """Slice of ``points`` inside the state's view range."""
    return points[state.view.start : state.view.end + 1]


# ---------------------------------------------------------------------------
# Mode and toolbar actions
# ---------------------------------------------------------------------------


def set_mode(state: ChartState, mode: InteractionMode) -> ChartState:
    """
    Switch pointer mode. An in-progress drawing is abandoned.

    Raises:
        ValueError: If the transition is not allowed
    """
    if mode not in MODE_TRANSITIONS[state.mode]:
        raise ValueError(f"Cannot switch from {state.mode.value} to {mode.value}")
    return replace(state, mode=mode, temp_line=None)


def set_drawing_type(state: ChartState, drawing_type: DrawingType) -> ChartState:
    return replace(state, drawing_type=drawing_type, temp_line=None)


def set_chart_type(state: ChartState, chart_type: ChartType) -> ChartState:
    return replace(state, chart_type=chart_type)


def zoom_in(state: ChartState) -> ChartState:
    return replace(state, view=vr.zoom_in(state.view, state.series_length))


def zoom_out(state: ChartState) -> ChartState:
    return replace(state, view=vr.zoom_out(state.view, state.series_length))


def pan(state: ChartState, offset: int) -> ChartState:
    return replace(state, view=vr.pan(state.view, offset, state.series_length))


def clear_drawings(state: ChartState) -> ChartState:
    """Drop every annotation, keeping the current view."""
    return replace(state, trend_lines=(), reference_lines=(), temp_line=None)


def reset(state: ChartState) -> ChartState:
    """Restore the full range and drop every annotation."""
    return replace(
        clear_drawings(state),
        view=vr.full_range(state.series_length),
    )


def load_series(state: ChartState, series_length: int) -> ChartState:
    """Replace the underlying data: full range, no annotations."""
    return replace(
        state,
        series_length=series_length,
        view=vr.full_range(series_length),
        trend_lines=(),
        reference_lines=(),
        temp_line=None,
    )


# ---------------------------------------------------------------------------
# Pointer handling
# ---------------------------------------------------------------------------


def _pointer_down(
    state: ChartState,
    coordinate: DataCoordinate,
    points: Sequence[Any],
    title: str,
) -> ChartState:
    if state.drawing_type is DrawingType.TRENDLINE:
        temp_line = TrendLine(
            id=f"trend-{state.next_id}",
            start_index=coordinate.index,
            end_index=coordinate.index,
        )
        return replace(state, temp_line=temp_line, next_id=state.next_id + 1)

    if state.drawing_type is DrawingType.HORIZONTAL:
        line = ReferenceLine(
            id=f"h-line-{state.next_id}",
            orientation=DrawingType.HORIZONTAL,
            index=0,
            value=coordinate.value,
            label=format_value(title, coordinate.value),
        )
    else:
        if 0 <= coordinate.index < len(points):
            label = format_timestamp(_timestamp_of(points[coordinate.index]))
        else:
            label = format_timestamp(None)
        line = ReferenceLine(
            id=f"v-line-{state.next_id}",
            orientation=DrawingType.VERTICAL,
            index=coordinate.index,
            value=0.0,
            label=label,
        )

    logger.debug(f"Added {line.orientation.value} reference line {line.id}: {line.label}")
    return replace(
        state,
        reference_lines=state.reference_lines + (line,),
        next_id=state.next_id + 1,
    )


def _pointer_release(state: ChartState) -> ChartState:
    """Commit the temp line if it spans at least two indices, otherwise drop it."""
    line = state.temp_line
    if line is None:
        return state

    if line.start_index != line.end_index:
        logger.debug(f"Committed trend line {line.id}: {line.start_index} -> {line.end_index}")
        return replace(state, trend_lines=state.trend_lines + (line,), temp_line=None)

    return replace(state, temp_line=None)


def handle_pointer(
    state: ChartState,
    event: PointerEvent,
    points: Sequence[Any],
    bounds: ChartBounds,
    title: str = "",
) -> ChartState:
    """
    Apply a pointer event to the chart state.

    Only draw mode reacts. Down starts a trend line or drops a
    horizontal/vertical line; move extends the trend line's end index; up
    (or leave while drawing) commits it when its start and end differ.

    Args:
        state: Current chart state
        event: Pointer event in client coordinates
        points: Full underlying series (dicts or records with timestamp/value)
        bounds: Plot area bounding box
        title: Feature name used to format labels

    Returns:
        New chart state (the same object if the event is ignored)
    """
    if state.mode is not InteractionMode.DRAW:
        return state

    if event.kind in (PointerEventKind.UP, PointerEventKind.LEAVE):
        return _pointer_release(state)

    if event.kind is PointerEventKind.MOVE and state.temp_line is None:
        return state

    shown = visible_points(state, points)
    if not shown:
        return state

    coordinate = pixel_to_data(bounds, event.x, event.y, state.view, value_domain(shown))

    if event.kind is PointerEventKind.DOWN:
        return _pointer_down(state, coordinate, points, title)

    return replace(state, temp_line=replace(state.temp_line, end_index=coordinate.index))


def trend_line_segment(
    line: TrendLine, state: ChartState, points: Sequence[Any]
) -> Optional[Tuple[Tuple[Any, float], Tuple[Any, float]]]:
    """
    Endpoints of a trend line as (timestamp, value) pairs.

    Returns None when either end lies outside the visible window.
    """
    if not (state.view.contains(line.start_index) and state.view.contains(line.end_index)):
        return None
    if max(line.start_index, line.end_index) >= len(points):
        return None

    start = points[line.start_index]
    end = points[line.end_index]
    return (
        (_timestamp_of(start), _value_of(start)),
        (_timestamp_of(end), _value_of(end)),
    )

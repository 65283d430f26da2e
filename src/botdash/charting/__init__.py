"""
Interactive chart state: zoom/pan window and user-drawn annotations.

Key Components:
    - ViewRange: Inclusive index window with zoom and pan arithmetic
    - ChartState: Immutable view state of the advanced chart
    - handle_pointer: Pure pointer-event handler for draw mode
"""

from botdash.charting.interaction import (
    ChartBounds,
    ChartState,
    ChartType,
    DataCoordinate,
    DrawingType,
    InteractionMode,
    PointerEvent,
    PointerEventKind,
    ReferenceLine,
    TrendLine,
    clear_drawings,
    data_to_pixel,
    handle_pointer,
    load_series,
    pan,
    pixel_to_data,
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
from botdash.charting.view_range import ViewRange, full_range

__all__ = [
    "ChartBounds",
    "ChartState",
    "ChartType",
    "DataCoordinate",
    "DrawingType",
    "InteractionMode",
    "PointerEvent",
    "PointerEventKind",
    "ReferenceLine",
    "TrendLine",
    "ViewRange",
    "clear_drawings",
    "data_to_pixel",
    "full_range",
    "handle_pointer",
    "load_series",
    "pan",
    "pixel_to_data",
    "reset",
    "set_chart_type",
    "set_drawing_type",
    "set_mode",
    "trend_line_segment",
    "value_domain",
    "visible_points",
    "zoom_in",
    "zoom_out",
]

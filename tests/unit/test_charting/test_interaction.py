"""Unit tests for chart interaction state and pointer handling."""

import pytest

from botdash.charting.interaction import (
    MODE_TRANSITIONS,
    ChartBounds,
    ChartState,
    ChartType,
    DataCoordinate,
    DrawingType,
    InteractionMode,
    PointerEvent,
    PointerEventKind,
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
from botdash.charting.view_range import ViewRange
from botdash.utils.formatting import format_timestamp

BOUNDS = ChartBounds(left=0, top=0, width=100, height=100)

DOWN = PointerEventKind.DOWN
MOVE = PointerEventKind.MOVE
UP = PointerEventKind.UP
LEAVE = PointerEventKind.LEAVE


@pytest.fixture
def points() -> list:
    """100 points with values 100..199, one second apart."""
    return [
        {"timestamp": f"2024-03-01T12:{i // 60:02d}:{i % 60:02d}", "value": 100.0 + i}
        for i in range(100)
    ]


@pytest.fixture
def drawing(points: list) -> ChartState:
    """State in draw mode over the full series."""
    return ChartState.for_series(len(points), mode=InteractionMode.DRAW)


def pointer(state: ChartState, points: list, kind: PointerEventKind, x: float, y: float = 50) -> ChartState:
    return handle_pointer(state, PointerEvent(kind, x, y), points, BOUNDS, title="CPU Usage")


class TestCoordinates:
    """Tests for pixel/data mapping."""

    def test_pixel_to_data(self) -> None:
        """Test the documented mapping example."""
        coordinate = pixel_to_data(BOUNDS, 50, 25, ViewRange(10, 20), (0.0, 200.0))

        assert coordinate == DataCoordinate(index=15, value=150.0)

    def test_pixel_to_data_clamps(self) -> None:
        """Test pointer positions outside the plot clamp to its edges."""
        view = ViewRange(10, 20)

        assert pixel_to_data(BOUNDS, -30, 500, view, (0.0, 200.0)) == DataCoordinate(10, 0.0)
        assert pixel_to_data(BOUNDS, 130, -5, view, (0.0, 200.0)) == DataCoordinate(20, 200.0)

    def test_pixel_to_data_with_offset_bounds(self) -> None:
        bounds = ChartBounds(left=200, top=100, width=100, height=100)

        assert pixel_to_data(bounds, 250, 125, ViewRange(10, 20), (0.0, 200.0)).index == 15

    def test_value_domain(self) -> None:
        low, high = value_domain([{"timestamp": 0, "value": 100}, {"timestamp": 1, "value": 200}])

        assert low == pytest.approx(95.0)
        assert high == pytest.approx(210.0)

    def test_value_domain_empty(self) -> None:
        with pytest.raises(ValueError):
            value_domain([])

    @pytest.mark.parametrize("index", [10, 11, 15, 19, 20])
    def test_data_to_pixel_inverts(self, index: int) -> None:
        """Test data_to_pixel maps back to the same index and value."""
        view = ViewRange(10, 20)
        domain = (50.0, 150.0)

        x, y = data_to_pixel(BOUNDS, index, 120.0, view, domain)
        coordinate = pixel_to_data(BOUNDS, x, y, view, domain)

        assert coordinate.index == index
        assert coordinate.value == pytest.approx(120.0)

    def test_invalid_bounds(self) -> None:
        with pytest.raises(ValueError):
            ChartBounds(left=0, top=0, width=0, height=10)


class TestModes:
    """Tests for the mode state machine and toolbar actions."""

    def test_every_transition_allowed(self) -> None:
        for mode, targets in MODE_TRANSITIONS.items():
            assert targets == frozenset(InteractionMode)

    def test_pointer_ignored_outside_draw_mode(self, points: list) -> None:
        """Test view, pan and zoom modes ignore pointer events."""
        for mode in (InteractionMode.VIEW, InteractionMode.PAN, InteractionMode.ZOOM):
            state = ChartState.for_series(len(points), mode=mode)
            assert pointer(state, points, DOWN, 10) is state

    def test_leaving_draw_discards_temp_line(self, drawing: ChartState, points: list) -> None:
        state = pointer(drawing, points, DOWN, 10)
        assert state.is_drawing

        state = set_mode(state, InteractionMode.VIEW)

        assert not state.is_drawing
        assert state.trend_lines == ()

    def test_invalid_transition_rejected(self, drawing: ChartState, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(MODE_TRANSITIONS, InteractionMode.DRAW, frozenset({InteractionMode.DRAW}))

        with pytest.raises(ValueError, match="Cannot switch"):
            set_mode(drawing, InteractionMode.PAN)

    def test_drawing_type_change_discards_temp_line(self, drawing: ChartState, points: list) -> None:
        state = pointer(drawing, points, DOWN, 10)

        state = set_drawing_type(state, DrawingType.HORIZONTAL)

        assert state.temp_line is None
        assert state.drawing_type is DrawingType.HORIZONTAL

    def test_chart_type(self, drawing: ChartState) -> None:
        assert set_chart_type(drawing, ChartType.BAR).chart_type is ChartType.BAR

    def test_zoom_and_pan(self, drawing: ChartState) -> None:
        state = zoom_in(drawing)
        assert state.view == ViewRange(15, 84)

        state = pan(state, -100)
        assert state.view == ViewRange(0, 69)

        state = zoom_out(state)
        assert state.view.span == 99


class TestTrendLines:
    """Tests for drawing trend lines."""

    def test_draw_and_commit(self, drawing: ChartState, points: list) -> None:
        """Test down, move and up create a committed trend line."""
        state = pointer(drawing, points, DOWN, 0)
        assert state.temp_line == TrendLine(id="trend-1", start_index=0, end_index=0)

        state = pointer(state, points, MOVE, 50)
        assert state.temp_line.end_index == 49

        state = pointer(state, points, UP, 50)

        assert state.temp_line is None
        assert state.trend_lines == (TrendLine(id="trend-1", start_index=0, end_index=49),)
        assert state.next_id == 2

    def test_zero_length_line_dropped(self, drawing: ChartState, points: list) -> None:
        """Test a click without movement draws nothing."""
        state = pointer(drawing, points, DOWN, 30)
        state = pointer(state, points, UP, 30)

        assert state.trend_lines == ()
        assert state.temp_line is None

    def test_leave_commits(self, drawing: ChartState, points: list) -> None:
        state = pointer(drawing, points, DOWN, 10)
        state = pointer(state, points, MOVE, 90)
        state = pointer(state, points, LEAVE, 120)

        assert len(state.trend_lines) == 1

    def test_move_without_drawing_ignored(self, drawing: ChartState, points: list) -> None:
        assert pointer(drawing, points, MOVE, 40) is drawing

    def test_ids_are_unique(self, drawing: ChartState, points: list) -> None:
        state = drawing
        for start, end in [(0, 20), (30, 60), (70, 90)]:
            state = pointer(state, points, DOWN, start)
            state = pointer(state, points, MOVE, end)
            state = pointer(state, points, UP, end)

        assert [line.id for line in state.trend_lines] == ["trend-1", "trend-2", "trend-3"]

    def test_indices_respect_view(self, points: list) -> None:
        """Test pointer positions map into the zoomed window."""
        state = ChartState(series_length=len(points), view=ViewRange(10, 20), mode=InteractionMode.DRAW)

        state = pointer(state, points, DOWN, 0)
        state = pointer(state, points, MOVE, 100)
        state = pointer(state, points, UP, 100)

        assert state.trend_lines[0].start_index == 10
        assert state.trend_lines[0].end_index == 20

    def test_segment(self, drawing: ChartState, points: list) -> None:
        line = TrendLine(id="trend-1", start_index=5, end_index=10)

        segment = trend_line_segment(line, drawing, points)

        assert segment == (
            (points[5]["timestamp"], 105.0),
            (points[10]["timestamp"], 110.0),
        )

    def test_segment_hidden_outside_view(self, points: list) -> None:
        state = ChartState(series_length=len(points), view=ViewRange(20, 40))
        line = TrendLine(id="trend-1", start_index=5, end_index=30)

        assert trend_line_segment(line, state, points) is None


class TestReferenceLines:
    """Tests for horizontal and vertical reference lines."""

    def test_horizontal_line(self, drawing: ChartState, points: list) -> None:
        """Test a single pointer-down drops a labelled horizontal line."""
        state = set_drawing_type(drawing, DrawingType.HORIZONTAL)

        state = pointer(state, points, DOWN, 10, y=50)

        (line,) = state.reference_lines
        low, high = value_domain(points)
        assert line.id == "h-line-1"
        assert line.orientation is DrawingType.HORIZONTAL
        assert line.index == 0
        assert line.value == pytest.approx(low + 0.5 * (high - low))
        assert line.label == f"{line.value:.1f}%"
        assert state.temp_line is None

    def test_vertical_line(self, drawing: ChartState, points: list) -> None:
        """Test a vertical line is labelled with its point's time."""
        state = set_drawing_type(drawing, DrawingType.VERTICAL)

        state = pointer(state, points, DOWN, 100)

        (line,) = state.reference_lines
        assert line.id == "v-line-1"
        assert line.index == 99
        assert line.label == format_timestamp(points[99]["timestamp"])
        assert line.label == "12:01:39"


class TestResets:
    """Tests for reset, clear_drawings and load_series."""

    @pytest.fixture
    def annotated(self, drawing: ChartState, points: list) -> ChartState:
        state = zoom_in(drawing)
        state = pointer(state, points, DOWN, 0)
        state = pointer(state, points, MOVE, 60)
        state = pointer(state, points, UP, 60)
        state = set_drawing_type(state, DrawingType.HORIZONTAL)
        return pointer(state, points, DOWN, 10)

    def test_reset(self, annotated: ChartState) -> None:
        """Test reset restores the full range and drops annotations."""
        assert annotated.trend_lines and annotated.reference_lines

        state = reset(annotated)

        assert state.view == ViewRange(0, 99)
        assert state.trend_lines == ()
        assert state.reference_lines == ()

    def test_clear_keeps_view(self, annotated: ChartState) -> None:
        state = clear_drawings(annotated)

        assert state.view == annotated.view
        assert state.trend_lines == () and state.reference_lines == ()

    def test_load_series(self, annotated: ChartState) -> None:
        """Test new data resets the range and drops annotations."""
        state = load_series(annotated, 40)

        assert state.series_length == 40
        assert state.view == ViewRange(0, 39)
        assert state.trend_lines == () and state.reference_lines == ()
        assert state.mode is InteractionMode.DRAW

    def test_visible_points(self, points: list) -> None:
        state = ChartState(series_length=len(points), view=ViewRange(5, 7))

        assert [p["value"] for p in visible_points(state, points)] == [105.0, 106.0, 107.0]

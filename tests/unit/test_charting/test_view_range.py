"""Unit tests for zoom and pan arithmetic."""

import pytest

from botdash.charting.view_range import ViewRange, full_range, pan, zoom_in, zoom_out


class TestViewRange:
    """Tests for the ViewRange value object."""

    def test_properties(self) -> None:
        view = ViewRange(10, 20)

        assert view.span == 10
        assert view.length == 11
        assert view.midpoint == 15
        assert view.contains(10) and view.contains(20)
        assert not view.contains(21)
        assert view.as_list() == [10, 20]

    @pytest.mark.parametrize("start,end", [(-1, 5), (6, 5)])
    def test_invalid(self, start: int, end: int) -> None:
        with pytest.raises(ValueError):
            ViewRange(start, end)

    def test_full_range(self) -> None:
        assert full_range(100) == ViewRange(0, 99)
        assert full_range(1) == ViewRange(0, 0)
        with pytest.raises(ValueError):
            full_range(0)


class TestZoom:
    """Tests for zoom_in and zoom_out."""

    def test_zoom_in_full_range(self) -> None:
        """Test zooming into [0, 99] keeps 70% of the span around the middle."""
        assert zoom_in(ViewRange(0, 99), 100) == ViewRange(15, 84)

    def test_zoom_in_minimum_span(self) -> None:
        """Test a span of 2 cannot shrink further."""
        view = ViewRange(40, 42)

        assert zoom_in(view, 100) is view
        assert zoom_in(ViewRange(0, 3), 100).span == 2

    def test_zoom_in_never_below_minimum(self) -> None:
        view = ViewRange(0, 99)
        for _ in range(30):
            view = zoom_in(view, 100)
            assert view.span >= 2

    def test_zoom_out(self) -> None:
        assert zoom_out(ViewRange(40, 60), 100) == ViewRange(35, 65)

    def test_zoom_out_shifts_at_edges(self) -> None:
        """Test growing near an edge shifts the window instead of cutting it."""
        assert zoom_out(ViewRange(0, 10), 100) == ViewRange(0, 15)
        assert zoom_out(ViewRange(90, 99), 100) == ViewRange(86, 99)

    def test_zoom_out_capped_at_full_range(self) -> None:
        assert zoom_out(ViewRange(0, 99), 100) == ViewRange(0, 99)
        assert zoom_out(ViewRange(10, 80), 100) == ViewRange(0, 99)

    def test_zoom_out_grows_small_spans(self) -> None:
        assert zoom_out(ViewRange(5, 5), 100).span == 1
        assert zoom_out(ViewRange(5, 6), 100).span == 2

    def test_zoom_round_trip_stays_in_bounds(self) -> None:
        """Test arbitrary zoom sequences stay within the series."""
        view = ViewRange(0, 49)
        for step in [zoom_in, zoom_in, zoom_out, zoom_in, zoom_out, zoom_out, zoom_out]:
            view = step(view, 50)
            assert 0 <= view.start <= view.end <= 49


class TestPan:
    """Tests for pan."""

    def test_pan_clamps_left(self) -> None:
        assert pan(ViewRange(10, 20), -15, 100) == ViewRange(0, 10)

    def test_pan_clamps_right(self) -> None:
        assert pan(ViewRange(80, 90), 50, 100) == ViewRange(89, 99)

    def test_pan_keeps_span(self) -> None:
        for offset in range(-120, 121, 7):
            view = pan(ViewRange(30, 55), offset, 100)
            assert view.span == 25
            assert 0 <= view.start and view.end <= 99

    def test_pan_full_range_is_noop(self) -> None:
        assert pan(ViewRange(0, 9), 3, 10) == ViewRange(0, 9)

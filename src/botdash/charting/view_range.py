"""Zoom and pan arithmetic over an inclusive index window."""

import math
from dataclasses import dataclass

ZOOM_IN_FACTOR = 0.7
ZOOM_OUT_FACTOR = 1.5
MIN_SPAN = 2


@dataclass(frozen=True)
class ViewRange:
    """
    Inclusive window [start, end] into a series.

    Attributes:
        start: First visible index
        end: Last visible index
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.start > self.end:
            raise ValueError(f"start ({self.start}) must be <= end ({self.end})")

    @property
    def span(self) -> int:
        """Distance between the first and last visible index."""
        return self.end - self.start

    @property
    def length(self) -> int:
        """Number of visible points."""
        return self.span + 1

    @property
    def midpoint(self) -> int:
        return (self.start + self.end) // 2

    def contains(self, index: int) -> bool:
        return self.start <= index <= self.end

    def as_list(self) -> list:
        return [self.start, self.end]


def _check_length(series_length: int) -> None:
    if series_length < 1:
        raise ValueError(f"series_length must be >= 1, got {series_length}")


def full_range(series_length: int) -> ViewRange:
    """Window covering the whole series."""
    _check_length(series_length)
    return ViewRange(0, series_length - 1)


def _place(midpoint: int, span: int, series_length: int) -> ViewRange:
    """Center a window of ``span`` on ``midpoint``, shifted to fit inside the series."""
    last = series_length - 1
    span = min(span, last)
    start = max(0, midpoint - span // 2)
    end = start + span
    if end > last:
        end = last
        start = end - span
    return ViewRange(start, end)


def zoom_in(view: ViewRange, series_length: int) -> ViewRange:
    """
    Shrink the window to 70% of its span around the current midpoint.

    The span never drops below 2; a window already at that size is
    returned unchanged.

    Example:
        >>> zoom_in(ViewRange(0, 99), 100)
        ViewRange(start=15, end=84)
    """
    _check_length(series_length)
    if view.span <= MIN_SPAN:
        return view

    new_span = max(MIN_SPAN, math.floor(view.span * ZOOM_IN_FACTOR))
    return _place(view.midpoint, new_span, series_length)


def zoom_out(view: ViewRange, series_length: int) -> ViewRange:
    """
    Grow the window to 150% of its span around the current midpoint.

    The window is clamped to [0, series_length - 1]; near an edge it is
    shifted rather than cut so the new span is kept where possible.

    Example:
        >>> zoom_out(ViewRange(40, 60), 100)
        ViewRange(start=35, end=65)
    """
    _check_length(series_length)
    # spans of 0 or 1 would not grow under floor(span * 1.5)
    new_span = max(view.span + 1, math.floor(view.span * ZOOM_OUT_FACTOR))
    return _place(view.midpoint, min(new_span, series_length - 1), series_length)


def pan(view: ViewRange, offset: int, series_length: int) -> ViewRange:
    """
    Move the window by ``offset`` indices, keeping its span.

    Example:
        >>> pan(ViewRange(10, 20), -15, 100)
        ViewRange(start=0, end=10)
    """
    _check_length(series_length)
    last = series_length - 1
    span = min(view.span, last)
    start = min(max(0, view.start + offset), last - span)
    return ViewRange(start, start + span)

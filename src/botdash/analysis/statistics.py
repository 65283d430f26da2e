"""Descriptive statistics for a single metric series."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger

from botdash.utils.formatting import format_value

Timestamp = Union[int, str]

BUCKET_COUNT = 10
MOVING_AVERAGE_WINDOWS = (5, 10, 20)


@dataclass(frozen=True)
class SummaryStatistics:
    """Descriptive statistics of a series (population standard deviation)."""

    count: int
    min: float
    max: float
    sum: float
    mean: float
    median: float
    std_dev: float

    @property
    def range(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class DistributionBucket:
    """One bar of the fixed-width histogram."""

    range_label: str
    count: int
    midpoint: float


@dataclass(frozen=True)
class CumulativePoint:
    """Share of samples at or below a bucket, in percent."""

    range_label: str
    midpoint: float
    cumulative: float


@dataclass(frozen=True)
class MovingAveragePoint:
    """Simple moving average at one index; ``ma`` is None before the window fills."""

    index: int
    timestamp: Timestamp
    ma: Optional[float]


@dataclass(frozen=True)
class PercentageChangePoint:
    """Change relative to the previous sample, in percent."""

    timestamp: Timestamp
    percent_change: float


def _extract(points: Sequence[Any]) -> tuple:
    """Split points into (timestamps, values array); accepts dicts or records."""
    timestamps = []
    values = []
    for point in points:
        if isinstance(point, Mapping):
            timestamps.append(point["timestamp"])
            values.append(point["value"])
        else:
            timestamps.append(point.timestamp)
            values.append(point.value)
    return timestamps, np.asarray(values, dtype=float)


def _require_values(values: np.ndarray) -> None:
    if values.size == 0:
        raise ValueError("Statistics require a non-empty series")


def summary_statistics(values: Sequence[float]) -> SummaryStatistics:
    """
    Compute count, min, max, sum, mean, median and standard deviation.

    The median averages the two middle values for even counts. The standard
    deviation is the population one: sqrt(mean of squared deviations).

    Args:
        values: Non-empty numeric sequence

    Returns:
        SummaryStatistics

    Raises:
        ValueError: If values is empty

    Example:
        >>> stats = summary_statistics([1, 2, 3, 4, 5])
        >>> stats.mean, stats.median, round(stats.std_dev, 3)
        (3.0, 3.0, 1.414)
    """
    array = np.asarray(values, dtype=float)
    _require_values(array)

    return SummaryStatistics(
        count=int(array.size),
        min=float(array.min()),
        max=float(array.max()),
        sum=float(array.sum()),
        mean=float(array.mean()),
        median=float(np.median(array)),
        std_dev=float(array.std(ddof=0)),
    )


def bucket_indices(values: Sequence[float], bucket_count: int = BUCKET_COUNT) -> np.ndarray:
    """
    Assign each value to a histogram bucket over [min, max].

    Index is floor((v - min) / width), clamped to the last bucket so the
    maximum lands in it. A constant series (width 0) puts everything in
    bucket 0.
    """
    array = np.asarray(values, dtype=float)
    _require_values(array)

    low = array.min()
    width = (array.max() - low) / bucket_count
    if width == 0:
        return np.zeros(array.size, dtype=int)

    indices = np.floor((array - low) / width).astype(int)
    return np.clip(indices, 0, bucket_count - 1)


def distribution(
    values: Sequence[float], feature: str = "", bucket_count: int = BUCKET_COUNT
) -> List[DistributionBucket]:
    """
    Build a fixed-width histogram of the series.

    Args:
        values: Non-empty numeric sequence
        feature: Feature name, used to format the bucket labels
        bucket_count: Number of buckets (default: 10)

    Returns:
        bucket_count DistributionBuckets, lowest range first

    Example:
        >>> buckets = distribution([10, 10, 10])
        >>> [b.count for b in buckets][:2]
        [3, 0]
    """
    array = np.asarray(values, dtype=float)
    indices = bucket_indices(array, bucket_count)
    counts = np.bincount(indices, minlength=bucket_count)

    low = float(array.min())
    width = (float(array.max()) - low) / bucket_count

    buckets = []
    for i in range(bucket_count):
        start = low + i * width
        end = low + (i + 1) * width
        buckets.append(
            DistributionBucket(
                range_label=f"{format_value(feature, start)}-{format_value(feature, end)}",
                count=int(counts[i]),
                midpoint=low + (i + 0.5) * width,
            )
        )
    return buckets


def cumulative_distribution(buckets: Sequence[DistributionBucket]) -> List[CumulativePoint]:
    """
    Running share of samples per bucket, in percent.

    The result is non-decreasing and ends at 100.

    Args:
        buckets: Output of distribution()

    Returns:
        One CumulativePoint per bucket
    """
    total = sum(bucket.count for bucket in buckets)
    if total == 0:
        raise ValueError("Cumulative distribution requires at least one sample")

    running = np.cumsum([bucket.count for bucket in buckets])
    return [
        CumulativePoint(
            range_label=bucket.range_label,
            midpoint=bucket.midpoint,
            cumulative=float(count) / total * 100,
        )
        for bucket, count in zip(buckets, running)
    ]


def moving_average(
    points: Sequence[Any], window: int, include_incomplete: bool = False
) -> List[MovingAveragePoint]:
    """
    Simple moving average over the trailing ``window`` values.

    Args:
        points: Chronological points with 'timestamp' and 'value'
        window: Number of samples averaged (inclusive of the current one)
        include_incomplete: Emit ma=None points for indices before the window fills

    Returns:
        MovingAveragePoints; only indices >= window - 1 unless include_incomplete

    Example:
        >>> points = [{"timestamp": i, "value": v} for i, v in enumerate([1, 2, 3, 4])]
        >>> [p.ma for p in moving_average(points, window=2)]
        [1.5, 2.5, 3.5]
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    timestamps, values = _extract(points)
    if values.size == 0:
        return []

    # rolling().mean() leaves NaN until the window is full
    rolling = pd.Series(values).rolling(window=window, min_periods=window).mean()

    result = []
    for index, (timestamp, ma) in enumerate(zip(timestamps, rolling)):
        if index < window - 1:
            if include_incomplete:
                result.append(MovingAveragePoint(index=index, timestamp=timestamp, ma=None))
            continue
        result.append(MovingAveragePoint(index=index, timestamp=timestamp, ma=float(ma)))
    return result


def moving_averages(
    points: Sequence[Any], windows: Sequence[int] = MOVING_AVERAGE_WINDOWS
) -> Dict[int, List[MovingAveragePoint]]:
    """Moving average per window size (default 5, 10 and 20)."""
    return {window: moving_average(points, window) for window in windows}


def percentage_change(points: Sequence[Any]) -> List[PercentageChangePoint]:
    """
    Change of each sample relative to the previous one, in percent.

    The first point reports 0. A previous value of 0 also reports 0 rather
    than dividing by zero.

    Example:
        >>> points = [{"timestamp": i, "value": v} for i, v in enumerate([100, 110, 99])]
        >>> [round(p.percent_change, 2) for p in percentage_change(points)]
        [0.0, 10.0, -10.0]
    """
    timestamps, values = _extract(points)

    result = []
    for index, timestamp in enumerate(timestamps):
        if index == 0 or values[index - 1] == 0:
            change = 0.0
        else:
            previous = values[index - 1]
            change = float((values[index] - previous) / previous * 100)
        result.append(PercentageChangePoint(timestamp=timestamp, percent_change=change))
    return result


@dataclass
class StatisticalReport:
    """All analyses of one series, ready for rendering."""

    title: str
    summary: SummaryStatistics
    buckets: List[DistributionBucket]
    cumulative: List[CumulativePoint]
    moving_averages: Dict[int, List[MovingAveragePoint]]
    percentage_change: List[PercentageChangePoint]

    def distribution_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "range": [b.range_label for b in self.buckets],
                "count": [b.count for b in self.buckets],
                "midpoint": [b.midpoint for b in self.buckets],
            }
        )

    def cumulative_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "range": [c.range_label for c in self.cumulative],
                "midpoint": [c.midpoint for c in self.cumulative],
                "cumulative": [c.cumulative for c in self.cumulative],
            }
        )

    def percentage_change_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "timestamp": [p.timestamp for p in self.percentage_change],
                "percent_change": [p.percent_change for p in self.percentage_change],
            }
        )


class StatisticalAnalyzer:
    """
    Run every analysis over a metric series.

    Example:
        >>> analyzer = StatisticalAnalyzer()
        >>> report = analyzer.analyze(points, title="CPU Usage")
        >>> report.summary.mean
    """

    def __init__(
        self,
        bucket_count: int = BUCKET_COUNT,
        windows: Sequence[int] = MOVING_AVERAGE_WINDOWS,
    ) -> None:
        if bucket_count < 1:
            raise ValueError("bucket_count must be >= 1")
        self.bucket_count = bucket_count
        self.windows = tuple(windows)

    def analyze(self, points: Sequence[Any], title: str = "") -> StatisticalReport:
        """
        Analyze a chronological series.

        Args:
            points: Non-empty sequence of points with 'timestamp' and 'value'
            title: Feature name, used for value formatting

        Returns:
            StatisticalReport

        Raises:
            ValueError: If points is empty
        """
        _, values = _extract(points)
        _require_values(values)

        summary = summary_statistics(values)
        buckets = distribution(values, feature=title, bucket_count=self.bucket_count)

        logger.debug(
            f"Analyzed '{title}': n={summary.count}, mean={summary.mean:.4f}, "
            f"std={summary.std_dev:.4f}"
        )

        return StatisticalReport(
            title=title,
            summary=summary,
            buckets=buckets,
            cumulative=cumulative_distribution(buckets),
            moving_averages=moving_averages(points, self.windows),
            percentage_change=percentage_change(points),
        )


@dataclass(frozen=True)
class LatestChange:
    """Movement of the newest sample relative to the one before it."""

    current: float
    previous: float
    change: float
    change_percent: float

    @property
    def trend(self) -> str:
        if self.change > 0:
            return "increase"
        elif self.change < 0:
            return "decrease"
        return "stable"


def latest_change(points: Sequence[Any]) -> LatestChange:
    """
    Compare the last two samples of a series.

    An empty series reports zeros; a single sample is compared with itself.
    """
    _, values = _extract(points)
    if values.size == 0:
        return LatestChange(current=0.0, previous=0.0, change=0.0, change_percent=0.0)

    current = float(values[-1])
    previous = float(values[-2]) if values.size > 1 else current
    change = current - previous
    change_percent = change / previous * 100 if previous != 0 else 0.0
    return LatestChange(
        current=current, previous=previous, change=change, change_percent=change_percent
    )

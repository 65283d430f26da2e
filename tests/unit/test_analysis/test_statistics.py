"""Unit tests for the statistical analysis engine."""

import numpy as np
import pytest

from botdash.analysis.statistics import (
    StatisticalAnalyzer,
    bucket_indices,
    cumulative_distribution,
    distribution,
    latest_change,
    moving_average,
    moving_averages,
    percentage_change,
    summary_statistics,
)
from botdash.data.models import FeatureDataPoint


def make_points(values, name: str = "CPU Usage"):
    """Build chronological FeatureDataPoints from raw values."""
    return [
        FeatureDataPoint(name=name, value=float(v), timestamp=f"2024-03-01T12:00:{i:02d}")
        for i, v in enumerate(values)
    ]


@pytest.fixture
def random_values() -> np.ndarray:
    return np.random.default_rng(0).uniform(0, 100, size=57)


class TestSummaryStatistics:
    """Tests for summary_statistics."""

    def test_one_to_five(self) -> None:
        """Test the textbook series 1..5."""
        stats = summary_statistics([1, 2, 3, 4, 5])

        assert stats.count == 5
        assert stats.mean == 3.0
        assert stats.median == 3.0
        assert stats.std_dev == pytest.approx(1.414, abs=1e-3)
        assert stats.min == 1.0
        assert stats.max == 5.0
        assert stats.sum == 15.0
        assert stats.range == 4.0

    def test_even_count_median(self) -> None:
        assert summary_statistics([4, 1, 3, 2]).median == 2.5

    def test_constant_series(self) -> None:
        assert summary_statistics([10, 10, 10]).std_dev == 0.0

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            summary_statistics([])

    def test_properties_hold(self, random_values: np.ndarray) -> None:
        """Test min <= median <= max and min <= mean <= max."""
        stats = summary_statistics(random_values)

        assert stats.min <= stats.median <= stats.max
        assert stats.min <= stats.mean <= stats.max
        assert stats.std_dev >= 0


class TestDistribution:
    """Tests for bucketing and histogram construction."""

    def test_bucket_counts_sum_to_n(self, random_values: np.ndarray) -> None:
        buckets = distribution(random_values)

        assert len(buckets) == 10
        assert sum(b.count for b in buckets) == len(random_values)

    def test_max_lands_in_last_bucket(self) -> None:
        indices = bucket_indices([0, 5, 9.99, 10])

        assert indices.tolist() == [0, 5, 9, 9]

    def test_constant_series(self) -> None:
        """Test [10, 10, 10] puts every value in bucket 0."""
        buckets = distribution([10, 10, 10])
        cumulative = cumulative_distribution(buckets)

        assert [b.count for b in buckets] == [3] + [0] * 9
        assert buckets[0].range_label == "10-10"
        assert cumulative[0].cumulative == 100.0

    def test_labels_and_midpoints(self) -> None:
        """Test labels use the feature's unit and midpoints sit mid-bucket."""
        buckets = distribution([0, 100], feature="CPU Usage", bucket_count=4)

        assert [b.range_label for b in buckets] == [
            "0.0%-25.0%",
            "25.0%-50.0%",
            "50.0%-75.0%",
            "75.0%-100.0%",
        ]
        assert [b.midpoint for b in buckets] == [12.5, 37.5, 62.5, 87.5]
        assert [b.count for b in buckets] == [1, 0, 0, 1]


class TestCumulativeDistribution:
    """Tests for cumulative_distribution."""

    def test_non_decreasing_and_ends_at_100(self, random_values: np.ndarray) -> None:
        cumulative = [c.cumulative for c in cumulative_distribution(distribution(random_values))]

        assert all(b >= a for a, b in zip(cumulative, cumulative[1:]))
        assert cumulative[-1] == pytest.approx(100.0)

    def test_empty_buckets_raise(self) -> None:
        buckets = distribution([1, 2])
        empty = [type(b)(b.range_label, 0, b.midpoint) for b in buckets]

        with pytest.raises(ValueError):
            cumulative_distribution(empty)


class TestMovingAverage:
    """Tests for moving_average."""

    def test_window_values(self) -> None:
        """Test each point averages the trailing window."""
        result = moving_average(make_points([1, 2, 3, 4, 5, 6]), window=3)

        assert [p.index for p in result] == [2, 3, 4, 5]
        assert [p.ma for p in result] == pytest.approx([2.0, 3.0, 4.0, 5.0])
        assert result[0].timestamp == "2024-03-01T12:00:02"

    def test_include_incomplete(self) -> None:
        result = moving_average(make_points([1, 2, 3]), window=2, include_incomplete=True)

        assert [p.ma for p in result] == [None, 1.5, 2.5]

    def test_window_longer_than_series(self) -> None:
        assert moving_average(make_points([1, 2, 3]), window=5) == []

    def test_default_windows(self) -> None:
        result = moving_averages(make_points(range(25)))

        assert {window: len(points) for window, points in result.items()} == {5: 21, 10: 16, 20: 6}

    def test_invalid_window(self) -> None:
        with pytest.raises(ValueError):
            moving_average(make_points([1]), window=0)


class TestPercentageChange:
    """Tests for percentage_change."""

    def test_changes(self) -> None:
        result = percentage_change(make_points([100, 110, 99]))

        assert [p.percent_change for p in result] == pytest.approx([0.0, 10.0, -10.0])

    def test_previous_zero_is_guarded(self) -> None:
        """Test division by a zero previous value reports 0."""
        result = percentage_change(make_points([0, 5, 10]))

        assert [p.percent_change for p in result] == [0.0, 0.0, 100.0]

    def test_accepts_dicts(self) -> None:
        points = [{"timestamp": 1, "value": 2}, {"timestamp": 2, "value": 3}]

        assert percentage_change(points)[1].percent_change == pytest.approx(50.0)


class TestStatisticalAnalyzer:
    """Tests for StatisticalAnalyzer."""

    def test_analyze(self) -> None:
        """Test the report bundles every analysis."""
        points = make_points(range(1, 31))

        report = StatisticalAnalyzer().analyze(points, title="CPU Usage")

        assert report.title == "CPU Usage"
        assert report.summary.count == 30
        assert len(report.buckets) == 10
        assert len(report.cumulative) == 10
        assert set(report.moving_averages) == {5, 10, 20}
        assert len(report.percentage_change) == 30
        assert list(report.distribution_frame().columns) == ["range", "count", "midpoint"]
        assert report.cumulative_frame()["cumulative"].iloc[-1] == pytest.approx(100.0)
        assert len(report.percentage_change_frame()) == 30

    def test_custom_settings(self) -> None:
        report = StatisticalAnalyzer(bucket_count=4, windows=(2,)).analyze(make_points([1, 2, 3, 4]))

        assert len(report.buckets) == 4
        assert list(report.moving_averages) == [2]

    def test_empty_series_raises(self) -> None:
        with pytest.raises(ValueError):
            StatisticalAnalyzer().analyze([])

    def test_invalid_bucket_count(self) -> None:
        with pytest.raises(ValueError):
            StatisticalAnalyzer(bucket_count=0)


class TestLatestChange:
    """Tests for latest_change."""

    def test_increase(self) -> None:
        change = latest_change(make_points([50, 40, 50]))

        assert change.current == 50.0
        assert change.previous == 40.0
        assert change.change == 10.0
        assert change.change_percent == pytest.approx(25.0)
        assert change.trend == "increase"

    def test_decrease(self) -> None:
        assert latest_change(make_points([10, 5])).trend == "decrease"

    def test_single_point_is_stable(self) -> None:
        change = latest_change(make_points([7]))

        assert change.change == 0.0
        assert change.trend == "stable"

    def test_empty_and_zero_previous(self) -> None:
        assert latest_change([]).current == 0.0
        assert latest_change(make_points([0, 5])).change_percent == 0.0

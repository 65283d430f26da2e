"""Statistical analysis of metric series."""

from botdash.analysis.statistics import (
    CumulativePoint,
    DistributionBucket,
    LatestChange,
    MovingAveragePoint,
    PercentageChangePoint,
    StatisticalAnalyzer,
    StatisticalReport,
    SummaryStatistics,
    cumulative_distribution,
    distribution,
    latest_change,
    moving_average,
    moving_averages,
    percentage_change,
    summary_statistics,
)

__all__ = [
    "CumulativePoint",
    "DistributionBucket",
    "LatestChange",
    "MovingAveragePoint",
    "PercentageChangePoint",
    "StatisticalAnalyzer",
    "StatisticalReport",
    "SummaryStatistics",
    "cumulative_distribution",
    "distribution",
    "latest_change",
    "moving_average",
    "moving_averages",
    "percentage_change",
    "summary_statistics",
]

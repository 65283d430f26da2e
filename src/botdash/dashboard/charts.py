"""Chart builder for creating consistent Plotly charts."""

from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from botdash.analysis.statistics import MovingAveragePoint, StatisticalReport
from botdash.charting.interaction import ChartType, DrawingType, ReferenceLine
from botdash.utils.formatting import TIMEFRAME_FORMATS, parse_timestamp

Segment = Tuple[Tuple[object, float], Tuple[object, float]]

TIME_RANGES = {
    "1H": "1h",
    "1D": "1d",
    "1W": "1w",
    "1M": "1m",
    "All": "all",
}

# Gap between market bars; shorter ranges get thinner bars
BAR_GAPS = {"1h": 0.8, "1d": 0.6}
DEFAULT_BAR_GAP = 0.4


def _to_datetimes(timestamps: Sequence[object]) -> List[object]:
    return [parse_timestamp(ts) for ts in timestamps]


class ChartBuilder:
    """
    Helper class for creating consistent Plotly charts.

    Provides reusable chart templates with consistent styling
    for the dashboard.

    Example:
        >>> df = pd.DataFrame({'timestamp': ["2024-01-01T00:00:00"], 'value': [10.0]})
        >>> fig = ChartBuilder.feature_sparkline(df, title='CPU Usage')
    """

    # Color scheme
    COLORS = {
        "primary": "#2563eb",
        "accent": "#8b5cf6",
        "success": "#22c55e",
        "danger": "#ef4444",
        "warning": "#ff7f0e",
        "muted": "#94a3b8",
    }

    MOVING_AVERAGE_COLORS = ["#2563eb", "#8b5cf6", "#ef4444"]

    @staticmethod
    def feature_sparkline(df: pd.DataFrame, title: str = "", height: int = 120) -> go.Figure:
        """
        Create compact area chart for a feature card.

        Args:
            df: DataFrame with 'timestamp' and 'value' columns
            title: Feature name (response/error metrics are drawn in red)
            height: Figure height in pixels

        Returns:
            Plotly Figure
        """
        if df.empty:
            return ChartBuilder._empty_chart("No data", height=height)

        color = (
            ChartBuilder.COLORS["danger"]
            if "Response" in title or "Error" in title
            else ChartBuilder.COLORS["primary"]
        )

        # Y axis padded 10% around the observed range
        low = df["value"].min() * 0.9
        high = df["value"].max() * 1.1

        fig = go.Figure(
            go.Scatter(
                x=_to_datetimes(df["timestamp"]),
                y=df["value"],
                mode="lines",
                line=dict(color=color, width=2),
                fill="tozeroy",
                hovertemplate="%{x|%H:%M:%S}<br>%{y:.2f}<extra></extra>",
            )
        )

        fig.update_layout(
            margin=dict(l=0, r=0, t=0, b=0),
            xaxis=dict(visible=False),
            yaxis=dict(visible=False, range=[low, high]),
            showlegend=False,
            template="plotly_white",
            height=height,
        )

        return fig

    @staticmethod
    def series_chart(
        df: pd.DataFrame,
        title: str,
        chart_type: ChartType = ChartType.LINE,
        value_range: Optional[Tuple[float, float]] = None,
        trend_segments: Optional[Dict[str, Segment]] = None,
        reference_lines: Sequence[ReferenceLine] = (),
        vertical_positions: Optional[Dict[str, object]] = None,
        temp_segment: Optional[Segment] = None,
        height: int = 450,
    ) -> go.Figure:
        """
        Create the interactive series chart with annotations.

        Args:
            df: Visible points with 'timestamp' and 'value' columns
            title: Series name
            chart_type: Line, area or bar renderer
            value_range: Y axis domain
            trend_segments: Committed trend lines by id, as endpoint pairs
            reference_lines: Horizontal and vertical markers
            vertical_positions: Timestamp of each vertical line by id (lines
                outside the visible window are omitted)
            temp_segment: Trend line currently being drawn (dashed)
            height: Figure height in pixels

        Returns:
            Plotly Figure
        """
        if df.empty:
            return ChartBuilder._empty_chart("No data in the selected range")

        x = _to_datetimes(df["timestamp"])
        color = ChartBuilder.COLORS["primary"]
        vertical_positions = vertical_positions or {}

        if chart_type is ChartType.BAR:
            trace = go.Bar(
                x=x,
                y=df["value"],
                name=title,
                marker_color=color,
            )
        else:
            trace = go.Scatter(
                x=x,
                y=df["value"],
                name=title,
                mode="lines+markers" if len(df) < 30 else "lines",
                line=dict(color=color, width=2),
                fill="tozeroy" if chart_type is ChartType.AREA else None,
                fillcolor="rgba(37, 99, 235, 0.15)",
            )

        fig = go.Figure(trace)

        for line_id, segment in (trend_segments or {}).items():
            ChartBuilder._add_segment(fig, segment, name=line_id)

        if temp_segment is not None:
            ChartBuilder._add_segment(fig, temp_segment, name="drawing", dash="dash")

        for line in reference_lines:
            if line.orientation is DrawingType.HORIZONTAL:
                fig.add_hline(
                    y=line.value,
                    line_dash="dash",
                    line_color=line.color,
                    annotation_text=line.label,
                    annotation_position="right",
                )
            elif line.orientation is DrawingType.VERTICAL and line.id in vertical_positions:
                x_value = parse_timestamp(vertical_positions[line.id])
                # add_vline cannot annotate date axes, draw shape and label separately
                fig.add_shape(
                    type="line",
                    x0=x_value,
                    x1=x_value,
                    xref="x",
                    y0=0,
                    y1=1,
                    yref="paper",
                    line=dict(color=line.color, dash="dash"),
                )
                fig.add_annotation(
                    x=x_value,
                    y=1,
                    xref="x",
                    yref="paper",
                    text=line.label,
                    showarrow=False,
                    font=dict(color=line.color),
                    yanchor="bottom",
                )

        fig.update_layout(
            title=title,
            xaxis_title="Time",
            yaxis_title=title,
            hovermode="x unified",
            template="plotly_white",
            showlegend=False,
            height=height,
            dragmode="select",
        )

        if value_range is not None:
            fig.update_yaxes(range=list(value_range))

        return fig

    @staticmethod
    def _add_segment(fig: go.Figure, segment: Segment, name: str, dash: str = "solid") -> None:
        (x0, y0), (x1, y1) = segment
        fig.add_trace(
            go.Scatter(
                x=_to_datetimes([x0, x1]),
                y=[y0, y1],
                mode="lines",
                name=name,
                line=dict(color="#ff0000", width=2, dash=dash),
                hoverinfo="skip",
            )
        )

    @staticmethod
    def distribution_chart(report: StatisticalReport, title: str = "Value Distribution") -> go.Figure:
        """
        Create histogram bar chart from the report's buckets.

        Args:
            report: Statistical report of the series
            title: Chart title

        Returns:
            Plotly Figure
        """
        df = report.distribution_frame()

        fig = go.Figure(
            go.Bar(
                x=df["range"],
                y=df["count"],
                marker_color=ChartBuilder.COLORS["primary"],
                hovertemplate="Range: %{x}<br>%{y} occurrences<extra></extra>",
            )
        )

        fig.update_layout(
            title=title,
            xaxis_title="Range",
            yaxis_title="Frequency",
            xaxis_tickangle=-45,
            template="plotly_white",
            height=350,
        )

        return fig

    @staticmethod
    def cumulative_chart(report: StatisticalReport, title: str = "Cumulative Distribution") -> go.Figure:
        """Create cumulative distribution area chart (0-100%)."""
        df = report.cumulative_frame()

        fig = go.Figure(
            go.Scatter(
                x=df["range"],
                y=df["cumulative"],
                mode="lines",
                line=dict(color=ChartBuilder.COLORS["primary"], shape="spline"),
                fill="tozeroy",
                hovertemplate="Range: %{x}<br>%{y:.1f}%<extra></extra>",
            )
        )

        fig.update_layout(
            title=title,
            xaxis_title="Range",
            yaxis_title="Percent (%)",
            yaxis_range=[0, 100],
            xaxis_tickangle=-45,
            template="plotly_white",
            height=350,
        )

        return fig

    @staticmethod
    def moving_average_chart(
        df: pd.DataFrame,
        averages: Dict[int, List[MovingAveragePoint]],
        title: str = "Moving Averages",
    ) -> go.Figure:
        """
        Create moving averages line chart over the original series.

        Args:
            df: Original series with 'timestamp' and 'value' columns
            averages: Window size → moving average points
            title: Chart title

        Returns:
            Plotly Figure
        """
        if df.empty:
            return ChartBuilder._empty_chart("No data")

        fig = go.Figure()

        for color, (window, points) in zip(ChartBuilder.MOVING_AVERAGE_COLORS, averages.items()):
            if not points:
                continue
            fig.add_trace(
                go.Scatter(
                    x=_to_datetimes([p.timestamp for p in points]),
                    y=[p.ma for p in points],
                    mode="lines",
                    name=f"{window}-period MA",
                    line=dict(color=color, width=2),
                )
            )

        fig.add_trace(
            go.Scatter(
                x=_to_datetimes(df["timestamp"]),
                y=df["value"],
                mode="lines",
                name="Original",
                line=dict(color=ChartBuilder.COLORS["muted"], width=1),
                opacity=0.5,
            )
        )

        fig.update_layout(
            title=title,
            xaxis_title="Time",
            hovermode="x unified",
            template="plotly_white",
            height=350,
        )

        return fig

    @staticmethod
    def percentage_change_chart(report: StatisticalReport, title: str = "Percentage Change") -> go.Figure:
        """Create bar chart of per-sample percentage change (red for negative)."""
        df = report.percentage_change_frame()

        colors = [
            ChartBuilder.COLORS["primary"] if change >= 0 else ChartBuilder.COLORS["danger"]
            for change in df["percent_change"]
        ]

        fig = go.Figure(
            go.Bar(
                x=_to_datetimes(df["timestamp"]),
                y=df["percent_change"],
                marker_color=colors,
                name="% Change",
                hovertemplate="%{y:.2f}%<extra></extra>",
            )
        )

        fig.add_hline(y=0, line_dash="dash", line_color="gray")

        fig.update_layout(
            title=title,
            xaxis_title="Time",
            yaxis_title="Change (%)",
            template="plotly_white",
            height=350,
        )

        return fig

    @staticmethod
    def market_chart(
        df: pd.DataFrame,
        title: str = "Market",
        chart_type: ChartType = ChartType.LINE,
        time_range: str = "1d",
    ) -> go.Figure:
        """
        Create price chart with volume bars on a secondary axis.

        The time range only changes presentation: x-axis tick format and
        bar width. All points are plotted.

        Args:
            df: DataFrame with 'timestamp', 'value' and optional 'volume' columns
            title: Chart title
            chart_type: Renderer for the price series
            time_range: One of TIME_RANGES values ("1h", "1d", "1w", "1m", "all")

        Returns:
            Plotly Figure

        Raises:
            ValueError: If time_range is unknown
        """
        if time_range not in TIMEFRAME_FORMATS:
            raise ValueError(f"Unknown time range: {time_range}")

        if df.empty:
            return ChartBuilder._empty_chart("No market data")

        x = _to_datetimes(df["timestamp"])
        fig = make_subplots(specs=[[{"secondary_y": True}]])

        if chart_type is ChartType.BAR:
            price = go.Bar(x=x, y=df["value"], name="Price", marker_color=ChartBuilder.COLORS["primary"])
        else:
            price = go.Scatter(
                x=x,
                y=df["value"],
                name="Price",
                mode="lines",
                line=dict(color=ChartBuilder.COLORS["primary"], width=2),
                fill="tozeroy" if chart_type is ChartType.AREA else None,
            )
        fig.add_trace(price, secondary_y=False)

        if "volume" in df.columns and df["volume"].any():
            fig.add_trace(
                go.Bar(
                    x=x,
                    y=df["volume"],
                    name="Volume",
                    marker_color=ChartBuilder.COLORS["accent"],
                    opacity=0.5,
                ),
                secondary_y=True,
            )

        fig.update_layout(
            title=title,
            hovermode="x unified",
            template="plotly_white",
            height=400,
            bargap=BAR_GAPS.get(time_range, DEFAULT_BAR_GAP),
        )
        fig.update_xaxes(tickformat=TIMEFRAME_FORMATS[time_range])
        fig.update_yaxes(title_text="Price ($)", secondary_y=False)
        fig.update_yaxes(title_text="Volume", secondary_y=True, showgrid=False)

        return fig

    @staticmethod
    def _empty_chart(message: str = "No data available", height: int = 300) -> go.Figure:
        """
        Create empty placeholder chart.

        Args:
            message: Message to display
            height: Figure height in pixels

        Returns:
            Plotly Figure with message
        """
        fig = go.Figure()

        fig.add_annotation(
            text=message,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
            font=dict(size=16, color="gray"),
        )

        fig.update_layout(
            xaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
            yaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
            template="plotly_white",
            height=height,
        )

        return fig

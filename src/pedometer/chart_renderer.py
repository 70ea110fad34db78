"""Chart rendering for the magnitude history."""

import plotly.graph_objects as go
from typing import List, Sequence, Tuple

from .config import UIConfig


# Ranges narrower than this are treated as flat
DEGENERATE_RANGE = 1e-9


def value_range(data: Sequence[float]) -> Tuple[float, float]:
    """
    Return (minimum, denominator) for min-max scaling.

    The denominator is 1.0 when all values are (nearly) equal so scaled
    coordinates stay finite.
    """
    min_v, max_v = min(data), max(data)
    span = abs(max_v - min_v)
    return min_v, (1.0 if span < DEGENERATE_RANGE else span)


class ChartRenderer:
    """Handles creation and styling of the live magnitude chart."""

    def __init__(self, ui_config: UIConfig):
        """
        Initialize the chart renderer.

        Args:
            ui_config: UI configuration object
        """
        self.config = ui_config

    def scale_points(
        self,
        data: Sequence[float],
        width: float,
        height: float
    ) -> List[Tuple[float, float]]:
        """
        Map values to pixel coordinates inside a 1px border.

        X spans the index range, Y spans [min, max] of the data with larger
        values drawn higher (smaller pixel y).

        Args:
            data: Magnitude values, oldest first
            width: Canvas width in pixels
            height: Canvas height in pixels

        Returns:
            List of (px, py) points, empty when fewer than 2 values
        """
        n = len(data)
        if n < 2:
            return []

        min_v, denom = value_range(data)
        points = []
        for i, v in enumerate(data):
            px = (i / (n - 1)) * (width - 2) + 1
            py = (1 - (v - min_v) / denom) * (height - 2) + 1
            points.append((px, py))
        return points

    def y_range(self, data: Sequence[float]) -> List[float]:
        """Y-axis range [min, min + denominator] for the given data."""
        if not data:
            return [0.0, 1.0]
        min_v, denom = value_range(data)
        return [min_v, min_v + denom]

    def create_magnitude_chart(self, history: Sequence[float]) -> go.Figure:
        """
        Create the bordered line chart of the magnitude history.

        With fewer than 2 values only the border is drawn.

        Args:
            history: Magnitude values, oldest first

        Returns:
            Plotly Figure object
        """
        values = list(history)
        fig = go.Figure()

        if len(values) >= 2:
            fig.add_trace(go.Scatter(
                x=list(range(len(values))),
                y=values,
                mode='lines',
                line=dict(color=self.config.CHART_LINE_COLOR, width=self.config.CHART_LINE_WIDTH),
                name="m"
            ))

        x_max = max(len(values) - 1, 1)
        fig.update_layout(
            height=self.config.CHART_HEIGHT,
            margin=self.config.CHART_MARGIN,
            showlegend=False,
            transition={'duration': 0},
            uirevision='constant',
            hovermode=False,
            dragmode=False,
            plot_bgcolor='white',
            paper_bgcolor='white',
        )
        fig.update_xaxes(
            range=[0, x_max],
            fixedrange=True,
            showgrid=False,
            zeroline=False,
            showticklabels=False,
            showline=True,
            mirror=True,
            linecolor=self.config.CHART_BORDER_COLOR,
            linewidth=1,
        )
        fig.update_yaxes(
            range=self.y_range(values),
            fixedrange=True,
            showgrid=False,
            zeroline=False,
            showticklabels=False,
            showline=True,
            mirror=True,
            linecolor=self.config.CHART_BORDER_COLOR,
            linewidth=1,
        )

        return fig

"""Plotly figure generation from a PlotValue.

This module provides the FigureGenerator class, which turns the plot stage's
output into a Plotly figure dictionary. It holds no pipeline logic: bar
heights, stacking offsets and summary lines all come from the PlotValue.
"""

from __future__ import annotations

import plotly.graph_objects as go

from chromaview.pipeline.plot_computer import PlotValue
from chromaview.pipeline.settings import Settings
from chromaview.utils.logging import get_logger

logger = get_logger(__name__)

ROLLING_MEAN_COLOR = "rgba(220, 60, 60, 0.9)"
MEAN_COLOR = "gray"
MEDIAN_COLOR = "black"


class FigureGenerator:
    """Generates Plotly figure dictionaries from a PlotValue.

    Attributes:
        x_title: Axis title for retention time.
        y_title: Axis title for signal.
    """

    def __init__(self, *, x_title: str = "Retention time (min)", y_title: str = "Signal") -> None:
        self.x_title = x_title
        self.y_title = y_title

    def make_figure(self, value: PlotValue, settings: Settings) -> dict:
        """Generate a Plotly figure dictionary.

        Args:
            value: Output of compute_plot.
            settings: Settings the value was computed with (stack and legend are read).

        Returns:
            Plotly figure dictionary.
        """
        fig = go.Figure()
        for category, bars in value.bars.items():
            fig.add_trace(go.Bar(
                x=[bar.x for bar in bars],
                y=[bar.height for bar in bars],
                base=[bar.base_offset for bar in bars] if settings.stack else None,
                width=[bar.width for bar in bars],
                name=f"{category:g}",
                hovertemplate=f"m/z {category:g}<br>RT %{{x}}<br>Signal %{{y}}<extra></extra>",
            ))

        if value.rolling_mean:
            fig.add_trace(go.Scatter(
                x=[x for x, _ in value.rolling_mean],
                y=[y for _, y in value.rolling_mean],
                mode="lines",
                name="Rolling mean",
                line=dict(color=ROLLING_MEAN_COLOR, width=2),
            ))

        shapes = []
        for label, level, color in (("Mean", value.mean, MEAN_COLOR), ("Median", value.median, MEDIAN_COLOR)):
            if level is None:
                continue
            shapes.append(dict(
                type="line",
                xref="paper",
                x0=0,
                x1=1,
                y0=level,
                y1=level,
                name=label,
                line=dict(color=color, width=1, dash="dash"),
            ))

        fig.update_layout(
            # Stacked bars carry explicit bases, so they overlay rather than group.
            barmode="overlay" if settings.stack else "group",
            showlegend=settings.legend,
            shapes=shapes,
            xaxis_title=self.x_title,
            yaxis_title=self.y_title,
            margin=dict(l=40, r=20, t=20, b=40),
        )
        logger.debug(f"Figure generated: {len(fig.data)} traces, {len(shapes)} shapes")
        return fig.to_dict()

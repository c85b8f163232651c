"""
Plotly figure builder for blood pressure trend charts.

Responsibilities:
- Creating reading and rolling-average traces
- Applying layout configuration
- Adding the average-category annotation

This module encapsulates all Plotly-specific figure construction logic,
allowing TrendChartService to focus on orchestration.
"""

import logging
from typing import Any, Dict, Sequence

import plotly.graph_objects as go

from bp_svc.services.classifier import BPCategory
from bp_svc.services.trend_series import SeriesPoint

logger = logging.getLogger(__name__)


SYSTOLIC_COLOR = '#263238'
DIASTOLIC_COLOR = '#607D8B'
AVERAGE_OPACITY = 0.55


class PlotlyBuilder:
    """
    Builder for constructing Plotly figures of blood pressure trends.

    Usage:
        builder = PlotlyBuilder()
        fig = builder.create_figure()
        builder.add_reading_traces(fig, points)
        builder.add_rolling_average_traces(fig, points, window_size=7)
        builder.apply_layout(fig, patient_name)
    """

    def create_figure(self) -> go.Figure:
        """Create a new empty Plotly figure."""
        return go.Figure()

    def add_reading_traces(self, fig: go.Figure, points: Sequence[SeriesPoint]) -> None:
        """Add the raw systolic and diastolic lines, filled between the two."""
        dates = [p.timestamp for p in points]

        fig.add_trace(go.Scatter(
            x=dates, y=[p.systolic for p in points],
            name="Systolic",
            mode='lines+markers',
            line=dict(color=SYSTOLIC_COLOR, width=2.5),
            marker=dict(size=8, color=SYSTOLIC_COLOR, symbol='triangle-up', line=dict(width=1, color='white')),
            hovertemplate=(
                "<b>Systolic</b><br>"
                "%{x|%b %d, %Y %H:%M}<br>"
                "<b>%{y} mmHg</b>"
                "<extra></extra>"
            ),
        ))

        fig.add_trace(go.Scatter(
            x=dates, y=[p.diastolic for p in points],
            name="Diastolic",
            mode='lines+markers',
            line=dict(color=DIASTOLIC_COLOR, width=2.5),
            marker=dict(size=8, color=DIASTOLIC_COLOR, symbol='triangle-down', line=dict(width=1, color='white')),
            fill='tonexty',
            fillcolor='rgba(38, 50, 56, 0.08)',
            hovertemplate=(
                "<b>Diastolic</b><br>"
                "%{x|%b %d, %Y %H:%M}<br>"
                "<b>%{y} mmHg</b>"
                "<extra></extra>"
            ),
        ))

    def add_rolling_average_traces(
        self, fig: go.Figure, points: Sequence[SeriesPoint], window_size: int
    ) -> None:
        """Add dashed trailing-average lines for both components."""
        dates = [p.timestamp for p in points]
        suffix = f"{window_size}-reading avg"

        for name, values, color in (
            ("Systolic", [p.systolic_avg for p in points], SYSTOLIC_COLOR),
            ("Diastolic", [p.diastolic_avg for p in points], DIASTOLIC_COLOR),
        ):
            fig.add_trace(go.Scatter(
                x=dates, y=values,
                name=f"{name} ({suffix})",
                mode='lines',
                line=dict(color=color, width=2, dash='dash'),
                opacity=AVERAGE_OPACITY,
                hovertemplate=(
                    f"<b>{name} average</b><br>"
                    "%{x|%b %d, %Y}<br>"
                    "%{y} mmHg"
                    "<extra></extra>"
                ),
            ))

    def add_category_annotation(
        self, fig: go.Figure, category: BPCategory, average_systolic: int, average_diastolic: int
    ) -> None:
        """Add a corner badge with the average reading and its category color."""
        fig.add_annotation(
            text=(
                "<span style='color:#757575;font-size:10px'>AVERAGE</span><br>"
                f"<b>{average_systolic}/{average_diastolic}</b> mmHg<br>"
                f"<span style='color:{category.color}'>{category.overall_label}</span>"
            ),
            xref="paper", yref="paper",
            x=1.0, y=1.0,
            xanchor='right', yanchor='top',
            showarrow=False,
            font=dict(size=11, color='#424242'),
            align='left',
            bgcolor='rgba(250,250,250,0.92)',
            bordercolor=category.color,
            borderwidth=1,
            borderpad=6,
        )

    def apply_layout(self, fig: go.Figure, patient_name: str) -> None:
        """Apply the trend chart layout with a date axis and range selector."""
        fig.update_layout(
            title=dict(
                text=f"<b>Blood Pressure Trends</b><br><sup style='color:#757575'>{patient_name}</sup>",
                font=dict(size=18),
                x=0.5, xanchor="center"
            ),
            xaxis=dict(
                type="date",
                showgrid=True,
                gridcolor='rgba(0,0,0,0.06)',
                tickformat='%b %d',
                tickangle=-45,
                nticks=8,
                rangeselector=dict(
                    buttons=[
                        dict(count=7, label="1W", step="day", stepmode="backward"),
                        dict(count=1, label="1M", step="month", stepmode="backward"),
                        dict(count=3, label="3M", step="month", stepmode="backward"),
                        dict(step="all", label="All"),
                    ],
                    bgcolor='rgba(255,255,255,0.95)',
                    activecolor='#E3F2FD',
                    font=dict(size=11),
                ),
            ),
            yaxis=dict(
                title=dict(text="mmHg", font=dict(size=11, color='#9E9E9E')),
                showgrid=True,
                gridcolor='rgba(0,0,0,0.06)',
            ),
            hovermode='x unified',
            legend=dict(
                orientation="h",
                x=0.5, xanchor="center",
                y=-0.2, yanchor="top",
                font=dict(size=11, color='#424242'),
            ),
            height=560,
            margin=dict(l=50, r=30, t=90, b=120),
            template="plotly_white",
            paper_bgcolor='#FAFAFA',
            plot_bgcolor='#FFFFFF',
            dragmode='pan',
        )

    def apply_empty_layout(self, fig: go.Figure, patient_name: str) -> None:
        """Apply layout for an empty chart (no readings)."""
        fig.update_layout(
            title=dict(
                text=f"<b>Blood Pressure Trends</b><br><sup>{patient_name}</sup>",
                font=dict(size=20),
                x=0.5, xanchor='center'
            ),
            xaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
            yaxis=dict(showgrid=False, showticklabels=False, zeroline=False),
            height=450,
            template="plotly_white",
            paper_bgcolor='#FAFAFA',
            plot_bgcolor='#FFFFFF',
            annotations=[
                dict(text='<b>No readings yet</b>', xref='paper', yref='paper',
                     x=0.5, y=0.5, showarrow=False, font=dict(size=18, color='#424242')),
                dict(text='Add a blood pressure reading to see your trends',
                     xref='paper', yref='paper', x=0.5, y=0.38,
                     showarrow=False, font=dict(size=14, color='#757575')),
            ]
        )

    def get_chart_config(self) -> Dict[str, Any]:
        """Plotly config for the embedded chart."""
        return {
            'displayModeBar': True,
            'displaylogo': False,
            'modeBarButtonsToRemove': ['lasso2d', 'select2d', 'autoScale2d'],
            'responsive': True,
            'toImageButtonOptions': {
                'format': 'png',
                'filename': 'bp_trends',
                'height': 800,
                'width': 1200,
                'scale': 2
            },
        }

    def inject_page_css(self, html_content: str) -> str:
        """Inject responsive page CSS into the generated HTML."""
        styles = """
        <style>
            body {
                margin: 0;
                padding: 8px;
                background: #FAFAFA;
                font-family: -apple-system, system-ui, "Segoe UI", Roboto, sans-serif;
            }
            #trend-chart { width: 100% !important; border-radius: 10px; background: white; }
            @media (max-width: 600px) {
                body { padding: 2px; }
                .modebar { display: none !important; }
                .legend .legendtext { font-size: 9px !important; }
            }
        </style>
        """
        return html_content.replace('<body>', f'<body>{styles}', 1)

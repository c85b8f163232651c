"""
Service layer for generating interactive blood pressure trend charts.

Orchestrates the trend series builder, the statistics aggregator and the
Plotly figure construction delegated to PlotlyBuilder.
"""

import logging
from datetime import tzinfo
from typing import Iterable, Optional

import plotly.io as pio

from bp_svc.core.config import Settings, get_settings
from bp_svc.schemas import Reading
from bp_svc.services.classifier import classify
from bp_svc.services.graph.plotly_builder import PlotlyBuilder
from bp_svc.services.statistics import all_time_stats
from bp_svc.services.trend_series import build_series

logger = logging.getLogger(__name__)


CHART_DIV_ID = "trend-chart"


class TrendChartService:
    """Builds standalone HTML trend charts for a reading collection."""

    def __init__(
        self,
        plotly_builder: Optional[PlotlyBuilder] = None,
        tz: Optional[tzinfo] = None,
        window_size: Optional[int] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings if settings is not None else get_settings()
        self._builder = plotly_builder or PlotlyBuilder()
        self._tz = tz if tz is not None else settings.tzinfo
        self._window_size = window_size if window_size is not None else settings.bp_svc_rolling_window
        if self._window_size < 1:
            raise ValueError("window_size must be at least 1")

    def generate_html_chart(
        self,
        readings: Iterable[Reading],
        patient_name: str,
        window_size: Optional[int] = None,
    ) -> str:
        """
        Generate complete HTML with the interactive trend chart.

        Raises:
            ValueError: If window_size is below 1
        """
        snapshot = tuple(readings)
        window = window_size if window_size is not None else self._window_size
        points = list(build_series(snapshot, window_size=window, tz=self._tz))

        if not points:
            return self._generate_empty_chart(patient_name)

        fig = self._builder.create_figure()
        self._builder.add_reading_traces(fig, points)
        self._builder.add_rolling_average_traces(fig, points, window)

        stats = all_time_stats(snapshot)
        category = classify(stats.systolic, stats.diastolic)
        self._builder.add_category_annotation(fig, category, stats.systolic, stats.diastolic)
        self._builder.apply_layout(fig, patient_name)

        html_content = pio.to_html(
            fig,
            include_plotlyjs='cdn',
            config=self._builder.get_chart_config(),
            div_id=CHART_DIV_ID,
        )
        logger.debug("Trend chart generated", extra={'points': len(points), 'window_size': window})
        return self._builder.inject_page_css(html_content)

    def _generate_empty_chart(self, patient_name: str) -> str:
        """Generate styled placeholder chart when no readings exist."""
        fig = self._builder.create_figure()
        self._builder.apply_empty_layout(fig, patient_name)

        html = pio.to_html(
            fig,
            include_plotlyjs='cdn',
            config=self._builder.get_chart_config(),
            div_id=CHART_DIV_ID,
        )
        return self._builder.inject_page_css(html)

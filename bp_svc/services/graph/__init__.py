"""
Graph package for blood pressure trend visualization.

This package contains:
- TrendChartService: Public orchestration layer for generating trend charts
- PlotlyBuilder: Plotly-specific figure construction

Usage:
    from bp_svc.services.graph import TrendChartService

    service = TrendChartService()
    html = service.generate_html_chart(readings, patient_name)
"""

from bp_svc.services.graph.plotly_builder import PlotlyBuilder
from bp_svc.services.graph.trend_chart_service import TrendChartService

__all__ = [
    'PlotlyBuilder',
    'TrendChartService',
]

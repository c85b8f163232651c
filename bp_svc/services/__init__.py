"""
Services module containing the blood pressure domain logic.

- classifier: category for a systolic/diastolic pair
- statistics: windowed and all-time aggregates
- trend_series: time-ordered points with rolling averages
- export: PDF report and CSV export
- graph: interactive Plotly trend chart
"""
from bp_svc.services.classifier import BPCategory, classify
from bp_svc.services.statistics import (
    PeriodStats,
    ReadingStats,
    all_time_stats,
    period_stats,
    reading_overview,
    trend_summary,
    windowed_stats,
)
from bp_svc.services.trend_series import SeriesPoint, TrendSeries, build_series

__all__ = [
    'BPCategory',
    'classify',
    'PeriodStats',
    'ReadingStats',
    'all_time_stats',
    'period_stats',
    'reading_overview',
    'trend_summary',
    'windowed_stats',
    'SeriesPoint',
    'TrendSeries',
    'build_series',
]

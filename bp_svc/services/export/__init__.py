"""
Export package for blood pressure readings.

This package contains:
- ReportRenderer: paginated PDF report (chart, summary notes, table)
- CsvExporter: flat CSV export with the same selection rules
- selection helpers shared by both exporters

Usage:
    from bp_svc.services.export import ReportRenderer

    document = ReportRenderer().render_report(readings, start_date="2025-01-01")
"""

from bp_svc.services.export.csv_exporter import CsvExporter, export_csv
from bp_svc.services.export.document import ExportDocument, ReportRow, ReportSummary
from bp_svc.services.export.report_renderer import ReportRenderer, render_report
from bp_svc.services.export.selection import (
    build_export_filename,
    filter_by_date_range,
    select_for_export,
    truncate_note,
)

__all__ = [
    'CsvExporter',
    'ExportDocument',
    'ReportRenderer',
    'ReportRow',
    'ReportSummary',
    'build_export_filename',
    'export_csv',
    'filter_by_date_range',
    'render_report',
    'select_for_export',
    'truncate_note',
]

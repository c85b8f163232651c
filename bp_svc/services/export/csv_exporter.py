"""
CSV exporter for blood pressure readings.

Uses the same selection rules as the PDF report: optional inclusive date
range on local calendar dates, oldest first, and EmptyExportError when
nothing is selected.
"""
import csv
import io
import logging
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from bp_svc.core.config import Settings, get_settings
from bp_svc.core.datetime_utils import to_local, to_utc, utc_now
from bp_svc.schemas import Reading
from bp_svc.services.export.document import ExportDocument
from bp_svc.services.export.selection import (
    DateBound,
    build_export_filename,
    parse_range,
    select_for_export,
)

logger = logging.getLogger(__name__)


CSV_FIELDS = ['id', 'date', 'time', 'systolic', 'diastolic', 'pulse', 'body_position', 'note']


class CsvExporter:
    """Writes the selected readings as CSV into memory."""

    def __init__(
        self,
        tz: Optional[tzinfo] = None,
        filename_prefix: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings if settings is not None else get_settings()
        self._tz = tz if tz is not None else settings.tzinfo
        self._filename_prefix = filename_prefix if filename_prefix is not None else settings.bp_svc_csv_prefix

    def export_csv(
        self,
        readings: Iterable[Reading],
        start_date: DateBound = None,
        end_date: DateBound = None,
        generated_at: Optional[datetime] = None,
    ) -> ExportDocument:
        """
        Export readings as CSV.

        Raises:
            InvalidDateRangeError: If a bound is not a valid date
            EmptyExportError: If no reading falls inside the range
        """
        generated = to_utc(generated_at) if generated_at is not None else utc_now()
        selected = select_for_export(readings, start_date, end_date, self._tz)
        start, end = parse_range(start_date, end_date)

        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, lineterminator='\n')
        writer.writeheader()
        for reading in selected:
            local = to_local(reading.timestamp, self._tz)
            writer.writerow({
                'id': reading.id,
                'date': local.strftime('%Y-%m-%d'),
                'time': local.strftime('%H:%M'),
                'systolic': reading.systolic,
                'diastolic': reading.diastolic,
                'pulse': reading.pulse if reading.pulse is not None else '',
                'body_position': reading.body_position.value,
                'note': reading.note or '',
            })

        content = buffer.getvalue().encode('utf-8')
        filename = build_export_filename(
            self._filename_prefix, to_local(generated, self._tz).date(), start, end, "csv"
        )
        logger.info("CSV exported", extra={'readings': len(selected), 'export_filename': filename})
        return ExportDocument(content=content, filename=filename, media_type="text/csv")


def export_csv(
    readings: Iterable[Reading],
    start_date: DateBound = None,
    end_date: DateBound = None,
    generated_at: Optional[datetime] = None,
) -> ExportDocument:
    """Export readings as CSV with the configured defaults."""
    return CsvExporter().export_csv(readings, start_date=start_date, end_date=end_date, generated_at=generated_at)

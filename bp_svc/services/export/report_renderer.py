"""
PDF report renderer for blood pressure readings.

Produces a paginated document:
- Header block (title, patient, generation date, period)
- Line chart of systolic/diastolic over time
- Summary notes box (count, average, highest, lowest, pulse)
- Table with one row per reading, header repeated on every page

Layout is drawn directly on a reportlab canvas with a running vertical
offset; a new page starts whenever the next element would pass the usable
page height. The canvas runs in invariant mode, so the same readings and
generation time always produce identical bytes.

Usage:
    renderer = ReportRenderer()
    document = renderer.render_report(readings, start_date="2025-01-01")
    Path(document.filename).write_bytes(document.content)
"""

import io
import logging
import uuid
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from reportlab.graphics import renderPDF
from reportlab.lib.colors import HexColor, black
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas as pdf_canvas

from bp_svc.core.config import Settings, get_settings
from bp_svc.core.datetime_utils import format_for_display, to_local, to_utc, utc_now
from bp_svc.core.exceptions import BPServiceError, ReportRenderError
from bp_svc.core.logging_config import reset_report_id, set_report_id
from bp_svc.schemas import BodyPosition, Reading
from bp_svc.services.classifier import classify
from bp_svc.services.export.chart_builder import build_chart
from bp_svc.services.export.document import ExportDocument, ReportRow, ReportSummary
from bp_svc.services.export.selection import (
    DateBound,
    build_export_filename,
    parse_range,
    select_for_export,
    truncate_note,
)
from bp_svc.services.statistics import all_time_stats, highest_systolic, lowest_systolic
from bp_svc.services.trend_series import build_series

logger = logging.getLogger(__name__)


# =============================================================================
# LAYOUT CONSTANTS (points)
# =============================================================================

MARGIN = 40
FOOTER_HEIGHT = 20
CHART_HEIGHT = 220
ROW_HEIGHT = 16
TABLE_HEADER_HEIGHT = 20
NOTE_LINE_HEIGHT = 14
SECTION_GAP = 14

PULSE_PLACEHOLDER = "-"

TABLE_COLUMNS: Tuple[Tuple[str, float], ...] = (
    # (title, share of usable width)
    ("Date", 0.14),
    ("Time", 0.09),
    ("Systolic", 0.11),
    ("Diastolic", 0.11),
    ("Pulse", 0.09),
    ("Position", 0.11),
    ("Note", 0.35),
)

TITLE_COLOR = HexColor("#0A0A0A")
MUTED_COLOR = HexColor("#737373")
HEADER_FILL = HexColor("#374151")
STRIPE_FILL = HexColor("#F5F5F5")
NOTES_FILL = HexColor("#FAFAFA")
NOTES_BORDER = HexColor("#E5E5E5")

# Built-in Type 1 fonts only cover Latin-1; configure a TrueType font for other scripts
DEFAULT_FONT = "Helvetica"
DEFAULT_BOLD_FONT = "Helvetica-Bold"


# =============================================================================
# ROW & SUMMARY PREPARATION
# =============================================================================

def build_report_row(reading: Reading, tz: Optional[tzinfo], note_max_chars: int) -> ReportRow:
    """Format one reading as a table row."""
    local = to_local(reading.timestamp, tz)
    return ReportRow(
        reading_id=reading.id,
        date=local.strftime("%Y-%m-%d"),
        time=local.strftime("%H:%M"),
        systolic=str(reading.systolic),
        diastolic=str(reading.diastolic),
        pulse=str(reading.pulse) if reading.pulse is not None else PULSE_PLACEHOLDER,
        position=BodyPosition(reading.body_position).label,
        note=truncate_note(reading.note, note_max_chars),
        color=classify(reading.systolic, reading.diastolic).color,
    )


def summarize_readings(readings: Sequence[Reading], tz: Optional[tzinfo] = None) -> ReportSummary:
    """
    Compute the summary notes for sorted, non-empty export readings.

    Raises:
        ValueError: If readings is empty
    """
    if not readings:
        raise ValueError("Cannot summarize an empty reading selection")

    stats = all_time_stats(readings)
    highest = highest_systolic(readings)
    lowest = lowest_systolic(readings)
    category = classify(stats.systolic, stats.diastolic)
    return ReportSummary(
        count=stats.count,
        average_systolic=stats.systolic,
        average_diastolic=stats.diastolic,
        average_pulse=stats.pulse,
        average_category=category.overall_label,
        highest=highest,
        lowest=lowest,
        highest_when=format_for_display(highest.timestamp, tz),
        lowest_when=format_for_display(lowest.timestamp, tz),
    )


# =============================================================================
# FONTS
# =============================================================================

def register_report_font(font_path: str) -> str:
    """
    Register a TrueType font with reportlab and return its font name.

    Registering the same file twice reuses the first registration.

    Raises:
        ReportRenderError: If the file is missing or not a usable TrueType font
    """
    name = f"BPReport-{Path(font_path).stem}"
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(TTFont(name, font_path))
    except (TTFError, OSError) as e:
        logger.error("Report font registration failed", extra={"path": font_path, "error": str(e)})
        raise ReportRenderError(detail=f"Cannot load report font '{font_path}'", path=font_path) from e
    logger.debug("Report font registered", extra={"font": name, "path": font_path})
    return name


# =============================================================================
# CANVAS WRITER
# =============================================================================

class _PageWriter:
    """
    Canvas wrapper tracking the running vertical offset and page count.

    `offset` is the distance already used below the top margin of the
    current page.
    """

    def __init__(
        self,
        buffer: io.BytesIO,
        page_size: Tuple[float, float],
        title: str,
        footer_text: str,
        font: str = DEFAULT_FONT,
    ):
        self.canvas = pdf_canvas.Canvas(buffer, pagesize=page_size, invariant=1, pageCompression=1)
        self.canvas.setTitle(title)
        self.canvas.setCreator("bp_svc")
        self.width, self.height = page_size
        self.footer_text = footer_text
        self.font = font
        self.page_number = 1
        self.offset = 0.0

    @property
    def usable_width(self) -> float:
        return self.width - 2 * MARGIN

    @property
    def usable_height(self) -> float:
        return self.height - 2 * MARGIN - FOOTER_HEIGHT

    @property
    def y(self) -> float:
        """Current baseline position in canvas coordinates."""
        return self.height - MARGIN - self.offset

    def fits(self, height: float) -> bool:
        return self.offset + height <= self.usable_height

    def advance(self, height: float) -> None:
        self.offset += height

    def new_page(self) -> None:
        self._draw_footer()
        self.canvas.showPage()
        self.page_number += 1
        self.offset = 0.0

    def finish(self) -> None:
        self._draw_footer()
        self.canvas.save()

    def _draw_footer(self) -> None:
        c = self.canvas
        c.setFont(self.font, 8)
        c.setFillColor(MUTED_COLOR)
        c.drawString(MARGIN, MARGIN, self.footer_text)
        c.drawRightString(self.width - MARGIN, MARGIN, f"Page {self.page_number}")


# =============================================================================
# RENDERER
# =============================================================================

class ReportRenderer:
    """
    Renders the clinical summary PDF for a reading collection.

    Constructor arguments override the configured defaults; the render
    itself reads no ambient state.
    """

    def __init__(
        self,
        tz: Optional[tzinfo] = None,
        page_size: Optional[Tuple[float, float]] = None,
        note_max_chars: Optional[int] = None,
        window_size: Optional[int] = None,
        filename_prefix: Optional[str] = None,
        font_path: Optional[str] = None,
        bold_font_path: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Raises:
            ValueError: If note_max_chars or window_size is below 1
            ReportRenderError: If a configured font cannot be loaded
        """
        settings = settings if settings is not None else get_settings()
        self._tz = tz if tz is not None else settings.tzinfo
        self._page_size = page_size if page_size is not None else settings.page_size
        self._note_max_chars = note_max_chars if note_max_chars is not None else settings.bp_svc_note_max_chars
        self._window_size = window_size if window_size is not None else settings.bp_svc_rolling_window
        self._filename_prefix = filename_prefix if filename_prefix is not None else settings.bp_svc_report_prefix

        if self._note_max_chars < 1:
            raise ValueError(f"note_max_chars must be at least 1, got {self._note_max_chars}")
        if self._window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {self._window_size}")

        font_path = font_path if font_path is not None else settings.bp_svc_font_path
        bold_font_path = bold_font_path if bold_font_path is not None else settings.bp_svc_bold_font_path
        self._font = register_report_font(font_path) if font_path else DEFAULT_FONT
        if bold_font_path:
            self._bold_font = register_report_font(bold_font_path)
        else:
            self._bold_font = self._font if font_path else DEFAULT_BOLD_FONT

    @property
    def font(self) -> str:
        """Font name used for regular report text."""
        return self._font

    def render_report(
        self,
        readings: Iterable[Reading],
        start_date: DateBound = None,
        end_date: DateBound = None,
        patient_name: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> ExportDocument:
        """
        Render the PDF report.

        Args:
            readings: Readings of one profile, in any order
            start_date: Optional inclusive start (YYYY-MM-DD)
            end_date: Optional inclusive end (YYYY-MM-DD)
            patient_name: Optional name printed in the header
            generated_at: Generation time (defaults to now); drives the
                filename and header date

        Returns:
            ExportDocument with PDF bytes, filename, rows and summary

        Raises:
            InvalidDateRangeError: If a bound is not a valid date
            EmptyExportError: If no reading falls inside the range
            ReportRenderError: If the PDF backend fails
        """
        generated = to_utc(generated_at) if generated_at is not None else utc_now()
        token = set_report_id(uuid.uuid4().hex)
        try:
            selected = select_for_export(readings, start_date, end_date, self._tz)
            start, end = parse_range(start_date, end_date)

            rows = tuple(build_report_row(r, self._tz, self._note_max_chars) for r in selected)
            summary = summarize_readings(selected, self._tz)
            points = list(build_series(selected, window_size=self._window_size, tz=self._tz))

            content, page_count = self._draw(rows, summary, points, start, end, patient_name, generated)
            filename = build_export_filename(
                self._filename_prefix, to_local(generated, self._tz).date(), start, end, "pdf"
            )

            logger.info(
                "Report rendered",
                extra={'readings': len(rows), 'pages': page_count, 'bytes': len(content), 'export_filename': filename}
            )
            return ExportDocument(
                content=content,
                filename=filename,
                media_type="application/pdf",
                rows=rows,
                summary=summary,
                page_count=page_count,
            )
        finally:
            reset_report_id(token)

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _draw(self, rows, summary, points, start, end, patient_name, generated) -> Tuple[bytes, int]:
        """Draw the whole document into memory; nothing is returned on failure."""
        buffer = io.BytesIO()
        generated_label = format_for_display(generated, self._tz)
        try:
            writer = _PageWriter(
                buffer,
                self._page_size,
                title="Blood Pressure Report",
                footer_text=f"Generated {generated_label}",
                font=self._font,
            )
            self._draw_header(writer, summary, start, end, patient_name, generated_label)
            self._draw_chart(writer, points)
            self._draw_notes(writer, summary)
            self._draw_table(writer, rows)
            writer.finish()
        except BPServiceError:
            raise
        except Exception as e:
            logger.exception("PDF rendering failed")
            raise ReportRenderError(detail=f"Failed to render report: {e}") from e
        return buffer.getvalue(), writer.page_number

    def _draw_header(self, writer: _PageWriter, summary, start, end, patient_name, generated_label) -> None:
        c = writer.canvas

        writer.advance(20)
        c.setFont(self._bold_font, 18)
        c.setFillColor(TITLE_COLOR)
        c.drawString(MARGIN, writer.y, "Blood Pressure Report")

        details = []
        if patient_name:
            details.append(f"Patient: {patient_name}")
        details.append(f"Generated: {generated_label}")
        if start is not None or end is not None:
            details.append(
                "Period: {} to {}".format(
                    start.isoformat() if start else "start",
                    end.isoformat() if end else "end",
                )
            )
        details.append(f"Readings: {summary.count}")

        c.setFont(self._font, 10)
        c.setFillColor(MUTED_COLOR)
        writer.advance(6)
        for line in details:
            writer.advance(NOTE_LINE_HEIGHT)
            c.drawString(MARGIN, writer.y, line)

        writer.advance(SECTION_GAP)
        c.setStrokeColor(NOTES_BORDER)
        c.line(MARGIN, writer.y, writer.width - MARGIN, writer.y)

    def _section_title(self, writer: _PageWriter, title: str) -> None:
        writer.advance(SECTION_GAP + 12)
        writer.canvas.setFont(self._bold_font, 12)
        writer.canvas.setFillColor(TITLE_COLOR)
        writer.canvas.drawString(MARGIN, writer.y, title)

    def _draw_chart(self, writer: _PageWriter, points) -> None:
        if not writer.fits(SECTION_GAP + 12 + CHART_HEIGHT):
            writer.new_page()
        self._section_title(writer, "Blood Pressure Trend")

        drawing = build_chart(points, writer.usable_width, CHART_HEIGHT, font_name=self._font)
        writer.advance(CHART_HEIGHT)
        renderPDF.draw(drawing, writer.canvas, MARGIN, writer.y)

    def _draw_notes(self, writer: _PageWriter, summary: ReportSummary) -> None:
        lines = summary.note_lines()
        box_height = len(lines) * NOTE_LINE_HEIGHT + 12
        if not writer.fits(SECTION_GAP + 12 + 8 + box_height):
            writer.new_page()
        self._section_title(writer, "Summary Notes")

        c = writer.canvas
        writer.advance(8)
        top = writer.y
        c.setFillColor(NOTES_FILL)
        c.setStrokeColor(NOTES_BORDER)
        c.roundRect(MARGIN, top - box_height, writer.usable_width, box_height, 6, stroke=1, fill=1)

        c.setFont(self._font, 10)
        c.setFillColor(black)
        writer.advance(4)
        for line in lines:
            writer.advance(NOTE_LINE_HEIGHT)
            c.drawString(MARGIN + 10, writer.y, line)
        writer.advance(8)

    def _column_positions(self, writer: _PageWriter):
        x = MARGIN
        positions = []
        for title, share in TABLE_COLUMNS:
            positions.append((title, x))
            x += share * writer.usable_width
        return positions

    def _draw_table_header(self, writer: _PageWriter) -> None:
        c = writer.canvas
        writer.advance(TABLE_HEADER_HEIGHT)
        c.setFillColor(HEADER_FILL)
        c.rect(MARGIN, writer.y - 5, writer.usable_width, TABLE_HEADER_HEIGHT, stroke=0, fill=1)
        c.setFont(self._bold_font, 9)
        c.setFillColor(HexColor("#FFFFFF"))
        for title, x in self._column_positions(writer):
            c.drawString(x + 3, writer.y + 2, title)

    def _draw_table(self, writer: _PageWriter, rows: Sequence[ReportRow]) -> None:
        if not writer.fits(SECTION_GAP + 12 + TABLE_HEADER_HEIGHT + ROW_HEIGHT):
            writer.new_page()
        self._section_title(writer, "Readings")
        writer.advance(6)
        self._draw_table_header(writer)

        c = writer.canvas
        columns = self._column_positions(writer)
        for index, row in enumerate(rows):
            if not writer.fits(ROW_HEIGHT):
                writer.new_page()
                self._draw_table_header(writer)

            writer.advance(ROW_HEIGHT)
            if index % 2 == 1:
                c.setFillColor(STRIPE_FILL)
                c.rect(MARGIN, writer.y - 4, writer.usable_width, ROW_HEIGHT, stroke=0, fill=1)

            c.setFont(self._font, 8)
            for (title, x), value in zip(columns, row.cells()):
                if title in ("Systolic", "Diastolic"):
                    c.setFillColor(HexColor(row.color))
                    c.setFont(self._bold_font, 8)
                else:
                    c.setFillColor(black)
                    c.setFont(self._font, 8)
                c.drawString(x + 3, writer.y, value)


def render_report(
    readings: Iterable[Reading],
    start_date: DateBound = None,
    end_date: DateBound = None,
    patient_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> ExportDocument:
    """Render a PDF report with the configured defaults. See ReportRenderer.render_report."""
    return ReportRenderer().render_report(
        readings,
        start_date=start_date,
        end_date=end_date,
        patient_name=patient_name,
        generated_at=generated_at,
    )

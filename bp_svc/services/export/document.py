"""
Result structures produced by the export renderers.

These are ephemeral view objects; nothing here is persisted by the core.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from bp_svc.schemas import Reading


@dataclass(frozen=True)
class ReportRow:
    """One table row of the report, already formatted for display."""
    reading_id: str
    date: str
    time: str
    systolic: str
    diastolic: str
    pulse: str
    position: str
    note: str
    color: str

    def cells(self) -> Tuple[str, ...]:
        """Cell values in column order."""
        return (
            self.date,
            self.time,
            self.systolic,
            self.diastolic,
            self.pulse,
            self.position,
            self.note,
        )


@dataclass(frozen=True)
class ReportSummary:
    """
    Summary statistics printed in the report's notes box.

    highest/lowest are the first readings with the max/min systolic value
    in export (oldest-first) order.
    """
    count: int
    average_systolic: int
    average_diastolic: int
    average_pulse: int
    average_category: str
    highest: Reading
    lowest: Reading
    highest_when: str
    lowest_when: str

    def note_lines(self) -> List[str]:
        """Fixed summary-note lines, in display order."""
        pulse = f"{self.average_pulse} bpm" if self.average_pulse else "no data"
        return [
            f"Total readings: {self.count}",
            f"Average: {self.average_systolic}/{self.average_diastolic} mmHg ({self.average_category})",
            f"Highest systolic: {self.highest.systolic}/{self.highest.diastolic} mmHg on {self.highest_when}",
            f"Lowest systolic: {self.lowest.systolic}/{self.lowest.diastolic} mmHg on {self.lowest_when}",
            f"Average pulse: {pulse}",
        ]


@dataclass(frozen=True)
class ExportDocument:
    """
    A finished export artifact.

    The caller persists `content` under `filename` using whatever save
    mechanism its platform provides.
    """
    content: bytes
    filename: str
    media_type: str
    rows: Tuple[ReportRow, ...] = ()
    summary: Optional[ReportSummary] = None
    page_count: int = 0

    @property
    def size(self) -> int:
        return len(self.content)

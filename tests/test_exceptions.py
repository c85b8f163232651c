"""
Tests for the service exception hierarchy.
"""
from bp_svc.core.exceptions import (
    BPServiceError,
    EmptyExportError,
    ExportError,
    InvalidDateRangeError,
    ReportRenderError,
)


def test_default_detail():
    error = ReportRenderError()
    assert error.detail == "Failed to render report"
    assert str(error) == "Failed to render report"
    assert error.to_dict() == {"detail": "Failed to render report"}


def test_custom_detail_and_context():
    error = BPServiceError("boom", reading_id="r1")
    assert error.to_dict() == {"detail": "boom", "context": {"reading_id": "r1"}}


def test_hierarchy():
    assert issubclass(EmptyExportError, ExportError)
    assert issubclass(ReportRenderError, ExportError)
    assert issubclass(InvalidDateRangeError, ValueError)
    assert issubclass(ExportError, BPServiceError)


def test_invalid_date_range_detail():
    error = InvalidDateRangeError(value="2025-99-01")
    assert error.detail == "Invalid date '2025-99-01', expected YYYY-MM-DD"
    assert error.context == {"value": "2025-99-01"}

"""
Shared exception classes for the blood pressure service.

This module provides a custom exception hierarchy for domain-specific errors
with a consistent structure (human-readable detail plus keyword context) so
the hosting application can display them directly.

Usage:
    from bp_svc.core.exceptions import EmptyExportError

    raise EmptyExportError(start_date="2024-01-01", end_date="2024-01-31")
"""
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASSES
# =============================================================================

class BPServiceError(Exception):
    """
    Base exception for all blood pressure service errors.

    All custom exceptions inherit from this class.
    Provides consistent error structure with a detail message and context.
    """

    detail: str = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None, **kwargs: Any):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            **kwargs: Additional context to include in the error payload.
        """
        self.detail = detail or self.__class__.detail
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for display or serialization."""
        result: Dict[str, Any] = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# EXPORT EXCEPTIONS
# =============================================================================

class ExportError(BPServiceError):
    """Base exception for export-related errors."""

    detail = "Export failed"


class EmptyExportError(ExportError):
    """
    Raised when the export selection contains no readings.

    Covers both "no data in this range" and an inverted range (end before
    start); the two causes are not distinguished.
    """

    detail = "No readings in this range"

    def __init__(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        **kwargs: Any
    ):
        super().__init__(start_date=start_date, end_date=end_date, **kwargs)


class InvalidDateRangeError(ExportError, ValueError):
    """Raised when an export range bound is not a valid YYYY-MM-DD date."""

    detail = "Invalid date range"

    def __init__(self, value: Optional[str] = None, **kwargs: Any):
        detail = f"Invalid date '{value}', expected YYYY-MM-DD" if value else self.detail
        super().__init__(detail=detail, value=value, **kwargs)


class ReportRenderError(ExportError):
    """Raised when the PDF backend fails while rendering a report."""

    detail = "Failed to render report"

"""
Custom exceptions for the activity analyzer.

Per-sample and per-field problems never raise: they degrade to ``None``.
The exceptions below are reserved for structurally invalid input. Each
exception carries:
- A descriptive message
- An error code
- Optional details for debugging
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Series errors
    SERIES_LENGTH_MISMATCH = "SERIES_LENGTH_MISMATCH"
    SERIES_NOT_MONOTONIC = "SERIES_NOT_MONOTONIC"

    # Zone errors
    ZONE_CONFIGURATION_ERROR = "ZONE_CONFIGURATION_ERROR"


class ActivityAnalyzerError(Exception):
    """
    Base exception for all activity analyzer errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class ValidationError(ActivityAnalyzerError):
    """Raised when an option or argument is invalid."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=error_details,
        )


class SeriesValidationError(ActivityAnalyzerError):
    """Raised when a series is structurally invalid (length mismatch, ordering)."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SERIES_LENGTH_MISMATCH,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class ZoneConfigurationError(ActivityAnalyzerError):
    """Raised when zones do not cover [0, inf) without gaps or overlaps."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.ZONE_CONFIGURATION_ERROR,
            details=details,
        )


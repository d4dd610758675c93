"""Typed extraction errors.

Field-level validators never raise; strict resolution raises
:class:`ExtractionError`; the pipeline converts every raised error into an
``ErrorDetail`` so nothing unstructured leaves the parse boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    DATE_PARSE_FAILED = "DATE_PARSE_FAILED"
    TIME_PARSE_FAILED = "TIME_PARSE_FAILED"
    AIRPORT_NOT_FOUND = "AIRPORT_NOT_FOUND"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    TIMEZONE_MISMATCH = "TIMEZONE_MISMATCH"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    OCR_CONFIDENCE_TOO_LOW = "OCR_CONFIDENCE_TOO_LOW"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    INVALID_TIME_FORMAT = "INVALID_TIME_FORMAT"
    OCR_FAILED = "OCR_FAILED"


DEFAULT_SUGGESTIONS: Dict[ErrorCode, str] = {
    ErrorCode.DATE_PARSE_FAILED: "Please manually enter the flight date in MM/DD/YYYY format",
    ErrorCode.TIME_PARSE_FAILED: "Please enter the time in HH:MM (24-hour) format",
    ErrorCode.AIRPORT_NOT_FOUND: "Please enter the 3-letter IATA airport code (e.g. LAX)",
    ErrorCode.INVALID_DATE_RANGE: "Check the flight date; it must be within the last year or the next two years",
    ErrorCode.TIMEZONE_MISMATCH: "Check the local time printed on the boarding pass",
    ErrorCode.MISSING_REQUIRED_FIELD: "Please enter this field manually",
    ErrorCode.OCR_CONFIDENCE_TOO_LOW: "Retake the photo in better light or enter the value manually",
    ErrorCode.ROUTE_NOT_FOUND: "Please enter the arrival time manually",
    ErrorCode.INVALID_TIME_FORMAT: "Please enter the time in HH:MM (24-hour) format",
    ErrorCode.OCR_FAILED: "Upload a clearer image of the boarding pass or enter the flight manually",
}


def _clip(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def error_message(code: ErrorCode, field: Optional[str] = None, value: Any = None,
                  confidence: Optional[float] = None, required_format: Optional[str] = None) -> str:
    if code is ErrorCode.DATE_PARSE_FAILED:
        return "Failed to extract date from boarding pass" + (f': "{_clip(str(value))}"' if value else "")
    if code is ErrorCode.TIME_PARSE_FAILED:
        return "Failed to parse time" + (f" for {field}" if field else "")
    if code is ErrorCode.AIRPORT_NOT_FOUND:
        return f"Unknown airport code: {value or 'N/A'}"
    if code is ErrorCode.INVALID_DATE_RANGE:
        return f"Date {value or 'N/A'} is outside the valid range (1 year back, 2 years ahead)"
    if code is ErrorCode.TIMEZONE_MISMATCH:
        return f"Timezone mismatch for {field or 'field'}" + (f": {value}" if value else "")
    if code is ErrorCode.MISSING_REQUIRED_FIELD:
        return f"Required field missing: {field or 'unknown'}"
    if code is ErrorCode.OCR_CONFIDENCE_TOO_LOW:
        return f"OCR confidence ({confidence or 0:.2f}) too low for reliable extraction" + (
            f" of {field}" if field else ""
        )
    if code is ErrorCode.ROUTE_NOT_FOUND:
        return f"No flight duration data for route: {value or 'N/A'}"
    if code is ErrorCode.INVALID_TIME_FORMAT:
        msg = f'Invalid time format: "{value or "N/A"}"'
        return msg + (f" (expected: {required_format})" if required_format else "")
    if code is ErrorCode.OCR_FAILED:
        return "No OCR backend produced usable text"
    return f"Boarding pass error: {code.value}"


class ExtractionError(Exception):
    """A resolution failure tagged with one of the fixed :class:`ErrorCode` values."""

    def __init__(
        self,
        code: ErrorCode,
        *,
        field: Optional[str] = None,
        value: Any = None,
        suggestion: Optional[str] = None,
        confidence: Optional[float] = None,
        required_format: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.code = ErrorCode(code)
        self.field = field
        self.offending_value = value
        self.confidence = confidence
        self.required_format = required_format
        self.suggestion = suggestion or DEFAULT_SUGGESTIONS.get(self.code)
        self.message = message or error_message(self.code, field, value, confidence, required_format)
        # set by the strict resolver to the state the failure happened in
        self.state: Optional[str] = None
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"ExtractionError({self.code.value}, field={self.field!r}, value={self.offending_value!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "field": self.field,
            "offending_value": None if self.offending_value is None else str(self.offending_value),
            "suggestion": self.suggestion,
            "confidence": self.confidence,
            "state": self.state,
        }


class BackendUnavailable(Exception):
    """Raised by a recognizer that cannot run (missing key, binary, quota)."""

    def __init__(self, backend: str, reason: str) -> None:
        self.backend = backend
        self.reason = reason
        super().__init__(f"{backend} unavailable: {reason}")

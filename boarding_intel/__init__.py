"""boarding-intel: turn OCR text from boarding passes into zoned flight records."""

from .errors import BackendUnavailable, ErrorCode, ExtractionError
from .geo import GeoResolver, haversine_miles
from .lexer import TokenExtractor, normalize_text
from .models import (
    AirportStop,
    ErrorDetail,
    FlightRecord,
    FlightRecordDraft,
    FlightTimes,
    ParseFailure,
    RecognizedText,
    Token,
    TokenKind,
    TokenSet,
    ValidationResult,
    WordConfidence,
    ZonedInstant,
)
from .pipeline import BoardingPassPipeline, calculate_priority, estimated_review_time
from .reference import ReferenceTables, build_reference_tables, load_reference_tables
from .time_resolver import ResolutionState, TimeResolver, correct_ocr_time_strict
from .validator import FieldValidator, correct_ocr_time

__version__ = "0.1.0"

__all__ = [
    "AirportStop",
    "BackendUnavailable",
    "BoardingPassPipeline",
    "ErrorCode",
    "ErrorDetail",
    "ExtractionError",
    "FieldValidator",
    "FlightRecord",
    "FlightRecordDraft",
    "FlightTimes",
    "GeoResolver",
    "ParseFailure",
    "RecognizedText",
    "ReferenceTables",
    "ResolutionState",
    "TimeResolver",
    "Token",
    "TokenExtractor",
    "TokenKind",
    "TokenSet",
    "ValidationResult",
    "WordConfidence",
    "ZonedInstant",
    "build_reference_tables",
    "calculate_priority",
    "correct_ocr_time",
    "correct_ocr_time_strict",
    "estimated_review_time",
    "haversine_miles",
    "load_reference_tables",
    "normalize_text",
]

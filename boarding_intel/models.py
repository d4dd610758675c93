# models.py
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ErrorCode, ExtractionError

CRITICAL_FIELDS = ("origin", "destination", "date", "departure_time")
# Fields counted towards "total missing" for manual-review priority
TRACKED_FIELDS = CRITICAL_FIELDS + ("flight_number", "arrival_time")


class TokenKind(str, Enum):
    AIRPORT = "airport"
    FLIGHT = "flight"
    TIME = "time"
    DATE = "date"
    GATE = "gate"
    SEAT = "seat"
    TERMINAL = "terminal"
    CONFIRMATION = "confirmation"
    PASSENGER_NAME = "passenger_name"


class TimeRole(str, Enum):
    BOARDING = "boarding"
    DEPARTURE = "departure"
    ARRIVAL = "arrival"


class AirportRole(str, Enum):
    ORIGIN = "origin"
    DESTINATION = "destination"


class Token(BaseModel):
    """One recognized domain token; ``value`` is the normalized form of ``raw_value``."""

    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    raw_value: str
    value: str
    position: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    role: Optional[str] = None
    confidence: float = Field(default=0.7, ge=0, le=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def overlaps(self, start: int, end: int) -> bool:
        return self.position < end and start < self.end


class TokenSet(BaseModel):
    text: str
    tokens: List[Token] = Field(default_factory=list)
    airline_code: Optional[str] = None

    def __len__(self) -> int:
        return len(self.tokens)

    def of(self, kind: TokenKind) -> List[Token]:
        return [t for t in self.tokens if t.kind == kind]

    def first(self, kind: TokenKind, role: Optional[str] = None) -> Optional[Token]:
        for t in self.tokens:
            if t.kind == kind and (role is None or t.role == role):
                return t
        return None

    def flight_date(self) -> Optional[Token]:
        """First date printed with its own year, else the first date."""
        dates = self.of(TokenKind.DATE)
        for t in dates:
            if not t.metadata.get("year_inferred"):
                return t
        return dates[0] if dates else None

    def time_for(self, role: TimeRole) -> Optional[Token]:
        return self.first(TokenKind.TIME, role.value)

    def airport_for(self, role: AirportRole) -> Optional[Token]:
        return self.first(TokenKind.AIRPORT, role.value)


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    value: Optional[str] = None
    suggestion: Optional[str] = None
    confidence: float = Field(default=0.0, ge=0, le=1)


class OcrTimeCorrection(BaseModel):
    time: Optional[str] = None
    confidence: float = Field(default=0.0, ge=0, le=1)
    corrected: bool = False
    valid: bool = False


class WordConfidence(BaseModel):
    word: str
    confidence: float = Field(..., ge=0, le=1)
    line: int = 0


class RecognizedText(BaseModel):
    """Output of a ``TextRecognizer``: raw text plus optional per-word confidence."""

    text: str
    word_confidences: Optional[List[WordConfidence]] = None
    backend: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def has_word_confidences(self) -> bool:
        return bool(self.word_confidences)


class ZonedInstant(BaseModel):
    """A UTC instant that always carries the IANA zone it was read in."""

    model_config = ConfigDict(frozen=True)

    timestamp_utc: datetime
    iana_timezone: str
    source_airport_code: Optional[str] = None
    confidence: float = Field(default=0.9, ge=0, le=1)

    @field_validator("iana_timezone")
    @classmethod
    def _known_zone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown IANA timezone {v!r}") from exc
        return v

    @field_validator("timestamp_utc")
    @classmethod
    def _aware_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("timestamp must be timezone-aware")
        return v.astimezone(timezone.utc)

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.iana_timezone)

    def local_time(self) -> datetime:
        return self.timestamp_utc.astimezone(self.zone)

    @property
    def local_hhmm(self) -> str:
        return self.local_time().strftime("%H:%M")

    @property
    def local_date(self) -> date:
        return self.local_time().date()

    def shifted(self, hours: float) -> "ZonedInstant":
        return self.model_copy(update={"timestamp_utc": self.timestamp_utc + timedelta(hours=hours)})

    def in_zone(self, iana_timezone: str, airport_code: Optional[str], confidence: Optional[float] = None) -> "ZonedInstant":
        return ZonedInstant(
            timestamp_utc=self.timestamp_utc,
            iana_timezone=iana_timezone,
            source_airport_code=airport_code,
            confidence=self.confidence if confidence is None else confidence,
        )


class AirportStop(BaseModel):
    code: str
    city: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    gate: Optional[str] = None
    terminal: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.strip().upper()


class ExtractionMetadata(BaseModel):
    confidence: float = Field(default=0.0, ge=0, le=1)
    warnings: List[str] = Field(default_factory=list)
    backend: Optional[str] = None
    mode: str = "strict"
    text_source: str = "raw"
    time_order: List[str] = Field(default_factory=list)
    estimated_fields: List[str] = Field(default_factory=list)
    # role -> "[YYYY-MM-DDT]HH:MM" read but never zoned (lenient records, partial drafts)
    unzoned_times: Dict[str, str] = Field(default_factory=dict)
    field_confidences: Dict[str, float] = Field(default_factory=dict)


class FlightRecordDraft(BaseModel):
    airline: Optional[str] = None
    airline_code: Optional[str] = None
    flight_number: Optional[str] = None
    confirmation_code: Optional[str] = None
    passenger_name: Optional[str] = None
    origin: Optional[AirportStop] = None
    destination: Optional[AirportStop] = None
    flight_date: Optional[date] = None
    departure: Optional[ZonedInstant] = None
    arrival: Optional[ZonedInstant] = None
    boarding: Optional[ZonedInstant] = None
    seat: Optional[str] = None
    metadata: ExtractionMetadata = Field(default_factory=ExtractionMetadata)

    @field_validator("flight_number")
    @classmethod
    def _clean_flight_number(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return re.sub(r"[^\w]", "", v.upper())

    def has_field(self, name: str) -> bool:
        if name == "origin":
            return self.origin is not None
        if name == "destination":
            return self.destination is not None
        if name == "date":
            return self.flight_date is not None
        if name in ("departure_time", "arrival_time", "boarding_time"):
            role = name[: -len("_time")]
            return getattr(self, role) is not None or role in self.metadata.unzoned_times
        return getattr(self, name, None) is not None

    def missing_fields(self, fields=TRACKED_FIELDS) -> List[str]:
        return [f for f in fields if not self.has_field(f)]

    def valid_field_count(self) -> int:
        names = TRACKED_FIELDS + ("boarding_time", "seat", "confirmation_code", "passenger_name")
        count = sum(1 for n in names if self.has_field(n))
        for stop in (self.origin, self.destination):
            if stop and stop.gate:
                count += 1
        return count

    def finalize(self) -> "FlightRecord":
        return FlightRecord.model_validate(self.model_dump())


class FlightRecord(FlightRecordDraft):
    """An accepted record; assignment is rejected once the pipeline hands it out."""

    model_config = ConfigDict(frozen=True)

    @property
    def success(self) -> bool:
        return True


class ErrorDetail(BaseModel):
    field: Optional[str] = None
    code: ErrorCode
    message: str
    suggestion: Optional[str] = None
    offending_value: Optional[str] = None

    @classmethod
    def from_error(cls, exc: ExtractionError) -> "ErrorDetail":
        return cls(
            field=exc.field,
            code=exc.code,
            message=exc.message,
            suggestion=exc.suggestion,
            offending_value=None if exc.offending_value is None else str(exc.offending_value),
        )


class ParseFailure(BaseModel):
    error: bool = True
    errors: List[ErrorDetail] = Field(default_factory=list)
    requires_manual_entry: List[str] = Field(default_factory=list)
    partial_data: Optional[FlightRecordDraft] = None
    priority: int = 0
    estimated_review_time: str = ""
    backends_tried: List[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return False


class FlightTimes(BaseModel):
    """Lenient time-resolution result; problems land in ``errors``/``warnings`` instead of raising."""

    departure: Optional[ZonedInstant] = None
    arrival: Optional[ZonedInstant] = None
    boarding: Optional[ZonedInstant] = None
    confidence: float = 0.0
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    estimated_fields: List[str] = Field(default_factory=list)
    unzoned_times: Dict[str, str] = Field(default_factory=dict)
    time_order: List[str] = Field(default_factory=list)


class TimeParseResult(BaseModel):
    success: bool
    time: Optional[ZonedInstant] = None
    timezone: Optional[str] = None
    confidence: float = 0.0
    error: Optional[ErrorDetail] = None


class BoardingPassValidation(BaseModel):
    clean_text: str
    text_source: str = "raw"
    tokens: TokenSet
    fields: Dict[str, ValidationResult] = Field(default_factory=dict)
    extracted: Dict[str, str] = Field(default_factory=dict)

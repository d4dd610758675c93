# pipeline.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from statistics import mean
from typing import Iterable, List, Optional, Sequence, Union

from .chrono import Clock, utc_now
from .confidence import word_confidence_map
from .config import BACKEND_TIMEOUT, CONFIDENCE_FLOOR, DEFAULT_BACKENDS, PIPELINE_MODE
from .errors import BackendUnavailable, ErrorCode, ExtractionError
from .geo import GeoResolver
from .lexer import TokenExtractor
from .logging_utils import get_logger, log_event, new_document_id
from .models import (
    CRITICAL_FIELDS,
    TRACKED_FIELDS,
    AirportStop,
    BoardingPassValidation,
    ErrorDetail,
    ExtractionMetadata,
    FlightRecord,
    FlightRecordDraft,
    ParseFailure,
    RecognizedText,
    ValidationResult,
)
from .recognizers import TextRecognizer, build_backends
from .reference import ReferenceTables, load_reference_tables
from .time_resolver import TimeResolver
from .validator import FieldValidator

logger = get_logger("pipeline")

ParseResult = Union[FlightRecord, ParseFailure]

# Error raised for a critical field that never showed up
_MISSING_CODES = {
    "origin": ErrorCode.MISSING_REQUIRED_FIELD,
    "destination": ErrorCode.MISSING_REQUIRED_FIELD,
    "date": ErrorCode.DATE_PARSE_FAILED,
    "departure_time": ErrorCode.TIME_PARSE_FAILED,
}
# Error raised in strict mode when a field only has a suggested correction
_SUGGESTION_CODES = {
    "origin": ErrorCode.AIRPORT_NOT_FOUND,
    "destination": ErrorCode.AIRPORT_NOT_FOUND,
    "flight_number": ErrorCode.MISSING_REQUIRED_FIELD,
    "seat": ErrorCode.MISSING_REQUIRED_FIELD,
}


def calculate_priority(missing: Sequence[str]) -> int:
    """10 per missing critical field plus 1 per missing field of any kind."""
    critical = sum(1 for f in missing if f in CRITICAL_FIELDS)
    return 10 * critical + len(missing)


def estimated_review_time(priority: int) -> str:
    if priority >= 30:
        return "5-10 minutes"
    if priority >= 20:
        return "10-20 minutes"
    if priority >= 10:
        return "20-30 minutes"
    return "30-60 minutes"


@dataclass
class _Attempt:
    backend: str
    draft: FlightRecordDraft
    record: Optional[FlightRecord] = None
    errors: List[ExtractionError] = field(default_factory=list)


class BoardingPassPipeline:
    """Run OCR backends in priority order; the first one whose text yields a full record wins.

    Backends are awaited one at a time. A backend that raises, times out or
    returns nothing is logged and skipped. When every backend is exhausted
    the richest partial draft is returned inside a :class:`ParseFailure`
    together with the fields that need manual entry.
    """

    def __init__(
        self,
        backends: Optional[Iterable[TextRecognizer]] = None,
        tables: Optional[ReferenceTables] = None,
        strict: Optional[bool] = None,
        clock: Optional[Clock] = None,
        backend_timeout: float = BACKEND_TIMEOUT,
        confidence_floor: float = CONFIDENCE_FLOOR,
    ) -> None:
        self.backends = list(backends) if backends is not None else build_backends(DEFAULT_BACKENDS)
        self.strict = PIPELINE_MODE != "lenient" if strict is None else strict
        self.clock = clock or utc_now
        self.backend_timeout = backend_timeout
        self.confidence_floor = confidence_floor

        self.tables = tables or load_reference_tables()
        self.geo = GeoResolver(self.tables)
        self.extractor = TokenExtractor(self.tables, clock=self.clock)
        self.validator = FieldValidator(self.tables, self.extractor, self.clock)
        self.resolver = TimeResolver(
            self.tables, self.geo, self.extractor, strict=self.strict, clock=self.clock, validator=self.validator
        )

    @property
    def mode(self) -> str:
        return "strict" if self.strict else "lenient"

    # ---------------- entry points ----------------

    async def parse(
        self,
        buffer: bytes,
        mime_type: str,
        backends: Optional[Iterable[TextRecognizer]] = None,
    ) -> ParseResult:
        did = new_document_id()
        chain = list(backends) if backends is not None else self.backends
        log_event(logger.logger, "parse_started", mime_type=mime_type, size=len(buffer),
                  backends=[b.name for b in chain], mode=self.mode)
        logger.start_timer("parse")

        tried: List[str] = []
        attempts: List[_Attempt] = []
        for backend in chain:
            if not backend.handles(mime_type):
                logger.debug(f"Skipping {backend.name}: does not handle {mime_type}")
                continue
            tried.append(backend.name)
            recognized = await self._recognize(backend, buffer, mime_type)
            if recognized is None:
                continue

            attempt = self._evaluate(recognized, backend.name)
            if attempt.record is not None:
                log_event(logger.logger, "parse_succeeded", backend=backend.name, document_id=did,
                          duration_ms=int(logger.end_timer("parse") * 1000),
                          confidence=attempt.record.metadata.confidence)
                return attempt.record
            attempts.append(attempt)

        result = self._failure(attempts, tried)
        log_event(logger.logger, "parse_failed", backends_tried=tried, document_id=did,
                  duration_ms=int(logger.end_timer("parse") * 1000),
                  requires_manual_entry=result.requires_manual_entry, priority=result.priority)
        return result

    def parse_text(self, text: str, backend: str = "text") -> ParseResult:
        """Run the same chain on text that was already recognized."""
        if not (text or "").strip():
            return self._failure([], [backend])
        attempt = self._evaluate(RecognizedText(text=text, backend=backend), backend)
        if attempt.record is not None:
            return attempt.record
        return self._failure([attempt], [backend])

    # ---------------- backends ----------------

    async def _recognize(self, backend: TextRecognizer, buffer: bytes, mime_type: str) -> Optional[RecognizedText]:
        timer = f"backend_{backend.name}"
        logger.start_timer(timer)
        try:
            recognized = await asyncio.wait_for(backend.recognize(buffer, mime_type), timeout=self.backend_timeout)
        except BackendUnavailable as e:
            logger.log_attempt(backend.name, "unavailable", logger.end_timer(timer), reason=e.reason)
            return None
        except asyncio.TimeoutError:
            logger.log_attempt(backend.name, "timeout", logger.end_timer(timer), timeout_s=self.backend_timeout)
            return None
        except Exception as e:
            logger.error(f"Backend {backend.name} failed: {e}", exc_info=True)
            logger.log_attempt(backend.name, "error", logger.end_timer(timer), error=str(e))
            return None

        elapsed = logger.end_timer(timer)
        if recognized is None or not recognized.text.strip():
            logger.log_attempt(backend.name, "empty", elapsed)
            return None
        logger.log_attempt(backend.name, "text", elapsed, chars=len(recognized.text),
                           word_confidences=recognized.has_word_confidences)
        if not recognized.backend:
            recognized = recognized.model_copy(update={"backend": backend.name})
        return recognized

    # ---------------- evaluation ----------------

    def _evaluate(self, recognized: RecognizedText, backend: str) -> _Attempt:
        validation = self.validator.validate_boarding_pass(recognized)
        attempt = self._assemble(validation, backend)
        if attempt.record is None and validation.text_source == "filtered":
            # filtering can drop a label; retry on the raw text
            raw = self.validator.validate_text(recognized.text, "raw", word_confidence_map(recognized))
            raw_attempt = self._assemble(raw, backend)
            if raw_attempt.record is not None or raw_attempt.draft.valid_field_count() > attempt.draft.valid_field_count():
                attempt = raw_attempt
        return attempt

    def _accept(
        self,
        name: str,
        result: Optional[ValidationResult],
        errors: List[ExtractionError],
        warnings: List[str],
    ) -> Optional[str]:
        """The value to store for ``name``, or ``None``; strict mode turns suggestions into errors."""
        if result is None:
            return None
        if result.valid:
            return result.value
        if result.suggestion:
            if self.strict:
                errors.append(ExtractionError(
                    _SUGGESTION_CODES.get(name, ErrorCode.MISSING_REQUIRED_FIELD),
                    field=name,
                    value=result.value,
                    suggestion=f"Did you mean {result.suggestion}?",
                    confidence=result.confidence,
                ))
                return None
            warnings.append(f"Corrected {name} {result.value} -> {result.suggestion}")
            return result.suggestion
        if name == "flight_number" and result.value:
            warnings.append(f"Unknown airline code in flight number {result.value}")
            return result.value
        return None

    def _stop(self, code: str, gate: Optional[str] = None, terminal: Optional[str] = None) -> AirportStop:
        info = self.tables.airport(code)
        return AirportStop(
            code=code,
            city=info.city if info else None,
            country=info.country if info else None,
            timezone=info.timezone if info else None,
            gate=gate,
            terminal=terminal,
        )

    def _assemble(self, validation: BoardingPassValidation, backend: str) -> _Attempt:
        fields = validation.fields
        tokens = validation.tokens
        meta = ExtractionMetadata(backend=backend, mode=self.mode, text_source=validation.text_source)
        draft = FlightRecordDraft(metadata=meta)
        errors: List[ExtractionError] = []
        warnings = meta.warnings

        flight = self._accept("flight_number", fields.get("flight_number"), errors, warnings)
        if flight:
            draft.flight_number = flight
            draft.airline_code = flight[:2]
            draft.airline = self.tables.airline_name(flight[:2])
        airline_code = draft.airline_code or tokens.airline_code
        if not draft.airline and airline_code:
            draft.airline = self.tables.airline_name(airline_code)

        gate = self._accept("gate", fields.get("gate"), errors, warnings)
        terminal = self._accept("terminal", fields.get("terminal"), errors, warnings)
        origin = self._accept("origin", fields.get("origin"), errors, warnings)
        destination = self._accept("destination", fields.get("destination"), errors, warnings)
        if origin:
            draft.origin = self._stop(origin, gate, terminal)
        if destination:
            draft.destination = self._stop(destination)

        flight_date = self._accept("date", fields.get("date"), errors, warnings)
        if flight_date:
            draft.flight_date = date.fromisoformat(flight_date)
        draft.seat = self._accept("seat", fields.get("seat"), errors, warnings)
        draft.confirmation_code = self._accept("confirmation_code", fields.get("confirmation_code"), errors, warnings)
        draft.passenger_name = self._accept("passenger_name", fields.get("passenger_name"), errors, warnings)
        meta.time_order = self.resolver.get_airline_time_order(airline_code)

        # critical fields: present, and trustworthy enough to act on
        critical_errors: List[ExtractionError] = [e for e in errors if e.field in CRITICAL_FIELDS]
        flagged = {e.field for e in critical_errors}
        for name in CRITICAL_FIELDS:
            result = fields.get(name)
            if name in flagged:
                continue
            if result is None or not (result.valid or (result.suggestion and not self.strict)):
                critical_errors.append(ExtractionError(_MISSING_CODES[name], field=name))
            elif result.confidence < self.confidence_floor:
                if self.strict:
                    critical_errors.append(ExtractionError(
                        ErrorCode.OCR_CONFIDENCE_TOO_LOW, field=name, value=result.value, confidence=result.confidence
                    ))
                else:
                    warnings.append(f"Low OCR confidence for {name} ({result.confidence:.2f})")
        soft_errors = [e for e in errors if e.field not in CRITICAL_FIELDS]

        if critical_errors:
            self._keep_readings(draft, fields)
            return _Attempt(backend, draft, errors=critical_errors + soft_errors)

        try:
            self._resolve_times(draft, tokens, airline_code)
        except ExtractionError as exc:
            self._keep_readings(draft, fields)
            return _Attempt(backend, draft, errors=[exc] + soft_errors)

        for exc in soft_errors:
            warnings.append(f"{exc.message}. {exc.suggestion}")
        meta.field_confidences = {name: r.confidence for name, r in fields.items() if r.valid}
        meta.confidence = round(mean(meta.field_confidences.values()), 3) if meta.field_confidences else 0.0
        return _Attempt(backend, draft, record=draft.finalize())

    @staticmethod
    def _keep_readings(draft: FlightRecordDraft, fields) -> None:
        """Record times that were read but never zoned, so a partial draft still shows them."""
        for role in ("departure", "arrival", "boarding"):
            result = fields.get(f"{role}_time")
            if result is None or not result.valid or getattr(draft, role) is not None:
                continue
            prefix = f"{draft.flight_date.isoformat()}T" if draft.flight_date else ""
            draft.metadata.unzoned_times.setdefault(role, prefix + result.value)

    def _resolve_times(self, draft: FlightRecordDraft, tokens, airline_code: Optional[str]) -> None:
        origin = draft.origin.code if draft.origin else None
        destination = draft.destination.code if draft.destination else None
        meta = draft.metadata

        if self.strict:
            resolved = self.resolver.resolve_strict(tokens, origin, destination)
            draft.flight_date = resolved.flight_date
            draft.departure = resolved.departure
            draft.arrival = resolved.arrival
            draft.boarding = resolved.boarding
            meta.warnings.extend(resolved.warnings)
            meta.estimated_fields.extend(resolved.estimated_fields)
            return

        if not self.resolver.is_date_in_range(draft.flight_date):
            raise ExtractionError(ErrorCode.INVALID_DATE_RANGE, field="date", value=draft.flight_date.isoformat())
        times = self.resolver.resolve_times(tokens, draft.flight_date, origin, destination, airline_code)
        draft.departure = times.departure
        draft.arrival = times.arrival
        draft.boarding = times.boarding
        meta.warnings.extend(times.warnings)
        meta.warnings.extend(times.errors)
        meta.estimated_fields.extend(times.estimated_fields)
        meta.unzoned_times.update(times.unzoned_times)
        if not draft.has_field("departure_time"):
            raise ExtractionError(ErrorCode.TIME_PARSE_FAILED, field="departure_time")

    # ---------------- failure envelope ----------------

    def _failure(self, attempts: List[_Attempt], tried: List[str]) -> ParseFailure:
        if not attempts:
            exc = ExtractionError(ErrorCode.OCR_FAILED, field="ocr")
            missing = list(TRACKED_FIELDS)
            priority = calculate_priority(missing)
            return ParseFailure(
                errors=[ErrorDetail.from_error(exc)],
                requires_manual_entry=missing,
                priority=priority,
                estimated_review_time=estimated_review_time(priority),
                backends_tried=tried,
            )

        # max() keeps the earliest attempt on ties
        best = max(attempts, key=lambda a: a.draft.valid_field_count())

        details: List[ErrorDetail] = []
        seen = set()
        for attempt in attempts:
            for exc in attempt.errors:
                key = (exc.field, exc.code)
                if key in seen:
                    continue
                seen.add(key)
                details.append(ErrorDetail.from_error(exc))

        manual = best.draft.missing_fields()
        for exc in best.errors:
            if exc.field and exc.field not in manual:
                manual.append(exc.field)
        priority = calculate_priority(manual)
        return ParseFailure(
            errors=details,
            requires_manual_entry=manual,
            partial_data=best.draft,
            priority=priority,
            estimated_review_time=estimated_review_time(priority),
            backends_tried=tried,
        )

# validator.py
from __future__ import annotations

import logging
import re
from typing import Dict, Optional, Tuple, Union

from rapidfuzz.distance import Levenshtein

from .chrono import Clock, format_clock, parse_date_text, to_24h, utc_now
from .confidence import filter_low_confidence, word_confidence_map
from .config import CORRECTION_CEILING
from .lexer import TokenExtractor
from .models import (
    AirportRole,
    BoardingPassValidation,
    OcrTimeCorrection,
    RecognizedText,
    TimeRole,
    Token,
    TokenKind,
    TokenSet,
    ValidationResult,
)
from .patterns import patterns
from .reference import ReferenceTables, load_reference_tables

logger = logging.getLogger("boardingintel.validator")

# Letters OCR returns in place of digits inside a clock reading
_DIGIT_LOOKALIKES = str.maketrans({"O": "0", "I": "1", "L": "1", "S": "5", "B": "8"})
# OCR misreads of 3 and 1 in the tens-of-minutes position
_MINUTE_REPAIRS = {80: 30, 70: 10}

_AIRPORT_SHAPE = re.compile(r"^[A-Z]{3}$")
_SEAT_SHAPE = re.compile(r"\b(\d{1,3})([A-K])\b")
_GATE_SHAPE = re.compile(r"^[A-Z]?\d{1,3}[A-Z]?$")

MAX_SEAT_ROW = 60


def _read_clock(text: str) -> Optional[Tuple[int, int, Optional[str], bool]]:
    """``(hours, minutes, period, had_lookalikes)`` before any range repair."""
    up = (text or "").strip().upper()
    m = patterns.TIME.search(up)
    lookalikes = False
    if not m:
        m = patterns.TIME_LOOSE.search(up)
        if not m:
            return None
        lookalikes = True
    hours = int(m.group(1).translate(_DIGIT_LOOKALIKES))
    minutes = int(m.group(2).translate(_DIGIT_LOOKALIKES))
    return hours, minutes, m.group(3), lookalikes


def _repair_clock(hours: int, minutes: int, period: Optional[str]) -> Tuple[int, int, bool]:
    """AM/PM first, then minute and hour wrap-around. Returns ``(h, m, repaired)``."""
    if period and 1 <= hours <= 12:
        hours = to_24h(hours, period)
    repaired = False
    if minutes > 59:
        minutes = _MINUTE_REPAIRS.get(minutes, minutes % 60)
        repaired = True
    if hours > 23:
        hours %= 24
        repaired = True
    return hours, minutes, repaired


def correct_ocr_time(
    time_text: str,
    confidence: float,
    ceiling: float = CORRECTION_CEILING,
) -> OcrTimeCorrection:
    """Repair an out-of-range clock reading, but only when the read itself was doubtful.

    At or above ``ceiling`` a reading is trusted as-is: it comes back
    unchanged and ``valid`` says whether it is a real clock time. Below the
    ceiling it is repaired and the confidence is scaled by 0.8.
    """
    parsed = _read_clock(time_text)
    if parsed is None:
        return OcrTimeCorrection(time=None, confidence=0.0)
    hours, minutes, period, lookalikes = parsed
    if period and 1 <= hours <= 12:
        hours = to_24h(hours, period)

    in_range = hours < 24 and minutes < 60
    if in_range and not lookalikes:
        return OcrTimeCorrection(time=format_clock(hours, minutes), confidence=confidence, valid=True)

    if confidence >= ceiling:
        return OcrTimeCorrection(time=time_text.strip().upper(), confidence=confidence, valid=False)

    hours, minutes, _ = _repair_clock(hours, minutes, None)
    return OcrTimeCorrection(
        time=format_clock(hours, minutes),
        confidence=round(confidence * 0.8, 4),
        corrected=True,
        valid=True,
    )


class FieldValidator:
    """Per-field validation and correction. Every method is total and never raises."""

    def __init__(
        self,
        tables: Optional[ReferenceTables] = None,
        extractor: Optional[TokenExtractor] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.tables = tables or load_reference_tables()
        self.extractor = extractor or TokenExtractor(self.tables, clock=clock)
        self.clock = clock

    # ---------------- fields ----------------

    def validate_flight_number(self, text: str) -> ValidationResult:
        m = patterns.FLIGHT_PARTS.search((text or "").strip().upper())
        if not m:
            return ValidationResult(valid=False, confidence=0.0)
        prefix, number = m.group(1), m.group(2)
        value = f"{prefix}{number}"
        if self.tables.is_known_airline(prefix):
            return ValidationResult(valid=True, value=value, confidence=0.95)

        # First known code in table order within one edit wins
        for code in self.tables.airlines:
            if Levenshtein.distance(prefix, code) <= 1:
                return ValidationResult(valid=False, value=value, suggestion=f"{code}{number}", confidence=0.7)
        return ValidationResult(valid=False, value=value, confidence=0.3)

    def validate_time(self, text: str, confidence: Optional[float] = None) -> ValidationResult:
        parsed = _read_clock(text)
        if parsed is None:
            return ValidationResult(valid=False, confidence=0.0)
        hours, minutes, period, lookalikes = parsed
        hours, minutes, repaired = _repair_clock(hours, minutes, period)
        conf = 0.6 if (repaired or lookalikes) else 0.9
        if confidence is not None:
            conf = min(conf, confidence)
        return ValidationResult(valid=True, value=format_clock(hours, minutes), confidence=conf)

    def _glyph_fix(self, code: str) -> Optional[str]:
        for i, ch in enumerate(code):
            swap = self.tables.glyph_confusions.get(ch)
            if not swap:
                continue
            candidate = code[:i] + swap + code[i + 1:]
            if self.tables.is_known_airport(candidate):
                return candidate
        return None

    def validate_airport(self, code: str) -> ValidationResult:
        c = (code or "").strip().upper()
        if self.tables.is_known_airport(c):
            return ValidationResult(valid=True, value=c, confidence=0.95)
        fix = self.tables.airport_confusions.get(c)
        if fix is None and len(c) == 3:
            fix = self._glyph_fix(c)
        if fix:
            return ValidationResult(valid=False, value=c, suggestion=fix, confidence=0.7)
        if _AIRPORT_SHAPE.match(c):
            # plausible, just not in the bundled table
            return ValidationResult(valid=True, value=c, confidence=0.6)
        return ValidationResult(valid=False, value=c or None, confidence=0.0)

    def validate_date(self, text: str) -> ValidationResult:
        """Syntactic check only; plausibility range is the time resolver's job."""
        parsed = parse_date_text(text or "", self.clock().date())
        if parsed is None:
            return ValidationResult(valid=False, confidence=0.0)
        if parsed.year_inferred:
            conf = 0.7
        elif parsed.pattern in ("numeric", "iso"):
            conf = 0.8
        else:
            conf = 0.9
        return ValidationResult(valid=True, value=parsed.value.isoformat(), confidence=conf)

    def validate_seat(self, text: str) -> ValidationResult:
        m = _SEAT_SHAPE.search((text or "").strip().upper())
        if not m:
            return ValidationResult(valid=False, confidence=0.0)
        row, letter = int(m.group(1)), m.group(2)
        value = f"{row}{letter}"
        if 1 <= row <= MAX_SEAT_ROW:
            return ValidationResult(valid=True, value=value, confidence=0.9)
        fixed = row % MAX_SEAT_ROW or MAX_SEAT_ROW
        return ValidationResult(valid=False, value=value, suggestion=f"{fixed}{letter}", confidence=0.5)

    def validate_gate(self, text: str) -> ValidationResult:
        g = (text or "").strip().upper()
        if _GATE_SHAPE.match(g):
            return ValidationResult(valid=True, value=g, confidence=0.85)
        return ValidationResult(valid=False, value=g or None, confidence=0.0)

    # ---------------- whole pass ----------------

    @staticmethod
    def _capped(result: ValidationResult, token: Token) -> ValidationResult:
        if result.confidence <= token.confidence:
            return result
        return result.model_copy(update={"confidence": token.confidence})

    def _flight_token(self, tokens: TokenSet) -> Optional[Token]:
        flights = tokens.of(TokenKind.FLIGHT)
        for t in flights:
            if t.metadata.get("known_airline"):
                return t
        return flights[0] if flights else None

    def validate_tokens(self, tokens: TokenSet) -> Dict[str, ValidationResult]:
        fields: Dict[str, ValidationResult] = {}

        flight = self._flight_token(tokens)
        if flight:
            fields["flight_number"] = self._capped(self.validate_flight_number(flight.value), flight)

        for role in AirportRole:
            tok = tokens.airport_for(role)
            if tok:
                fields[role.value] = self._capped(self.validate_airport(tok.value), tok)

        date_tok = tokens.flight_date()
        if date_tok:
            fields["date"] = self._capped(self.validate_date(date_tok.raw_value), date_tok)

        for role in TimeRole:
            tok = tokens.time_for(role)
            if tok:
                fields[f"{role.value}_time"] = self.validate_time(tok.raw_value, tok.confidence)

        seat = tokens.first(TokenKind.SEAT)
        if seat:
            fields["seat"] = self._capped(self.validate_seat(seat.value), seat)
        gate = tokens.first(TokenKind.GATE)
        if gate:
            fields["gate"] = self._capped(self.validate_gate(gate.value), gate)

        for kind, name in (
            (TokenKind.TERMINAL, "terminal"),
            (TokenKind.CONFIRMATION, "confirmation_code"),
            (TokenKind.PASSENGER_NAME, "passenger_name"),
        ):
            tok = tokens.first(kind)
            if tok:
                fields[name] = ValidationResult(valid=True, value=tok.value, confidence=tok.confidence)
        return fields

    def validate_text(
        self,
        text: str,
        text_source: str = "raw",
        word_confidences: Optional[Dict[str, float]] = None,
        airline_code: Optional[str] = None,
    ) -> BoardingPassValidation:
        tokens = self.extractor.extract(text, airline_code=airline_code, word_confidences=word_confidences)
        fields = self.validate_tokens(tokens)
        extracted = {name: r.value for name, r in fields.items() if r.valid and r.value}
        logger.debug(f"Validated {len(fields)} fields from {text_source} text ({len(tokens)} tokens)")
        return BoardingPassValidation(
            clean_text=tokens.text,
            text_source=text_source,
            tokens=tokens,
            fields=fields,
            extracted=extracted,
        )

    def validate_boarding_pass(
        self,
        source: Union[RecognizedText, str],
        airline_code: Optional[str] = None,
    ) -> BoardingPassValidation:
        """Validate a whole recognized pass, preferring confidence-filtered text.

        Filtering only happens when the recognizer reported native word
        confidences; shape estimates would throw away label keywords.
        """
        recognized = source if isinstance(source, RecognizedText) else RecognizedText(text=source)
        confidences = word_confidence_map(recognized)
        if recognized.has_word_confidences:
            filtered = filter_low_confidence(recognized)
            if filtered.strip():
                return self.validate_text(filtered, "filtered", confidences, airline_code)
        return self.validate_text(recognized.text, "raw", confidences, airline_code)

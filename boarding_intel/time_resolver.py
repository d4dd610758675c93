# time_resolver.py
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from statistics import mean
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from .chrono import Clock, find_dates, parse_clock, shift_years, utc_now
from .config import CONFIDENCE_FLOOR, CORRECTION_CEILING
from .errors import ErrorCode, ExtractionError
from .geo import GeoResolver
from .lexer import TokenExtractor, normalize_text
from .logging_utils import log_event
from .models import (
    ErrorDetail,
    FlightTimes,
    OcrTimeCorrection,
    TimeParseResult,
    TimeRole,
    TokenSet,
    ZonedInstant,
)
from .reference import ReferenceTables, load_reference_tables
from .validator import FieldValidator, correct_ocr_time

logger = logging.getLogger("boardingintel.time_resolver")

ESTIMATED_ARRIVAL_CONFIDENCE = 0.6


class ResolutionState(str, Enum):
    START = "START"
    DATE_RESOLVED = "DATE_RESOLVED"
    DEPARTURE_RESOLVED = "DEPARTURE_RESOLVED"
    ARRIVAL_RESOLVED = "ARRIVAL_RESOLVED"
    ARRIVAL_ESTIMATED = "ARRIVAL_ESTIMATED"
    DONE = "DONE"
    FAILED = "FAILED"


class StrictResolution(BaseModel):
    flight_date: date
    departure: ZonedInstant
    arrival: ZonedInstant
    boarding: Optional[ZonedInstant] = None
    state: ResolutionState = ResolutionState.DONE
    history: List[ResolutionState] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    estimated_fields: List[str] = Field(default_factory=list)

    @property
    def confidence(self) -> float:
        instants = [i for i in (self.departure, self.arrival, self.boarding) if i is not None]
        return round(mean(i.confidence for i in instants), 3)


def correct_ocr_time_strict(
    time_text: str,
    confidence: float,
    floor: float = CONFIDENCE_FLOOR,
    ceiling: float = CORRECTION_CEILING,
) -> OcrTimeCorrection:
    """Like :func:`correct_ocr_time`, but refuses near-random reads and unusable results."""
    if confidence < floor:
        raise ExtractionError(ErrorCode.OCR_CONFIDENCE_TOO_LOW, field="time", value=time_text, confidence=confidence)
    result = correct_ocr_time(time_text, confidence, ceiling)
    if result.time is None or not result.valid:
        raise ExtractionError(
            ErrorCode.INVALID_TIME_FORMAT, field="time", value=time_text, confidence=confidence, required_format="HH:MM"
        )
    return result


def _exists(local: datetime) -> bool:
    """False for a wall-clock time inside a DST gap."""
    round_trip = local.astimezone(timezone.utc).astimezone(local.tzinfo)
    return round_trip.replace(tzinfo=None) == local.replace(tzinfo=None)


class TimeResolver:
    """Turn dates, wall-clock times and airport codes into zoned instants.

    ``strict=True`` makes :meth:`resolve_zoned_time` raise typed errors
    instead of returning ``None``. The ``resolve_times`` / ``extract_flight_times``
    entry points are always lenient; ``resolve_strict`` is always strict.
    """

    def __init__(
        self,
        tables: Optional[ReferenceTables] = None,
        geo: Optional[GeoResolver] = None,
        extractor: Optional[TokenExtractor] = None,
        strict: bool = False,
        clock: Clock = utc_now,
        validator: Optional[FieldValidator] = None,
    ) -> None:
        self.tables = tables or load_reference_tables()
        self.geo = geo or GeoResolver(self.tables)
        self.extractor = extractor or TokenExtractor(self.tables, clock=clock)
        self.strict = strict
        self.clock = clock
        self.validator = validator or FieldValidator(self.tables, self.extractor, clock)

    # ---------------- durations ----------------

    def get_airline_time_order(self, airline_code: Optional[str]) -> List[str]:
        return list(self.tables.time_order(airline_code))

    def route_duration(self, origin: Optional[str], destination: Optional[str]) -> Optional[float]:
        """Table hours, else a distance bucket; ``None`` when neither is known."""
        if origin and destination:
            hours = self.tables.route_hours(origin, destination)
            if hours is not None:
                return hours
        miles = self.geo.distance_miles(origin, destination)
        if miles is None:
            return None
        for limit, hours, _ in self.tables.duration_buckets:
            if miles < limit:
                return hours
        return None

    def estimate_flight_duration(self, origin: Optional[str], destination: Optional[str]) -> float:
        hours = self.route_duration(origin, destination)
        if hours is None:
            logger.debug(f"No route data for {origin}-{destination}, using default duration")
            return self.tables.default_duration_hours
        return hours

    # ---------------- dates ----------------

    def date_bounds(self) -> Tuple[date, date]:
        today = self.clock().date()
        return shift_years(today, -1), shift_years(today, 2)

    def is_date_in_range(self, d: date) -> bool:
        low, high = self.date_bounds()
        return low <= d <= high

    def validate_date_range(self, d: date) -> date:
        if not self.is_date_in_range(d):
            raise ExtractionError(ErrorCode.INVALID_DATE_RANGE, field="date", value=d.isoformat())
        return d

    def strict_date_extraction(self, text: str) -> date:
        found = find_dates(normalize_text(text), self.clock().date())
        if not found:
            raise ExtractionError(ErrorCode.DATE_PARSE_FAILED, field="date", value=text)
        parsed = next((p for p in found if not p.year_inferred), found[0])
        if parsed.year_inferred:
            raise ExtractionError(
                ErrorCode.DATE_PARSE_FAILED,
                field="date",
                value=parsed.raw,
                message=f'Date has no year: "{parsed.raw}"',
            )
        return self.validate_date_range(parsed.value)

    def _date_from_tokens(self, tokens: TokenSet) -> date:
        tok = tokens.flight_date()
        if tok is None:
            raise ExtractionError(ErrorCode.DATE_PARSE_FAILED, field="date")
        if tok.metadata.get("year_inferred"):
            raise ExtractionError(
                ErrorCode.DATE_PARSE_FAILED, field="date", value=tok.raw_value,
                message=f'Date has no year: "{tok.raw_value}"',
            )
        return self.validate_date_range(date.fromisoformat(tok.value))

    # ---------------- zoned times ----------------

    def resolve_zoned_time(
        self,
        flight_date: date,
        time_str: Optional[str],
        airport: Optional[str],
        confidence: float = 0.9,
        warnings: Optional[List[str]] = None,
        strict: Optional[bool] = None,
    ) -> Optional[ZonedInstant]:
        strict = self.strict if strict is None else strict
        zone = self.geo.zone(airport)
        if zone is None:
            if strict:
                raise ExtractionError(ErrorCode.AIRPORT_NOT_FOUND, field="airport", value=airport)
            return None
        clock = parse_clock(time_str) if time_str else None
        if clock is None:
            if strict:
                raise ExtractionError(
                    ErrorCode.TIME_PARSE_FAILED, field="time", value=time_str, required_format="HH:MM"
                )
            return None

        # fold=0: an ambiguous fall-back time is read as its first occurrence
        local = datetime.combine(flight_date, time(*clock), tzinfo=zone)
        if not _exists(local):
            if strict:
                raise ExtractionError(
                    ErrorCode.TIMEZONE_MISMATCH,
                    field="time",
                    value=f"{flight_date.isoformat()} {time_str} does not exist in {zone.key}",
                )
            local = local.astimezone(timezone.utc).astimezone(zone)
            if warnings is not None:
                warnings.append(f"{time_str} falls in a DST gap at {airport.upper()}; shifted to {local:%H:%M}")

        return ZonedInstant(
            timestamp_utc=local.astimezone(timezone.utc),
            iana_timezone=zone.key,
            source_airport_code=airport.upper(),
            confidence=confidence,
        )

    def safe_parse_time(
        self,
        time_text: str,
        flight_date: date,
        airport: Optional[str],
        role: str = TimeRole.DEPARTURE.value,
        confidence: float = 0.9,
    ) -> TimeParseResult:
        """Strict parse wrapped in a success/error envelope."""
        try:
            corrected = correct_ocr_time_strict(time_text, confidence)
            instant = self.resolve_zoned_time(
                flight_date, corrected.time, airport, corrected.confidence, strict=True
            )
        except ExtractionError as exc:
            exc.field = f"{role}_time" if exc.field in (None, "time") else exc.field
            return TimeParseResult(success=False, error=ErrorDetail.from_error(exc))
        return TimeParseResult(
            success=True, time=instant, timezone=instant.iana_timezone, confidence=instant.confidence
        )

    def estimate_arrival_time(
        self,
        departure: ZonedInstant,
        origin: Optional[str],
        destination: Optional[str],
    ) -> ZonedInstant:
        hours = self.route_duration(origin, destination)
        if hours is None:
            raise ExtractionError(
                ErrorCode.ROUTE_NOT_FOUND, field="arrival_time", value=f"{origin or '?'}-{destination or '?'}"
            )
        tz = self.geo.timezone_name(destination)
        if tz is None:
            raise ExtractionError(ErrorCode.AIRPORT_NOT_FOUND, field="destination", value=destination)
        return departure.shifted(hours).in_zone(
            tz, destination.upper(), min(departure.confidence, ESTIMATED_ARRIVAL_CONFIDENCE)
        )

    # ---------------- lenient ----------------

    def _time_value(self, tokens: TokenSet, role: TimeRole) -> Optional[Tuple[str, float]]:
        tok = tokens.time_for(role)
        if tok is None:
            return None
        result = self.validator.validate_time(tok.raw_value, tok.confidence)
        if not result.valid:
            return None
        return result.value, result.confidence

    def _lenient_instant(
        self,
        out: FlightTimes,
        role: TimeRole,
        flight_date: date,
        reading: Tuple[str, float],
        airport: Optional[str],
    ) -> Optional[ZonedInstant]:
        value, conf = reading
        instant = self.resolve_zoned_time(flight_date, value, airport, conf, out.warnings, strict=False)
        if instant is None:
            out.unzoned_times[role.value] = f"{flight_date.isoformat()}T{value}"
            out.warnings.append(
                f"{role.value.capitalize()} time {value} kept without timezone (unknown airport {airport or 'N/A'})"
            )
        return instant

    @staticmethod
    def _wall_clock(out: FlightTimes, role: TimeRole) -> Optional[datetime]:
        instant = getattr(out, role.value)
        if instant is not None:
            return instant.local_time().replace(tzinfo=None)
        if role.value in out.unzoned_times:
            return datetime.fromisoformat(out.unzoned_times[role.value])
        return None

    def resolve_times(
        self,
        tokens: TokenSet,
        flight_date: Optional[date],
        origin: Optional[str],
        destination: Optional[str],
        airline_code: Optional[str] = None,
    ) -> FlightTimes:
        out = FlightTimes(time_order=self.get_airline_time_order(airline_code or tokens.airline_code))
        if flight_date is None:
            out.errors.append("No flight date found")
            return out
        if not self.is_date_in_range(flight_date):
            out.errors.append(f"Flight date {flight_date.isoformat()} outside valid range")
            return out

        departure = self._time_value(tokens, TimeRole.DEPARTURE)
        if departure:
            out.departure = self._lenient_instant(out, TimeRole.DEPARTURE, flight_date, departure, origin)
        else:
            out.errors.append("No departure time found")

        boarding = self._time_value(tokens, TimeRole.BOARDING)
        if boarding:
            out.boarding = self._lenient_instant(out, TimeRole.BOARDING, flight_date, boarding, origin)

        arrival = self._time_value(tokens, TimeRole.ARRIVAL)
        if arrival:
            out.arrival = self._lenient_instant(out, TimeRole.ARRIVAL, flight_date, arrival, destination)
        elif out.departure is not None:
            tz = self.geo.timezone_name(destination)
            if tz:
                hours = self.estimate_flight_duration(origin, destination)
                out.arrival = out.departure.shifted(hours).in_zone(
                    tz, destination.upper(), min(out.departure.confidence, ESTIMATED_ARRIVAL_CONFIDENCE)
                )
                out.estimated_fields.append("arrival_time")
                out.warnings.append("Arrival time estimated based on route")

        if out.arrival is not None and out.departure is not None:
            if out.arrival.timestamp_utc <= out.departure.timestamp_utc:
                out.arrival = out.arrival.shifted(24)
                out.warnings.append("Adjusted arrival to next day")
        elif "arrival" in out.unzoned_times:
            # no zone to compare instants in; fall back to wall-clock order
            departed = self._wall_clock(out, TimeRole.DEPARTURE)
            arrived = datetime.fromisoformat(out.unzoned_times["arrival"])
            if departed is not None and arrived <= departed:
                out.unzoned_times["arrival"] = (arrived + timedelta(days=1)).strftime("%Y-%m-%dT%H:%M")
                out.warnings.append("Adjusted arrival to next day")

        instants = [i for i in (out.departure, out.arrival, out.boarding) if i is not None]
        out.confidence = round(mean(i.confidence for i in instants), 3) if instants else 0.0
        return out

    def extract_flight_times(
        self,
        text: str,
        flight_date: Optional[date],
        origin: Optional[str],
        destination: Optional[str],
        airline_code: Optional[str] = None,
    ) -> FlightTimes:
        tokens = self.extractor.extract(text, airline_code=airline_code)
        return self.resolve_times(tokens, flight_date, origin, destination, airline_code)

    # ---------------- strict ----------------

    def _strict_instant(
        self,
        tokens: TokenSet,
        role: TimeRole,
        flight_date: date,
        airport: Optional[str],
        warnings: List[str],
    ) -> Optional[ZonedInstant]:
        tok = tokens.time_for(role)
        if tok is None:
            return None
        try:
            corrected = correct_ocr_time_strict(tok.raw_value, tok.confidence)
            return self.resolve_zoned_time(
                flight_date, corrected.time, airport, corrected.confidence, warnings, strict=True
            )
        except ExtractionError as exc:
            if exc.code is ErrorCode.AIRPORT_NOT_FOUND:
                exc.field = "destination" if role is TimeRole.ARRIVAL else "origin"
            elif exc.field in (None, "time"):
                exc.field = f"{role.value}_time"
            raise

    def resolve_strict(
        self,
        tokens: TokenSet,
        origin: Optional[str],
        destination: Optional[str],
        flight_date: Optional[date] = None,
    ) -> StrictResolution:
        """START -> DATE_RESOLVED -> DEPARTURE_RESOLVED -> ARRIVAL_RESOLVED|ARRIVAL_ESTIMATED -> DONE.

        Any unresolvable required field raises :class:`ExtractionError` with
        ``state`` set to the last state reached. A bad boarding time is only
        a warning.
        """
        history = [ResolutionState.START]
        warnings: List[str] = []
        estimated: List[str] = []
        try:
            flight_date = (
                self.validate_date_range(flight_date) if flight_date else self._date_from_tokens(tokens)
            )
            history.append(ResolutionState.DATE_RESOLVED)

            departure = self._strict_instant(tokens, TimeRole.DEPARTURE, flight_date, origin, warnings)
            if departure is None:
                raise ExtractionError(ErrorCode.TIME_PARSE_FAILED, field="departure_time")
            history.append(ResolutionState.DEPARTURE_RESOLVED)

            arrival = self._strict_instant(tokens, TimeRole.ARRIVAL, flight_date, destination, warnings)
            if arrival is None:
                arrival = self.estimate_arrival_time(departure, origin, destination)
                estimated.append("arrival_time")
                warnings.append("Arrival time estimated based on route")
                history.append(ResolutionState.ARRIVAL_ESTIMATED)
            else:
                history.append(ResolutionState.ARRIVAL_RESOLVED)
            if arrival.timestamp_utc <= departure.timestamp_utc:
                arrival = arrival.shifted(24)
                warnings.append("Adjusted arrival to next day")
        except ExtractionError as exc:
            exc.state = history[-1].value
            log_event(
                logger,
                "strict_resolution_failed",
                level=logging.DEBUG,
                code=exc.code.value,
                from_state=exc.state,
                field=exc.field,
            )
            raise

        boarding = None
        try:
            boarding = self._strict_instant(tokens, TimeRole.BOARDING, flight_date, origin, warnings)
        except ExtractionError as exc:
            warnings.append(f"Boarding time ignored: {exc.message}")

        history.append(ResolutionState.DONE)
        return StrictResolution(
            flight_date=flight_date,
            departure=departure,
            arrival=arrival,
            boarding=boarding,
            state=ResolutionState.DONE,
            history=history,
            warnings=warnings,
            estimated_fields=estimated,
        )

# lexer.py
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from .chrono import Clock, find_dates, utc_now
from .confidence import estimate_confidence
from .config import TIME_KEYWORD_LOOKBACK
from .models import AirportRole, Token, TokenKind, TokenSet
from .patterns import patterns
from .reference import ReferenceTables, load_reference_tables

logger = logging.getLogger("boardingintel.lexer")

# 3-letter words printed on passes that must never be read as airports
_STOPWORDS = frozenset({
    "THE", "AND", "FOR", "YOU", "ARE", "NOT", "ALL", "ANY", "GET", "HAS", "NOW",
    "OUT", "ONE", "TWO", "WAY", "WHO", "VIA", "NON", "PER", "OFF", "USE",
    "MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN",
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
    "DEP", "ARR", "ETD", "ETA", "STD", "STA", "PNR", "REF", "ROW", "SEQ", "GRP",
    "TKT", "ETK", "BAG", "PAX", "FLT", "ECO", "BUS", "CLS", "MRS", "MSTR", "GATE",
})

LABELED_TIME_CONFIDENCE = 0.9
POSITIONAL_TIME_CONFIDENCE = 0.6
# clock read with letters standing in for digits, e.g. "1O:3O"
LOOKALIKE_TIME_CONFIDENCE = 0.6

_HEADER_ROLE = {"BOARD": "boarding", "DEP": "departure", "ARR": "arrival"}
_SPACES = re.compile(r"[ \t\f\v]+")
_AFTER_CLOCK = re.compile(r"\d:\d{2} ?$")
_LETTER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"\d")


def normalize_text(text: str) -> str:
    """Upper-case, collapse runs of blanks, drop empty lines; line breaks survive."""
    lines = (_SPACES.sub(" ", line).strip() for line in text.upper().splitlines())
    return "\n".join(line for line in lines if line)


class _Scan:
    """Working state of one ``extract`` call: the text, emitted tokens and claimed spans."""

    def __init__(self, text: str, confidences: Dict[str, float]) -> None:
        self.text = text
        self.confidences = confidences
        self.tokens: List[Token] = []

    def free(self, start: int, end: int) -> bool:
        return not any(t.overlaps(start, end) for t in self.tokens)

    def has(self, kind: TokenKind, role: Optional[str] = None) -> bool:
        return any(t.kind == kind and (role is None or t.role == role) for t in self.tokens)

    def add(
        self,
        kind: TokenKind,
        start: int,
        end: int,
        value: Optional[str] = None,
        role: Optional[str] = None,
        confidence: Optional[float] = None,
        **metadata,
    ) -> Optional[Token]:
        if start < 0 or not self.free(start, end):
            return None
        raw = self.text[start:end]
        value = value if value is not None else raw
        conf = estimate_confidence(value) if confidence is None else confidence
        native = [self.confidences[w] for w in raw.split() if w in self.confidences]
        if native:
            conf = min(conf, min(native))
        token = Token(
            kind=kind,
            raw_value=raw,
            value=value,
            position=start,
            end=end,
            role=role,
            confidence=round(conf, 3),
            metadata=metadata,
        )
        self.tokens.append(token)
        return token


class TokenExtractor:
    """Scan normalized boarding-pass text for aviation tokens.

    Rules run in a fixed priority: single-line table rows, header/row pairs,
    keyword-labeled fields, flight numbers, times, dates, then generic
    single-field patterns. A span claimed by an earlier rule is never
    re-read by a later one, so ``GATE B12`` cannot become flight ``B1 2``
    and ``DL12A`` cannot yield seat ``12A``.
    """

    def __init__(
        self,
        tables: Optional[ReferenceTables] = None,
        lookback: int = TIME_KEYWORD_LOOKBACK,
        clock: Clock = utc_now,
    ) -> None:
        self.tables = tables or load_reference_tables()
        self.lookback = lookback
        self.clock = clock
        self._city_prefixes = self.tables.city_prefixes
        self._alias_re = re.compile(
            r"\b(" + "|".join(sorted((re.escape(a) for a in self.tables.airline_aliases), key=len, reverse=True)) + r")\b"
        )

    # ---------------- public ----------------

    def extract(
        self,
        text: str,
        airline_code: Optional[str] = None,
        word_confidences: Optional[Dict[str, float]] = None,
    ) -> TokenSet:
        norm = normalize_text(text)
        scan = _Scan(norm, word_confidences or {})

        self._table_rows(scan)
        self._header_rows(scan)
        self._labeled_fields(scan)
        self._labeled_airports(scan)
        self._flights(scan)
        airline_code = airline_code or self._airline_from(scan)
        self._times(scan, airline_code)
        self._dates(scan)
        self._passenger(scan)
        self._generic_airports(scan)
        self._generic_seats(scan)
        self._generic_confirmation(scan)

        tokens = sorted(scan.tokens, key=lambda t: t.position)
        logger.debug(f"Extracted {len(tokens)} tokens (airline={airline_code})")
        return TokenSet(text=norm, tokens=tokens, airline_code=airline_code)

    def airline_alias(self, text: str) -> Optional[str]:
        m = self._alias_re.search(text.upper())
        return self.tables.airline_aliases[m.group(1)] if m else None

    # ---------------- helpers ----------------

    @staticmethod
    def _lines(text: str) -> List[Tuple[int, str]]:
        out, offset = [], 0
        for line in text.split("\n"):
            out.append((offset, line))
            offset += len(line) + 1
        return out

    def _iso(self, raw: str) -> Tuple[Optional[str], bool]:
        found = find_dates(raw, self.clock().date())
        if not found:
            return None, False
        return found[0].value.isoformat(), found[0].year_inferred

    def _plausible_airport(self, code: str) -> bool:
        return code not in _STOPWORDS

    def _airline_from(self, scan: _Scan) -> Optional[str]:
        for t in scan.tokens:
            if t.kind == TokenKind.FLIGHT and t.metadata.get("known_airline"):
                return t.metadata["airline_code"]
        return self.airline_alias(scan.text)

    # ---------------- rules ----------------

    def _table_rows(self, scan: _Scan) -> None:
        lines = self._lines(scan.text)
        for idx, (offset, line) in enumerate(lines):
            for m in patterns.FLIGHT_DATE_TIME_ROW.finditer(line):
                prefix, number = m.group(1), m.group(2)
                scan.add(
                    TokenKind.FLIGHT, offset + m.start(1), offset + m.end(2),
                    value=f"{prefix}{number}", confidence=None, rule="flight_date_time_row",
                    airline_code=prefix, number=number,
                    known_airline=self.tables.is_known_airline(prefix),
                )
                iso, inferred = self._iso(m.group(3))
                if iso:
                    scan.add(
                        TokenKind.DATE, offset + m.start(3), offset + m.end(3), value=iso,
                        confidence=0.7 if inferred else 0.9, rule="flight_date_time_row",
                        year_inferred=inferred,
                    )
                scan.add(
                    TokenKind.TIME, offset + m.start(4), offset + m.end(4), role="departure",
                    confidence=LABELED_TIME_CONFIDENCE, rule="flight_date_time_row", role_source="table",
                )

            previous = lines[idx - 1][1] if idx else ""
            in_table = "GATE" in line or ("GATE" in previous and ("SEAT" in previous or "BOARD" in previous))
            if not in_table:
                continue
            for m in patterns.GATE_BOARDING_SEAT_ROW.finditer(line):
                scan.add(TokenKind.GATE, offset + m.start(1), offset + m.end(1), confidence=0.85,
                         rule="gate_boarding_seat_row")
                scan.add(
                    TokenKind.TIME, offset + m.start(2), offset + m.end(2), role="boarding",
                    confidence=LABELED_TIME_CONFIDENCE, rule="gate_boarding_seat_row", role_source="table",
                )
                scan.add(TokenKind.SEAT, offset + m.start(3), offset + m.end(3), rule="gate_boarding_seat_row")

    def _header_rows(self, scan: _Scan) -> None:
        lines = self._lines(scan.text)
        for idx in range(len(lines) - 1):
            _, header = lines[idx]
            if patterns.TIME.search(header):
                continue
            roles: List[str] = []
            for m in patterns.HEADER_KEYWORDS.finditer(header):
                word = m.group(1)
                role = next(r for k, r in _HEADER_ROLE.items() if word.startswith(k))
                if role not in roles:
                    roles.append(role)
            if len(roles) < 2:
                continue
            offset, row = lines[idx + 1]
            times = list(patterns.TIME.finditer(row))
            if len(times) < 2:
                continue
            for role, m in zip(roles, times):
                scan.add(
                    TokenKind.TIME, offset + m.start(), offset + m.end(), role=role,
                    confidence=LABELED_TIME_CONFIDENCE, rule="header_row", role_source="header",
                )

    def _labeled_fields(self, scan: _Scan) -> None:
        for m in patterns.GATE.finditer(scan.text):
            scan.add(TokenKind.GATE, m.start(1), m.end(1), confidence=0.85, rule="gate_label")
        for m in patterns.SEAT_LABELED.finditer(scan.text):
            scan.add(TokenKind.SEAT, m.start(1), m.end(1), rule="seat_label")
        for m in patterns.TERMINAL.finditer(scan.text):
            scan.add(TokenKind.TERMINAL, m.start(1), m.end(1), confidence=0.85, rule="terminal_label")
        for m in patterns.CONFIRMATION_LABELED.finditer(scan.text):
            scan.add(TokenKind.CONFIRMATION, m.start(1), m.end(1), confidence=0.85, rule="confirmation_label")

    def _labeled_airports(self, scan: _Scan) -> None:
        for m in patterns.ROUTE.finditer(scan.text):
            a, b = m.group(1), m.group(2)
            if not (self._plausible_airport(a) and self._plausible_airport(b)) or a == b:
                continue
            # "ABC/DEF" is just as often a name or fare code
            if "/" in m.group(0) and not (self.tables.is_known_airport(a) and self.tables.is_known_airport(b)):
                continue
            if scan.has(TokenKind.AIRPORT, AirportRole.ORIGIN.value):
                break
            scan.add(TokenKind.AIRPORT, m.start(1), m.end(1), role=AirportRole.ORIGIN.value,
                     rule="route", known=self.tables.is_known_airport(a))
            scan.add(TokenKind.AIRPORT, m.start(2), m.end(2), role=AirportRole.DESTINATION.value,
                     rule="route", known=self.tables.is_known_airport(b))

        anchors = ((patterns.FROM_ANCHOR, AirportRole.ORIGIN), (patterns.TO_ANCHOR, AirportRole.DESTINATION))
        for rx, role in anchors:
            if scan.has(TokenKind.AIRPORT, role.value):
                continue
            for m in rx.finditer(scan.text):
                code = m.group(1)
                if not self._plausible_airport(code):
                    continue
                if scan.add(TokenKind.AIRPORT, m.start(1), m.end(1), role=role.value,
                            rule="anchor", known=self.tables.is_known_airport(code)):
                    break

    def _flights(self, scan: _Scan) -> None:
        for m in patterns.FLIGHT.finditer(scan.text):
            prefix, number = m.group(1), m.group(2)
            if prefix in ("AM", "PM") and (
                not self.tables.is_known_airline(prefix) or _AFTER_CLOCK.search(scan.text, 0, m.start())
            ):
                # "9:40 AM 10 OCT" is a 12h suffix, not flight AM10
                continue
            scan.add(
                TokenKind.FLIGHT, m.start(), m.end(), value=f"{prefix}{number}", rule="flight",
                airline_code=prefix, number=number, known_airline=self.tables.is_known_airline(prefix),
            )

    def _keyword_role(self, window: str) -> Optional[str]:
        best: Optional[Tuple[int, str]] = None
        for role, rx in patterns.TIME_KEYWORDS:
            for m in rx.finditer(window):
                if best is None or m.end() > best[0]:
                    best = (m.end(), role)
        return best[1] if best else None

    @staticmethod
    def _clock_matches(text: str) -> List[Tuple[re.Match, bool]]:
        """Clean clock readings plus ``(match, True)`` for ones with O/I/S/B/L in place of digits."""
        clean = [(m, False) for m in patterns.TIME.finditer(text)]
        lookalike = []
        for m in patterns.TIME_LOOSE.finditer(text):
            digits = m.group(1) + m.group(2)
            if not (_LETTER.search(digits) and _DIGIT.search(digits)):
                continue
            if any(c.start() < m.end() and m.start() < c.end() for c, _ in clean):
                continue
            lookalike.append((m, True))
        return sorted(clean + lookalike, key=lambda pair: pair[0].start())

    def _times(self, scan: _Scan, airline_code: Optional[str]) -> None:
        unlabeled: List[Tuple[re.Match, bool]] = []
        previous_end = 0
        for m, lookalikes in self._clock_matches(scan.text):
            start, end = m.start(), m.end()
            window_start = max(previous_end, start - self.lookback)
            previous_end = end
            if not scan.free(start, end):
                continue
            role = self._keyword_role(scan.text[window_start:start])
            if role is None:
                unlabeled.append((m, lookalikes))
                continue
            conf = LOOKALIKE_TIME_CONFIDENCE if lookalikes else LABELED_TIME_CONFIDENCE
            scan.add(TokenKind.TIME, start, end, role=role, confidence=conf,
                     rule="time", role_source="keyword", lookalikes=lookalikes)

        if not unlabeled:
            return
        taken = {t.role for t in scan.tokens if t.kind == TokenKind.TIME}
        order = [r for r in self.tables.time_order(airline_code) if r not in taken]
        for i, (m, lookalikes) in enumerate(unlabeled):
            role = order[i] if i < len(order) else None
            conf = min(POSITIONAL_TIME_CONFIDENCE, LOOKALIKE_TIME_CONFIDENCE) if lookalikes else POSITIONAL_TIME_CONFIDENCE
            scan.add(TokenKind.TIME, m.start(), m.end(), role=role, confidence=conf,
                     rule="time", role_source="position" if role else None, lookalikes=lookalikes)

    def _dates(self, scan: _Scan) -> None:
        for parsed in find_dates(scan.text, self.clock().date()):
            if parsed.year_inferred:
                conf = 0.7
            elif parsed.pattern in ("numeric", "iso"):
                conf = 0.8
            else:
                conf = 0.9
            scan.add(TokenKind.DATE, parsed.position, parsed.end, value=parsed.value.isoformat(),
                     confidence=conf, rule=f"date_{parsed.pattern}", year_inferred=parsed.year_inferred)

    def _passenger(self, scan: _Scan) -> None:
        for m in patterns.PASSENGER.finditer(scan.text):
            last, first = m.group(1), m.group(2)
            if len(last) < 2 or len(first) < 2:
                continue
            if last in _STOPWORDS or first in _STOPWORDS:
                continue
            if self.tables.is_known_airport(last) and self.tables.is_known_airport(first):
                # LAX/JFK style route, not a name
                continue
            if scan.add(TokenKind.PASSENGER_NAME, m.start(), m.end(), value=f"{first} {last}",
                        confidence=0.8, rule="passenger", title=m.group(3)):
                break

    def _generic_airports(self, scan: _Scan) -> None:
        seen = {t.value for t in scan.tokens if t.kind == TokenKind.AIRPORT}
        for m in patterns.AIRPORT.finditer(scan.text):
            code = m.group(1)
            if code in seen or not self.tables.is_known_airport(code) or not self._plausible_airport(code):
                continue
            following = scan.text[m.end():].lstrip(" ").split(" ", 1)[0].split("\n", 1)[0]
            if (code, following) in self._city_prefixes:
                continue
            role = None
            if not scan.has(TokenKind.AIRPORT, AirportRole.ORIGIN.value):
                role = AirportRole.ORIGIN.value
            elif not scan.has(TokenKind.AIRPORT, AirportRole.DESTINATION.value):
                role = AirportRole.DESTINATION.value
            if scan.add(TokenKind.AIRPORT, m.start(1), m.end(1), role=role, rule="airport",
                        role_source="position", known=True):
                seen.add(code)

    def _generic_seats(self, scan: _Scan) -> None:
        if scan.has(TokenKind.SEAT):
            return
        for m in patterns.SEAT.finditer(scan.text):
            if scan.add(TokenKind.SEAT, m.start(1), m.end(1), rule="seat"):
                break

    def _generic_confirmation(self, scan: _Scan) -> None:
        if scan.has(TokenKind.CONFIRMATION):
            return
        for m in patterns.CONFIRMATION.finditer(scan.text):
            code = m.group(1)
            if self.tables.is_known_airline(code[:2]) or patterns.SHAPE_FLIGHT.match(code):
                continue
            if scan.add(TokenKind.CONFIRMATION, m.start(1), m.end(1), confidence=0.7, rule="confirmation"):
                break

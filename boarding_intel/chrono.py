# chrono.py
# Calendar and wall-clock parsing shared by the validator, lexer and time resolver.
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, List, NamedTuple, Optional, Tuple

from .patterns import patterns

Clock = Callable[[], datetime]

MONTHS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "SEPT": 9, "OCT": 10, "NOV": 11, "DEC": 12,
    "JANUARY": 1, "FEBRUARY": 2, "MARCH": 3, "APRIL": 4, "JUNE": 6, "JULY": 7,
    "AUGUST": 8, "SEPTEMBER": 9, "OCTOBER": 10, "NOVEMBER": 11, "DECEMBER": 12,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ParsedDate(NamedTuple):
    value: date
    pattern: str
    year_inferred: bool
    raw: str
    position: int
    end: int


def _full_year(y: str) -> int:
    return int(y) if len(y) == 4 else 2000 + int(y)


def infer_year(month: int, today: date) -> int:
    """Forward-looking: a month already behind us this year means next year."""
    return today.year + (1 if month < today.month else 0)


def shift_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # Feb 29 -> Feb 28
        return d.replace(year=d.year + years, day=28)


def _make(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _full(m, today):
    return _make(_full_year(m.group(3)), MONTHS[m.group(1)], int(m.group(2))), False


def _full_day_first(m, today):
    return _make(_full_year(m.group(3)), MONTHS[m.group(2)], int(m.group(1))), False


def _abbr(m, today):
    month = MONTHS[m.group(2)]
    if m.group(3):
        return _make(_full_year(m.group(3)), month, int(m.group(1))), False
    return _make(infer_year(month, today), month, int(m.group(1))), True


def _abbr_month_first(m, today):
    return _make(_full_year(m.group(3)), MONTHS[m.group(1)], int(m.group(2))), False


def _iso(m, today):
    return _make(int(m.group(1)), int(m.group(2)), int(m.group(3))), False


def _numeric(m, today):
    # MM/DD/YYYY
    return _make(_full_year(m.group(3)), int(m.group(1)), int(m.group(2))), False


# Tried in this order; the first pattern yielding a real calendar date wins
DATE_RULES = (
    ("full", patterns.DATE_FULL, _full),
    ("full", patterns.DATE_FULL_DAY_FIRST, _full_day_first),
    ("abbreviated", patterns.DATE_ABBR, _abbr),
    ("abbreviated", patterns.DATE_ABBR_MONTH_FIRST, _abbr_month_first),
    ("iso", patterns.DATE_ISO, _iso),
    ("numeric", patterns.DATE_NUMERIC, _numeric),
)


def find_dates(text: str, today: Optional[date] = None) -> List[ParsedDate]:
    """Every calendar-valid date in ``text``, in rule priority order."""
    today = today or utc_now().date()
    found: List[ParsedDate] = []
    taken: List[Tuple[int, int]] = []
    for name, rx, build in DATE_RULES:
        for m in rx.finditer(text):
            if any(m.start() < e and s < m.end() for s, e in taken):
                continue
            value, inferred = build(m, today)
            if value is None:
                continue
            taken.append((m.start(), m.end()))
            found.append(ParsedDate(value, name, inferred, m.group(0), m.start(), m.end()))
    return found


def parse_date_text(text: str, today: Optional[date] = None) -> Optional[ParsedDate]:
    found = find_dates(text.upper(), today)
    return found[0] if found else None


def to_24h(hours: int, period: Optional[str]) -> int:
    if period == "P" and hours < 12:
        return hours + 12
    if period == "A" and hours == 12:
        return 0
    return hours


def parse_clock(text: str) -> Optional[Tuple[int, int]]:
    """Strict wall-clock parse: ``(hours, minutes)`` in 24h, or ``None`` if out of range."""
    m = patterns.TIME.search(text.upper())
    if not m:
        return None
    hours, minutes = int(m.group(1)), int(m.group(2))
    if m.group(3) and not 1 <= hours <= 12:
        return None
    hours = to_24h(hours, m.group(3))
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes


def format_clock(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"

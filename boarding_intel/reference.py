# reference.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Tuple

from .airlines import AIRLINE_CODES, AIRLINE_NAME_ALIASES, AIRLINE_TIME_ORDER, DEFAULT_TIME_ORDER
from .airports import AIRPORT_OCR_CONFUSIONS, AIRPORTS, GLYPH_CONFUSIONS
from .routes import DEFAULT_DURATION_HOURS, DURATION_BUCKETS, ROUTE_DURATIONS


class AirportInfo(NamedTuple):
    code: str
    city: str
    country: str
    latitude: float
    longitude: float
    timezone: str


@dataclass(frozen=True)
class ReferenceTables:
    """Read-only reference data shared by every component of one process."""

    airlines: Mapping[str, Mapping[str, str]]
    airline_aliases: Mapping[str, str]
    airports: Mapping[str, AirportInfo]
    airport_confusions: Mapping[str, str]
    glyph_confusions: Mapping[str, str]
    time_orders: Mapping[str, Tuple[str, ...]]
    default_time_order: Tuple[str, ...]
    route_durations: Mapping[Tuple[str, str], float]
    duration_buckets: Tuple[Tuple[float, float, str], ...]
    default_duration_hours: float

    # ---------------- lookups ----------------

    def is_known_airline(self, code: Optional[str]) -> bool:
        return bool(code) and code.upper() in self.airlines

    def airline_name(self, code: Optional[str]) -> Optional[str]:
        if not code:
            return None
        row = self.airlines.get(code.upper())
        return row["name"] if row else None

    def is_known_airport(self, code: Optional[str]) -> bool:
        return bool(code) and code.upper() in self.airports

    def airport(self, code: Optional[str]) -> Optional[AirportInfo]:
        if not code:
            return None
        return self.airports.get(code.upper())

    def time_order(self, airline_code: Optional[str]) -> Tuple[str, ...]:
        if not airline_code:
            return self.default_time_order
        return self.time_orders.get(airline_code.upper(), self.default_time_order)

    def route_hours(self, origin: str, destination: str) -> Optional[float]:
        return self.route_durations.get((origin.upper(), destination.upper()))

    @property
    def city_prefixes(self) -> frozenset:
        """(first, second) words of multi-word city names whose first word is 3 letters, e.g. ("SAN", "DIEGO")."""
        pairs = set()
        for info in self.airports.values():
            words = info.city.upper().replace(".", "").split()
            if len(words) > 1 and len(words[0]) == 3:
                pairs.add((words[0], words[1]))
        return frozenset(pairs)


def build_reference_tables(
    airlines=None,
    airports=None,
    route_durations=None,
    time_orders=None,
) -> ReferenceTables:
    """Assemble tables; any argument overrides the bundled data (used by tests)."""
    airline_rows = AIRLINE_CODES if airlines is None else airlines
    airport_rows = AIRPORTS if airports is None else airports
    return ReferenceTables(
        airlines=MappingProxyType({k.upper(): MappingProxyType(dict(v)) for k, v in airline_rows.items()}),
        airline_aliases=MappingProxyType(dict(AIRLINE_NAME_ALIASES)),
        airports=MappingProxyType(
            {code: AirportInfo(code, *row) for code, row in airport_rows.items()}
        ),
        airport_confusions=MappingProxyType(dict(AIRPORT_OCR_CONFUSIONS)),
        glyph_confusions=MappingProxyType(dict(GLYPH_CONFUSIONS)),
        time_orders=MappingProxyType(dict(AIRLINE_TIME_ORDER if time_orders is None else time_orders)),
        default_time_order=DEFAULT_TIME_ORDER,
        route_durations=MappingProxyType(dict(ROUTE_DURATIONS if route_durations is None else route_durations)),
        duration_buckets=DURATION_BUCKETS,
        default_duration_hours=DEFAULT_DURATION_HOURS,
    )


@lru_cache(maxsize=1)
def load_reference_tables() -> ReferenceTables:
    return build_reference_tables()

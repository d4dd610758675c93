# geo.py
from __future__ import annotations

import logging
import math
from typing import Dict, Optional, Tuple
from zoneinfo import ZoneInfo

from .reference import ReferenceTables, load_reference_tables

logger = logging.getLogger("boardingintel.geo")

EARTH_RADIUS_MILES = 3959.0


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in statute miles."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class GeoResolver:
    """Airport code -> coordinates -> IANA zone, plus airport-to-airport distance.

    Zones are materialised once at construction and never mutated, so one
    resolver can be shared across concurrent extractions.
    """

    def __init__(self, tables: Optional[ReferenceTables] = None) -> None:
        self.tables = tables or load_reference_tables()
        self._zones: Dict[str, ZoneInfo] = {
            code: ZoneInfo(info.timezone) for code, info in self.tables.airports.items()
        }

    def coordinates(self, code: Optional[str]) -> Optional[Tuple[float, float]]:
        info = self.tables.airport(code)
        if info is None:
            return None
        return info.latitude, info.longitude

    def timezone_name(self, code: Optional[str]) -> Optional[str]:
        info = self.tables.airport(code)
        return info.timezone if info else None

    def zone(self, code: Optional[str]) -> Optional[ZoneInfo]:
        if not code:
            return None
        return self._zones.get(code.upper())

    def distance_miles(self, origin: Optional[str], destination: Optional[str]) -> Optional[float]:
        a = self.coordinates(origin)
        b = self.coordinates(destination)
        if a is None or b is None:
            logger.debug(f"No coordinates for {origin}->{destination}")
            return None
        return haversine_miles(a[0], a[1], b[0], b[1])

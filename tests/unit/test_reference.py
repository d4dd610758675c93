"""Unit tests for reference tables and geo lookups."""
import dataclasses

import pytest

from boarding_intel.geo import GeoResolver, haversine_miles
from boarding_intel.reference import build_reference_tables


@pytest.mark.unit
class TestReferenceTables:
    """Test airline, airport and route lookups."""

    @pytest.mark.parametrize("code", ["DL", "dl", "UA", "FR", "BA", "SQ"])
    def test_known_airlines(self, tables, code):
        """Test that airline codes are matched case-insensitively."""
        assert tables.is_known_airline(code) is True

    @pytest.mark.parametrize("code", ["", None, "X8", "DZ"])
    def test_unknown_airlines(self, tables, code):
        """Test that blank and unlisted codes are not airlines."""
        assert tables.is_known_airline(code) is False

    def test_airline_name(self, tables):
        """Test that the display name comes from the airline row."""
        assert tables.airline_name("dl") == "Delta Air Lines"
        assert tables.airline_name("X8") is None

    def test_airport_row(self, tables):
        """Test that an airport row carries city, country and zone."""
        # Arrange & Act
        lax = tables.airport("lax")

        # Assert
        assert lax.code == "LAX"
        assert lax.country == "US"
        assert lax.timezone == "America/Los_Angeles"
        assert tables.airport("XXX") is None

    @pytest.mark.parametrize(
        "airline,expected",
        [
            (None, ("boarding", "departure", "arrival")),
            ("DL", ("boarding", "departure", "arrival")),
            ("FR", ("arrival", "departure", "boarding")),
            ("u2", ("arrival", "departure", "boarding")),
            ("SQ", ("departure", "arrival", "boarding")),
        ],
    )
    def test_time_order(self, tables, airline, expected):
        """Test per-airline printing order of the three times."""
        assert tables.time_order(airline) == expected

    def test_route_hours_are_directional(self, tables):
        """Test that westbound and eastbound legs differ."""
        assert tables.route_hours("LAX", "JFK") == 5.5
        assert tables.route_hours("jfk", "lax") == 6.0
        assert tables.route_hours("LAX", "XXX") is None

    def test_city_prefixes(self, tables):
        """Test that multi-word city names starting with a 3-letter word are listed."""
        assert ("SAN", "DIEGO") in tables.city_prefixes

    def test_tables_are_read_only(self, tables):
        """Test that neither the container nor its mappings can be mutated."""
        with pytest.raises(TypeError):
            tables.airports["XXX"] = None
        with pytest.raises(dataclasses.FrozenInstanceError):
            tables.default_duration_hours = 1.0

    def test_overrides(self):
        """Test that a custom route table replaces the bundled one."""
        # Arrange & Act
        custom = build_reference_tables(route_durations={("LAX", "SFO"): 1.25})

        # Assert
        assert custom.route_hours("LAX", "SFO") == 1.25
        assert custom.route_hours("LAX", "JFK") is None
        assert custom.is_known_airport("JFK")


@pytest.mark.unit
class TestGeoResolver:
    """Test coordinates, zones and distances."""

    def test_zero_distance(self):
        """Test that a point is zero miles from itself."""
        assert haversine_miles(33.9, -118.4, 33.9, -118.4) == 0.0

    def test_lax_jfk_distance(self, geo):
        """Test the great-circle distance LAX to JFK."""
        miles = geo.distance_miles("LAX", "JFK")

        assert 2400 < miles < 2520

    def test_distance_is_symmetric(self, geo):
        """Test that distance does not depend on direction."""
        assert geo.distance_miles("SFO", "ORD") == pytest.approx(geo.distance_miles("ORD", "SFO"))

    def test_unknown_airport(self, geo):
        """Test that unknown codes give no zone and no distance."""
        assert geo.zone("XXX") is None
        assert geo.zone(None) is None
        assert geo.timezone_name("XXX") is None
        assert geo.distance_miles("XXX", "JFK") is None

    def test_zone_lookup(self, geo):
        """Test that zones resolve case-insensitively."""
        assert geo.zone("lax").key == "America/Los_Angeles"
        assert geo.timezone_name("LHR") == "Europe/London"
        assert geo.coordinates("JFK") is not None

    def test_builds_own_tables(self):
        """Test that a resolver works without injected tables."""
        assert GeoResolver().zone("DUB").key == "Europe/Dublin"

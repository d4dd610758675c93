"""Unit tests for token extraction."""
import pytest

from boarding_intel.lexer import normalize_text
from boarding_intel.models import AirportRole, TimeRole, TokenKind


def _values(tokens, kind):
    return [t.value for t in tokens.of(kind)]


def _times(tokens):
    return {t.role: t.value for t in tokens.of(TokenKind.TIME)}


@pytest.mark.unit
class TestNormalizeText:
    """Test text normalization."""

    def test_upper_and_blank_runs(self):
        """Test upper-casing, blank collapsing and empty-line removal."""
        assert normalize_text("  delta\tdl1234 \n\n  depart  15:30 ") == "DELTA DL1234\nDEPART 15:30"

    def test_empty(self):
        """Test that blank input normalizes to an empty string."""
        assert normalize_text(" \n\t ") == ""


@pytest.mark.unit
class TestExtractE2E:
    """Test the reference single-line pass."""

    def test_all_fields(self, extractor, e2e_text):
        """Test that each field is found once with the right role."""
        # Arrange & Act
        tokens = extractor.extract(e2e_text)

        # Assert
        assert tokens.airline_code == "DL"
        assert _values(tokens, TokenKind.FLIGHT) == ["DL1234"]
        assert tokens.airport_for(AirportRole.ORIGIN).value == "LAX"
        assert tokens.airport_for(AirportRole.DESTINATION).value == "JFK"
        assert _values(tokens, TokenKind.DATE) == ["2024-10-09"]
        assert _values(tokens, TokenKind.SEAT) == ["12A"]
        assert _values(tokens, TokenKind.GATE) == ["B12"]

    def test_departure_is_keyword_labeled(self, extractor, e2e_text):
        """Test that DEPART labels the time that follows it."""
        tokens = extractor.extract(e2e_text)
        departure = tokens.time_for(TimeRole.DEPARTURE)

        assert departure.value == "15:30"
        assert departure.metadata["role_source"] == "keyword"
        assert departure.confidence == 0.9

    def test_flight_metadata(self, extractor, e2e_text):
        """Test flight token metadata."""
        flight = extractor.extract(e2e_text).first(TokenKind.FLIGHT)

        assert flight.metadata["airline_code"] == "DL"
        assert flight.metadata["number"] == "1234"
        assert flight.metadata["known_airline"] is True

    def test_tokens_sorted_by_position(self, extractor, e2e_text):
        """Test that tokens come back in text order."""
        positions = [t.position for t in extractor.extract(e2e_text).tokens]

        assert positions == sorted(positions)


@pytest.mark.unit
class TestClaimedSpans:
    """Test that earlier rules shadow later ones."""

    def test_gate_is_not_a_flight(self, extractor):
        """Test that GATE B12 never becomes a flight number."""
        tokens = extractor.extract("GATE B12")

        assert _values(tokens, TokenKind.GATE) == ["B12"]
        assert tokens.of(TokenKind.FLIGHT) == []

    def test_flight_suffix_is_not_a_seat(self, extractor):
        """Test that the tail of DL12A is not read as seat 12A."""
        tokens = extractor.extract("DL12A LAX JFK")

        assert tokens.of(TokenKind.SEAT) == []

    def test_am_pm_is_not_a_flight(self, extractor):
        """Test that a 12h suffix followed by digits is not flight AM/PM."""
        tokens = extractor.extract("BOARDING 9:40 AM 10 OCT 2024")

        assert tokens.of(TokenKind.FLIGHT) == []
        assert tokens.time_for(TimeRole.BOARDING).value == "9:40 AM"


@pytest.mark.unit
class TestTableLayouts:
    """Test single-line rows and header rows."""

    def test_flight_date_time_row(self, extractor, table_text):
        """Test a flight/date/departure row with a gate/boarding/seat row below."""
        # Arrange & Act
        tokens = extractor.extract(table_text)

        # Assert
        assert tokens.airline_code == "UA"
        assert _values(tokens, TokenKind.FLIGHT) == ["UA456"]
        assert _values(tokens, TokenKind.DATE) == ["2024-10-15"]
        assert _times(tokens) == {"departure": "08:15", "boarding": "07:35"}
        assert tokens.time_for(TimeRole.DEPARTURE).metadata["role_source"] == "table"
        assert _values(tokens, TokenKind.GATE) == ["C7"]
        assert _values(tokens, TokenKind.SEAT) == ["22C"]
        assert tokens.airport_for(AirportRole.ORIGIN).value == "SFO"
        assert tokens.airport_for(AirportRole.DESTINATION).value == "ORD"

    def test_header_row(self, extractor):
        """Test times under a BOARDING/DEPARTURE/ARRIVAL header."""
        tokens = extractor.extract("BOARDING DEPARTURE ARRIVAL\n14:50 15:30 23:59")

        assert _times(tokens) == {"boarding": "14:50", "departure": "15:30", "arrival": "23:59"}
        assert {t.metadata["role_source"] for t in tokens.of(TokenKind.TIME)} == {"header"}


@pytest.mark.unit
class TestTimeRoles:
    """Test keyword and positional time roles."""

    def test_keywords(self, extractor):
        """Test that each time takes the nearest preceding keyword."""
        tokens = extractor.extract("BOARDING 14:50 DEPARTURE 15:30 ARRIVAL 23:59")

        assert _times(tokens) == {"boarding": "14:50", "departure": "15:30", "arrival": "23:59"}

    def test_arrive_keyword(self, extractor):
        """Test the ARRIVE spelling."""
        tokens = extractor.extract("DEPART 23:00 ARRIVE 06:10")

        assert _times(tokens) == {"departure": "23:00", "arrival": "06:10"}

    def test_lookalike_digits_are_read(self, extractor):
        """Test that letters standing in for digits still make a time token."""
        # Arrange & Act
        token = extractor.extract("DL1234 DEPART 1O:3O").time_for(TimeRole.DEPARTURE)

        # Assert
        assert token.raw_value == "1O:3O"
        assert token.confidence == 0.6
        assert token.metadata["lookalikes"] is True
        assert token.metadata["role_source"] == "keyword"

    def test_clean_time_is_not_lookalike(self, extractor):
        """Test that a clean clock keeps the labeled confidence."""
        token = extractor.extract("DEPART 10:30").time_for(TimeRole.DEPARTURE)

        assert token.confidence == 0.9
        assert token.metadata["lookalikes"] is False

    def test_keyword_outside_lookback_is_ignored(self, extractor):
        """Test that a keyword more than the lookback away does not label a time."""
        tokens = extractor.extract("DEPARTURE INFORMATION FOR TODAY ONLY 15:30")
        token = tokens.first(TokenKind.TIME)

        assert token.role == "boarding"
        assert token.metadata["role_source"] == "position"
        assert token.confidence == 0.6

    @pytest.mark.parametrize(
        "text,expected",
        [
            (
                "BA 117 LHR JFK 10 OCT 2024 09:40 10:25 12:35",
                {"boarding": "09:40", "departure": "10:25", "arrival": "12:35"},
            ),
            (
                "RYANAIR FR 1234 DUB STN 12 NOV 2024 11:05 09:50 09:20",
                {"arrival": "11:05", "departure": "09:50", "boarding": "09:20"},
            ),
            (
                "SQ 22 SIN LAX 10 OCT 2024 09:40 10:25 12:35",
                {"departure": "09:40", "arrival": "10:25", "boarding": "12:35"},
            ),
        ],
    )
    def test_positional_airline_order(self, extractor, text, expected):
        """Test that unlabeled times follow the airline's printing order."""
        assert _times(extractor.extract(text)) == expected

    def test_positional_skips_taken_roles(self, extractor):
        """Test that positional roles skip roles already labeled."""
        tokens = extractor.extract("DEPART 10:25 LHR JFK 09:40 12:35")

        assert _times(tokens) == {"departure": "10:25", "boarding": "09:40", "arrival": "12:35"}

    def test_explicit_airline_code(self, extractor):
        """Test that a caller-supplied airline code selects the order."""
        tokens = extractor.extract("DUB STN 11:05 09:50", airline_code="FR")

        assert _times(tokens) == {"arrival": "11:05", "departure": "09:50"}


@pytest.mark.unit
class TestAirports:
    """Test route anchors and generic airport codes."""

    def test_from_to_anchors(self, extractor):
        """Test FROM/TO anchors."""
        tokens = extractor.extract("FROM: SFO TO: ORD")

        assert tokens.airport_for(AirportRole.ORIGIN).value == "SFO"
        assert tokens.airport_for(AirportRole.DESTINATION).value == "ORD"

    def test_slash_route_needs_known_airports(self, extractor):
        """Test that LAX/JFK is a route but an unknown pair is not."""
        assert extractor.extract("LAX/JFK").airport_for(AirportRole.ORIGIN).value == "LAX"
        assert extractor.extract("QQQ/ZZZ").of(TokenKind.AIRPORT) == []

    def test_city_prefix_is_not_an_airport(self, extractor):
        """Test that SAN in SAN DIEGO is not read as airport SAN."""
        tokens = extractor.extract("SAN DIEGO TO LAX")

        assert "SAN" not in _values(tokens, TokenKind.AIRPORT)
        assert tokens.airport_for(AirportRole.DESTINATION).value == "LAX"

    def test_stopwords_are_not_airports(self, extractor):
        """Test that day and month abbreviations are skipped."""
        tokens = extractor.extract("SAT 12 OCT 2024 JFK LAX")

        assert _values(tokens, TokenKind.AIRPORT) == ["JFK", "LAX"]
        assert tokens.airport_for(AirportRole.ORIGIN).value == "JFK"


@pytest.mark.unit
class TestOtherFields:
    """Test passenger, confirmation, terminal and native confidence caps."""

    def test_passenger_name(self, extractor):
        """Test LAST/FIRST TITLE names."""
        passenger = extractor.extract("DOE/JOHN MR DL1234").first(TokenKind.PASSENGER_NAME)

        assert passenger.value == "JOHN DOE"
        assert passenger.metadata["title"] == "MR"

    def test_short_name_parts(self, extractor):
        """Test that a three-letter LAST/FIRST pair is a name unless both are airports."""
        passenger = extractor.extract("LEE/ANN MS DL1234").first(TokenKind.PASSENGER_NAME)

        assert passenger.value == "ANN LEE"
        assert extractor.extract("LAX/JFK DL1234").first(TokenKind.PASSENGER_NAME) is None

    def test_dated_token_preferred(self, extractor):
        """Test that a date printed with its year wins over an earlier year-less one."""
        tokens = extractor.extract("DL1234 09OCT LAX TO JFK DEPART 15:30\nFLIGHT DATE OCTOBER 9, 2024")

        assert len(tokens.of(TokenKind.DATE)) == 2
        assert tokens.flight_date().value == "2024-10-09"
        assert tokens.flight_date().metadata["year_inferred"] is False

    def test_labeled_confirmation(self, extractor):
        """Test a labeled confirmation code."""
        tokens = extractor.extract("CONFIRMATION: ABC123 DL1234")

        assert _values(tokens, TokenKind.CONFIRMATION) == ["ABC123"]

    def test_unlabeled_confirmation_skips_flights(self, extractor):
        """Test that a flight number is never taken as the confirmation code."""
        tokens = extractor.extract("DL1234 LAX TO JFK X7KQ2P")

        assert _values(tokens, TokenKind.CONFIRMATION) == ["X7KQ2P"]

    def test_terminal(self, extractor):
        """Test a labeled terminal."""
        assert _values(extractor.extract("TERMINAL 4 GATE 22"), TokenKind.TERMINAL) == ["4"]

    def test_native_confidence_caps_tokens(self, extractor):
        """Test that a low native word confidence caps the token."""
        tokens = extractor.extract("DEPART 15:30", word_confidences={"15:30": 0.4})

        assert tokens.time_for(TimeRole.DEPARTURE).confidence == 0.4

    def test_airline_from_alias(self, extractor):
        """Test that an airline name sets the airline code without a flight number."""
        assert extractor.extract("BRITISH AIRWAYS LHR JFK").airline_code == "BA"
        assert extractor.airline_alias("flying ryanair today") == "FR"

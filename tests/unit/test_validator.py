"""Unit tests for field validation and OCR time correction."""
import pytest

from boarding_intel.models import RecognizedText
from boarding_intel.validator import correct_ocr_time


@pytest.mark.unit
class TestValidateFlightNumber:
    """Test flight number validation against known airlines."""

    @pytest.mark.parametrize("text,expected", [("DL1234", "DL1234"), ("dl 1234", "DL1234"), ("BA117", "BA117")])
    def test_known_airline(self, validator, text, expected):
        """Test that a known prefix validates at high confidence."""
        result = validator.validate_flight_number(text)

        assert result.valid is True
        assert result.value == expected
        assert result.confidence == 0.95

    def test_one_edit_suggestion(self, validator):
        """Test that DZ1234 suggests the first airline one edit away."""
        # Arrange & Act
        result = validator.validate_flight_number("DZ1234")

        # Assert
        assert result.valid is False
        assert result.value == "DZ1234"
        assert result.suggestion == "DL1234"
        assert result.confidence == 0.7

    def test_unknown_airline_far_from_any(self, validator):
        """Test that a prefix with no nearby airline is invalid without a suggestion."""
        result = validator.validate_flight_number("X8123")

        assert result.valid is False
        assert result.suggestion is None
        assert result.confidence == 0.3

    @pytest.mark.parametrize("text", ["hello", "", "1234"])
    def test_no_flight_shape(self, validator, text):
        """Test that text without a flight shape scores zero."""
        result = validator.validate_flight_number(text)

        assert result.valid is False
        assert result.confidence == 0.0


@pytest.mark.unit
class TestValidateTime:
    """Test wall-clock validation and repair."""

    @pytest.mark.parametrize(
        "text,expected,confidence",
        [
            ("15:30", "15:30", 0.9),
            ("4:45PM", "16:45", 0.9),
            ("12:00AM", "00:00", 0.9),
            ("12:00PM", "12:00", 0.9),
            ("13:80", "13:30", 0.6),
            ("13:70", "13:10", 0.6),
            ("25:30", "01:30", 0.6),
            ("99:99", "03:39", 0.6),
            ("1O:3O", "10:30", 0.6),
        ],
    )
    def test_values(self, validator, text, expected, confidence):
        """Test AM/PM conversion, range repair and look-alike digits."""
        result = validator.validate_time(text)

        assert result.valid is True
        assert result.value == expected
        assert result.confidence == confidence

    @pytest.mark.parametrize("text", ["00:00", "09:05", "23:59", "4:45PM", "13:80"])
    def test_idempotent(self, validator, text):
        """Test that validating a validated value changes nothing."""
        once = validator.validate_time(text).value

        assert validator.validate_time(once).value == once

    def test_confidence_is_capped(self, validator):
        """Test that the reading confidence caps the result."""
        assert validator.validate_time("15:30", 0.4).confidence == 0.4

    def test_garbage(self, validator):
        """Test that non-times are invalid."""
        assert validator.validate_time("gate").valid is False


@pytest.mark.unit
class TestCorrectOcrTime:
    """Test confidence-gated OCR time correction."""

    @pytest.mark.parametrize(
        "text,confidence,expected",
        [
            ("13:80", 0.5, "13:30"),
            ("25:30", 0.4, "01:30"),
            ("99:99", 0.3, "03:39"),
        ],
    )
    def test_repairs_low_confidence_reads(self, text, confidence, expected):
        """Test that doubtful out-of-range reads are repaired."""
        # Arrange & Act
        result = correct_ocr_time(text, confidence)

        # Assert
        assert result.time == expected
        assert result.corrected is True
        assert result.valid is True
        assert result.confidence == pytest.approx(confidence * 0.8)

    def test_valid_time_unchanged(self):
        """Test that a valid high-confidence time passes through."""
        result = correct_ocr_time("13:30", 0.9)

        assert result.time == "13:30"
        assert result.corrected is False
        assert result.confidence == 0.9

    def test_trusted_read_is_not_repaired(self):
        """Test that a confident but impossible read comes back flagged invalid."""
        result = correct_ocr_time("25:30", 0.9)

        assert result.time == "25:30"
        assert result.valid is False
        assert result.corrected is False

    def test_no_time(self):
        """Test that text without a clock reading gives nothing."""
        result = correct_ocr_time("garbage", 0.9)

        assert result.time is None
        assert result.confidence == 0.0

    @pytest.mark.parametrize("text", ["13:80", "25:30", "99:99", "1O:3O", "13:30", "4:45PM"])
    @pytest.mark.parametrize("confidence", [0.1, 0.5, 0.69, 0.7, 0.95])
    def test_confidence_never_rises(self, text, confidence):
        """Test that correction never reports more confidence than it was given."""
        assert correct_ocr_time(text, confidence).confidence <= confidence


@pytest.mark.unit
class TestValidateOtherFields:
    """Test airport, date, seat and gate validation."""

    @pytest.mark.parametrize("code", ["LAX", "lax", " JFK "])
    def test_known_airport(self, validator, code):
        """Test known codes."""
        result = validator.validate_airport(code)

        assert result.valid is True
        assert result.confidence == 0.95

    @pytest.mark.parametrize("code,expected", [("IAX", "LAX"), ("0RD", "ORD"), ("5FO", "SFO")])
    def test_airport_confusions(self, validator, code, expected):
        """Test confusion-table and glyph-swap suggestions."""
        result = validator.validate_airport(code)

        assert result.valid is False
        assert result.suggestion == expected
        assert result.confidence == 0.7

    def test_plausible_unknown_airport(self, validator):
        """Test that an unlisted 3-letter code is accepted at lower confidence."""
        result = validator.validate_airport("ZZZ")

        assert result.valid is True
        assert result.confidence == 0.6

    @pytest.mark.parametrize("code", ["12", "", "LAXX"])
    def test_not_an_airport(self, validator, code):
        """Test malformed codes."""
        assert validator.validate_airport(code).valid is False

    @pytest.mark.parametrize(
        "text,expected,confidence",
        [
            ("OCTOBER 9, 2024", "2024-10-09", 0.9),
            ("10/09/2024", "2024-10-09", 0.8),
            ("2024-10-09", "2024-10-09", 0.8),
            ("09 OCT", "2024-10-09", 0.7),
        ],
    )
    def test_date(self, validator, text, expected, confidence):
        """Test date confidence by pattern."""
        result = validator.validate_date(text)

        assert result.value == expected
        assert result.confidence == confidence

    def test_no_date(self, validator):
        """Test text with no date."""
        assert validator.validate_date("no date here").valid is False

    def test_seat(self, validator):
        """Test in-range and out-of-range seat rows."""
        assert validator.validate_seat("12A").value == "12A"

        # Arrange & Act
        result = validator.validate_seat("75C")

        # Assert
        assert result.valid is False
        assert result.suggestion == "15C"
        assert result.confidence == 0.5
        assert validator.validate_seat("ROW").valid is False

    def test_gate(self, validator):
        """Test gate shapes."""
        assert validator.validate_gate("b12").value == "B12"
        assert validator.validate_gate("b12").confidence == 0.85
        assert validator.validate_gate("GATE").valid is False


@pytest.mark.unit
class TestValidateBoardingPass:
    """Test the whole-pass validation pass."""

    def test_extracted_fields(self, validator, e2e_text):
        """Test that every field is validated and extracted."""
        # Arrange & Act
        validation = validator.validate_boarding_pass(e2e_text)

        # Assert
        assert validation.text_source == "raw"
        assert validation.extracted == {
            "flight_number": "DL1234",
            "origin": "LAX",
            "destination": "JFK",
            "date": "2024-10-09",
            "departure_time": "15:30",
            "seat": "12A",
            "gate": "B12",
        }

    def test_date_with_year_preferred(self, validator):
        """Test that the dated token is validated when a year-less one comes first."""
        validation = validator.validate_text("DL1234 09OCT LAX TO JFK DEPART 15:30\nFLIGHT DATE OCTOBER 9, 2024")

        assert validation.fields["date"].value == "2024-10-09"
        assert validation.fields["date"].confidence == 0.9

    def test_lookalike_time_repaired(self, validator):
        """Test that a clock with letter look-alikes validates at reduced confidence."""
        validation = validator.validate_text("DL1234 LAX TO JFK OCTOBER 9, 2024 DEPART 1O:3O")

        assert validation.fields["departure_time"].value == "10:30"
        assert validation.fields["departure_time"].confidence == 0.6

    def test_field_confidence_capped_by_token(self, validator, e2e_text):
        """Test that a field never claims more confidence than its token."""
        fields = validator.validate_boarding_pass(e2e_text).fields

        assert fields["flight_number"].confidence == 0.9
        assert fields["origin"].confidence == 0.85

    def test_native_confidences_filter_text(self, validator, e2e_text, word_confidences):
        """Test that native word scores switch validation to the filtered text."""
        # Arrange
        recognized = RecognizedText(text=e2e_text, word_confidences=word_confidences(e2e_text, low=("SEAT", "12A")))

        # Act
        validation = validator.validate_boarding_pass(recognized)

        # Assert
        assert validation.text_source == "filtered"
        assert "12A" not in validation.clean_text
        assert "seat" not in validation.fields

    def test_all_words_filtered_falls_back_to_raw(self, validator, e2e_text, word_confidences):
        """Test that an empty filtered text is never validated."""
        recognized = RecognizedText(text=e2e_text, word_confidences=word_confidences(e2e_text, low=e2e_text.split()))

        validation = validator.validate_boarding_pass(recognized)

        assert validation.text_source == "raw"
        assert validation.fields["origin"].confidence == 0.3

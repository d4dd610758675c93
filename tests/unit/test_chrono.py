"""Unit tests for calendar and clock parsing."""
from datetime import date

import pytest

from boarding_intel.chrono import (
    find_dates,
    format_clock,
    infer_year,
    parse_clock,
    parse_date_text,
    shift_years,
    to_24h,
)

TODAY = date(2024, 10, 1)


@pytest.mark.unit
class TestParseDateText:
    """Test the ordered date patterns."""

    @pytest.mark.parametrize(
        "text,expected,pattern",
        [
            ("OCTOBER 9, 2024", date(2024, 10, 9), "full"),
            ("October 9th 2024", date(2024, 10, 9), "full"),
            ("9 OCTOBER 2024", date(2024, 10, 9), "full"),
            ("09OCT24", date(2024, 10, 9), "abbreviated"),
            ("09 OCT 2024", date(2024, 10, 9), "abbreviated"),
            ("OCT 9, 2024", date(2024, 10, 9), "abbreviated"),
            ("2024-10-09", date(2024, 10, 9), "iso"),
            ("10/09/2024", date(2024, 10, 9), "numeric"),
            ("10-09-24", date(2024, 10, 9), "numeric"),
        ],
    )
    def test_formats(self, text, expected, pattern):
        """Test each supported layout and the pattern name it reports."""
        # Arrange & Act
        parsed = parse_date_text(text, TODAY)

        # Assert
        assert parsed.value == expected
        assert parsed.pattern == pattern
        assert parsed.year_inferred is False

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("09 OCT", date(2024, 10, 9)),
            ("15 DEC", date(2024, 12, 15)),
            ("02 MAR", date(2025, 3, 2)),
        ],
    )
    def test_year_inferred_forward(self, text, expected):
        """Test that a year-less date never lands in an earlier month of this year."""
        parsed = parse_date_text(text, TODAY)

        assert parsed.value == expected
        assert parsed.year_inferred is True

    @pytest.mark.parametrize("text", ["02/30/2024", "31 APR 2024", "no date here", ""])
    def test_invalid_or_missing(self, text):
        """Test that impossible calendar dates are not returned."""
        assert parse_date_text(text, TODAY) is None

    def test_positions_do_not_overlap(self):
        """Test that one span is never read by two patterns."""
        # Arrange & Act
        found = find_dates("OCTOBER 9, 2024 RETURN 2024-10-16", TODAY)

        # Assert
        assert [d.value for d in found] == [date(2024, 10, 9), date(2024, 10, 16)]
        assert found[0].end <= found[1].position


@pytest.mark.unit
class TestYearHelpers:
    """Test year inference and shifting."""

    @pytest.mark.parametrize(
        "month,expected",
        [(1, 2025), (9, 2025), (10, 2024), (12, 2024)],
    )
    def test_infer_year(self, month, expected):
        """Test forward-looking year inference."""
        assert infer_year(month, TODAY) == expected

    def test_shift_years_leap_day(self):
        """Test that Feb 29 shifts to Feb 28 in a common year."""
        assert shift_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
        assert shift_years(date(2024, 10, 1), -1) == date(2023, 10, 1)


@pytest.mark.unit
class TestParseClock:
    """Test strict wall-clock parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("15:30", (15, 30)),
            ("9:05", (9, 5)),
            ("4:45PM", (16, 45)),
            ("4:45 pm", (16, 45)),
            ("12:00AM", (0, 0)),
            ("12:00 P.M.", (12, 0)),
            ("00:00", (0, 0)),
            ("23:59", (23, 59)),
        ],
    )
    def test_valid(self, text, expected):
        """Test 24h and 12h readings."""
        assert parse_clock(text) == expected

    @pytest.mark.parametrize("text", ["25:30", "13:80", "13:30 PM", "noon", ""])
    def test_invalid(self, text):
        """Test that out-of-range readings are rejected, not repaired."""
        assert parse_clock(text) is None

    def test_to_24h(self):
        """Test AM/PM conversion edges."""
        assert to_24h(12, "A") == 0
        assert to_24h(12, "P") == 12
        assert to_24h(1, "P") == 13
        assert to_24h(7, None) == 7

    def test_format_clock(self):
        """Test zero padding."""
        assert format_clock(7, 5) == "07:05"

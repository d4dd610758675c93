"""Global fixtures for all tests."""
import asyncio
from datetime import datetime, timezone
from typing import Optional

import pytest

from boarding_intel.geo import GeoResolver
from boarding_intel.lexer import TokenExtractor
from boarding_intel.models import RecognizedText, WordConfidence
from boarding_intel.recognizers.base import TextRecognizer
from boarding_intel.reference import load_reference_tables
from boarding_intel.time_resolver import TimeResolver
from boarding_intel.validator import FieldValidator

# Every date-sensitive test runs "on" this day
FIXED_NOW = datetime(2024, 10, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


E2E_TEXT = "DELTA DL1234 DEPART 15:30 LAX TO JFK OCTOBER 9, 2024 SEAT 12A GATE B12"
NO_DATE_TEXT = "DELTA DL1234 DEPART 15:30 LAX TO JFK SEAT 12A GATE B12"
TABLE_TEXT = """
United Airlines
FLIGHT   DATE     DEPART
UA 456   15OCT24  08:15
GATE  BOARDING  SEAT
C7    07:35     22C
FROM: SFO   TO: ORD
"""


class FakeRecognizer(TextRecognizer):
    """Scripted backend: returns ``text`` or raises ``error``; counts calls."""

    def __init__(self, name: str, text: Optional[str] = None, error: Optional[BaseException] = None,
                 word_confidences=None, mime_prefixes=("image/", "application/pdf", "text/"), delay: float = 0.0):
        self.name = name
        self.text = text
        self.error = error
        self.word_confidences = word_confidences
        self.mime_prefixes = mime_prefixes
        self.delay = delay
        self.calls = 0

    async def recognize(self, buffer, mime_type):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.text is None:
            return None
        return RecognizedText(text=self.text, word_confidences=self.word_confidences, backend=self.name)


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture(scope="session")
def tables():
    return load_reference_tables()


@pytest.fixture(scope="session")
def geo(tables):
    return GeoResolver(tables)


@pytest.fixture
def extractor(tables):
    return TokenExtractor(tables, clock=fixed_clock)


@pytest.fixture
def validator(tables, extractor):
    return FieldValidator(tables, extractor, clock=fixed_clock)


@pytest.fixture
def resolver(tables, geo, extractor, validator):
    """Lenient time resolver pinned to FIXED_NOW."""
    return TimeResolver(tables, geo, extractor, strict=False, clock=fixed_clock, validator=validator)


@pytest.fixture
def strict_resolver(tables, geo, extractor, validator):
    return TimeResolver(tables, geo, extractor, strict=True, clock=fixed_clock, validator=validator)


@pytest.fixture
def word_confidences():
    def build(text: str, low=()):
        """Native confidences for ``text``: 0.95 everywhere, 0.3 for words in ``low``."""
        out = []
        for line_no, line in enumerate(text.strip().splitlines()):
            for word in line.split():
                out.append(WordConfidence(word=word, confidence=0.3 if word in low else 0.95, line=line_no))
        return out

    return build


@pytest.fixture
def e2e_text():
    return E2E_TEXT


@pytest.fixture
def no_date_text():
    return NO_DATE_TEXT


@pytest.fixture
def table_text():
    return TABLE_TEXT


@pytest.fixture
def fake_backend():
    """The FakeRecognizer class, so tests can script several backends."""
    return FakeRecognizer

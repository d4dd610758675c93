# recognizers/__init__.py
from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from .base import TextRecognizer
from .gemini import GeminiRecognizer
from .plain import PlainTextRecognizer
from .remote import HttpRecognizer, MathpixRecognizer, SimpleTexRecognizer
from .tesseract import TesseractRecognizer

BACKENDS: Dict[str, Callable[[], TextRecognizer]] = {
    "plain": PlainTextRecognizer,
    "tesseract": TesseractRecognizer,
    "simpletex": SimpleTexRecognizer,
    "mathpix": MathpixRecognizer,
    "gemini": GeminiRecognizer,
}


def build_backends(names: Iterable[str]) -> List[TextRecognizer]:
    """Instantiate backends by name, preserving the given priority order."""
    out: List[TextRecognizer] = []
    for name in names:
        key = name.strip().lower()
        if key not in BACKENDS:
            raise ValueError(f"Unknown OCR backend {name!r}; choose from {', '.join(BACKENDS)}")
        out.append(BACKENDS[key]())
    return out


__all__ = [
    "BACKENDS",
    "GeminiRecognizer",
    "HttpRecognizer",
    "MathpixRecognizer",
    "PlainTextRecognizer",
    "SimpleTexRecognizer",
    "TesseractRecognizer",
    "TextRecognizer",
    "build_backends",
]

# confidence.py
from __future__ import annotations

from typing import Dict, List, Optional

from .config import FILTER_THRESHOLD
from .models import RecognizedText, WordConfidence
from .patterns import patterns


def estimate_confidence(word: str) -> float:
    """Shape-based confidence for recognizers that report none.

    Well-formed domain tokens score high; glyphs that OCR commonly swaps
    (O/0, I/L/1) and stray punctuation score low.
    """
    w = word.strip().upper()
    if not w:
        return 0.0
    if patterns.SHAPE_FLIGHT.match(w):
        return 0.9
    if patterns.SHAPE_AIRPORT.match(w):
        return 0.85
    if patterns.SHAPE_TIME.match(w):
        return 0.8
    if patterns.SHAPE_SEAT.match(w):
        return 0.85
    if patterns.SHAPE_GATE.match(w):
        return 0.8
    if patterns.SHAPE_O_ZERO.search(w):
        return 0.5
    if patterns.SHAPE_I_ONE.search(w):
        return 0.6
    if patterns.SHAPE_PUNCT.search(w):
        return 0.4
    if patterns.SHAPE_WORD.match(w):
        return 0.8
    return 0.7


def extract_confidence_scores(recognized: RecognizedText) -> List[WordConfidence]:
    """Native word confidences when present, otherwise shape estimates per line."""
    if recognized.word_confidences:
        return list(recognized.word_confidences)
    scores: List[WordConfidence] = []
    for line_no, line in enumerate(recognized.text.splitlines()):
        for word in line.split():
            scores.append(WordConfidence(word=word, confidence=estimate_confidence(word), line=line_no))
    return scores


def filter_low_confidence(recognized: RecognizedText, threshold: Optional[float] = None) -> str:
    """Rebuild the text from words at or above ``threshold``, one output line per source line."""
    threshold = FILTER_THRESHOLD if threshold is None else threshold
    lines: Dict[int, List[str]] = {}
    for wc in extract_confidence_scores(recognized):
        if wc.confidence >= threshold:
            lines.setdefault(wc.line, []).append(wc.word)
    return "\n".join(" ".join(words) for _, words in sorted(lines.items()))


def word_confidence_map(recognized: Optional[RecognizedText]) -> Dict[str, float]:
    """Lowest native confidence seen per upper-cased word; empty without native scores."""
    if recognized is None or not recognized.word_confidences:
        return {}
    out: Dict[str, float] = {}
    for wc in recognized.word_confidences:
        key = wc.word.strip().upper()
        if key:
            out[key] = min(out.get(key, 1.0), wc.confidence)
    return out

# recognizers/tesseract.py
from __future__ import annotations

import asyncio
import functools
from statistics import mean
from typing import List, Optional, Tuple

import cv2
import numpy as np
import pytesseract
from PIL import Image

from ..config import TESSERACT_CONFIG, thread_pool
from ..errors import BackendUnavailable
from ..logging_utils import get_logger
from ..models import RecognizedText, WordConfidence
from .base import TextRecognizer
from .imaging import create_optimal_versions, load_pages

logger = get_logger("recognizers.tesseract")


def _read_words(img: np.ndarray, config: str, line_offset: int = 0) -> Tuple[List[str], List[WordConfidence]]:
    """Run ``image_to_data`` and rebuild lines from (block, paragraph, line) keys."""
    pil = Image.fromarray(cv2.cvtColor(img, cv2.COLOR_BGR2RGB))
    data = pytesseract.image_to_data(pil, config=config, output_type=pytesseract.Output.DICT)

    lines: dict = {}
    words: List[WordConfidence] = []
    for i, word in enumerate(data["text"]):
        word = (word or "").strip()
        conf = float(data["conf"][i])
        if not word or conf < 0:
            continue
        key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
        entry = lines.setdefault(key, {"no": line_offset + len(lines), "words": []})
        entry["words"].append(word)
        words.append(WordConfidence(word=word, confidence=min(conf / 100.0, 1.0), line=entry["no"]))

    text_lines = [" ".join(v["words"]) for v in sorted(lines.values(), key=lambda v: v["no"])]
    return text_lines, words


class TesseractRecognizer(TextRecognizer):
    """Local Tesseract OCR with native per-word confidence.

    Every page is tried in each preprocessed variant; the variant with the
    highest mean word confidence is kept.
    """

    name = "tesseract"

    def __init__(self, config: str = TESSERACT_CONFIG) -> None:
        self.config = config

    def _best_read(self, page: np.ndarray, line_offset: int) -> Tuple[List[str], List[WordConfidence], str]:
        best: Tuple[List[str], List[WordConfidence], str] = ([], [], "none")
        best_score = -1.0
        for img, label in create_optimal_versions(page):
            lines, words = _read_words(img, self.config, line_offset)
            score = mean(w.confidence for w in words) if words else 0.0
            logger.debug(f"Tesseract variant={label} words={len(words)} mean_conf={score:.2f}")
            if score > best_score:
                best, best_score = (lines, words, label), score
        return best

    def _recognize_pages(self, pages: List[np.ndarray]) -> Optional[RecognizedText]:
        all_lines: List[str] = []
        all_words: List[WordConfidence] = []
        variants: List[str] = []
        try:
            for page in pages:
                lines, words, label = self._best_read(page, len(all_lines))
                all_lines.extend(lines)
                all_words.extend(words)
                variants.append(label)
        except pytesseract.TesseractNotFoundError as e:
            raise BackendUnavailable(self.name, "tesseract binary not installed") from e

        text = "\n".join(all_lines).strip()
        if not text:
            return None
        return RecognizedText(
            text=text,
            word_confidences=all_words,
            backend=self.name,
            metadata={"pages": len(pages), "variants": variants},
        )

    async def recognize(self, buffer: bytes, mime_type: str) -> Optional[RecognizedText]:
        pages = await load_pages(buffer, mime_type)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(thread_pool, functools.partial(self._recognize_pages, pages))

# recognizers/plain.py
from __future__ import annotations

import logging
from typing import Optional

from ..models import RecognizedText
from .base import TextRecognizer

logger = logging.getLogger("boardingintel.recognizers.plain")


class PlainTextRecognizer(TextRecognizer):
    """Pass-through for text that was already recognized upstream."""

    name = "plain"
    mime_prefixes = ("text/",)

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def recognize(self, buffer: bytes, mime_type: str) -> Optional[RecognizedText]:
        text = buffer.decode(self.encoding, errors="replace").strip()
        if not text:
            logger.debug("Empty text buffer")
            return None
        return RecognizedText(text=text, backend=self.name)

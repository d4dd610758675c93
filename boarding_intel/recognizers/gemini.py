# recognizers/gemini.py
from __future__ import annotations

import io
import time
from typing import Any, Optional

import google.generativeai as genai
from PIL import Image
from tenacity import retry, retry_if_not_exception_type, stop_after_attempt, wait_exponential

from ..config import GEMINI_MODEL, GOOGLE_API_KEY
from ..errors import BackendUnavailable
from ..logging_utils import get_logger, log_event
from ..models import RecognizedText
from .base import TextRecognizer
from .imaging import is_pdf

logger = get_logger("recognizers.gemini")

TRANSCRIBE_INSTRUCTION = (
    "You are an OCR engine for airline boarding passes. "
    "Transcribe every piece of printed text exactly as it appears, line by line, "
    "keeping labels (FLIGHT, GATE, SEAT, BOARDING, DEPART, ARRIVE) next to their values. "
    "Do not interpret, translate, summarise or reformat. Return plain text only."
)
TRANSCRIBE_PROMPT = "Transcribe this boarding pass."


class GeminiRecognizer(TextRecognizer):
    """Vision-model transcription; slow and metered, so it runs last by default."""

    name = "gemini"

    def __init__(self, api_key: Optional[str] = GOOGLE_API_KEY, model: str = GEMINI_MODEL) -> None:
        self.api_key = api_key
        self.model_name = model
        if api_key:
            genai.configure(api_key=api_key)

    def _content_part(self, buffer: bytes, mime_type: str) -> Any:
        if is_pdf(buffer, mime_type):
            return {"mime_type": "application/pdf", "data": buffer}
        return Image.open(io.BytesIO(buffer))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_not_exception_type(BackendUnavailable),
        reraise=True,
    )
    async def _transcribe(self, buffer: bytes, mime_type: str) -> str:
        model = genai.GenerativeModel(self.model_name, system_instruction=TRANSCRIBE_INSTRUCTION)
        t0 = time.time()
        log_event(logger.logger, "gemini_call_started", model=self.model_name)
        response = await model.generate_content_async(
            [TRANSCRIBE_PROMPT, self._content_part(buffer, mime_type)],
            generation_config=genai.types.GenerationConfig(temperature=0),
        )

        usage = getattr(response, "usage_metadata", None)
        log_event(
            logger.logger,
            "gemini_call_finished",
            model=self.model_name,
            duration_ms=int((time.time() - t0) * 1000),
            tokens_total=usage.total_token_count if usage else 0,
        )
        try:
            return response.text or ""
        except ValueError:
            # blocked or empty candidate: no text accessor
            logger.warning("Gemini returned no text candidate")
            return ""

    async def recognize(self, buffer: bytes, mime_type: str) -> Optional[RecognizedText]:
        if not self.api_key:
            raise BackendUnavailable(self.name, "GOOGLE_API_KEY not set")
        text = (await self._transcribe(buffer, mime_type)).strip()
        if text.startswith("```"):
            text = text.strip("`").strip()
        if not text:
            return None
        return RecognizedText(text=text, backend=self.name, metadata={"model": self.model_name})

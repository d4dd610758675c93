# recognizers/remote.py
# Hosted OCR APIs reached over aiohttp.
from __future__ import annotations

import asyncio
import base64
import random
import time
from typing import Any, Dict, List, Optional

import aiohttp
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import (
    HTTP_TIMEOUT,
    MATHPIX_API_URL,
    MATHPIX_APP_ID,
    MATHPIX_APP_KEY,
    SIMPLETEX_API_KEY,
    SIMPLETEX_API_URL,
)
from ..errors import BackendUnavailable
from ..logging_utils import get_logger
from ..models import RecognizedText, WordConfidence
from .base import TextRecognizer
from .imaging import encode_png, is_pdf, load_pages

logger = get_logger("recognizers.remote")

MAX_429_ATTEMPTS = 3


class HttpRecognizer(TextRecognizer):
    """Base for JSON-returning OCR services.

    Use as an async context manager to share one ``ClientSession`` across
    documents; otherwise each call opens and closes its own session.
    """

    name = "http"
    url: str = ""

    def __init__(self, timeout: float = HTTP_TIMEOUT) -> None:
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HttpRecognizer":
        self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    # subclasses build fresh request kwargs per attempt (FormData is single-use)
    def _request_kwargs(self, payload: bytes, mime_type: str) -> Dict[str, Any]:
        raise NotImplementedError

    def _check_configured(self) -> None:
        pass

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
        reraise=True,
    )
    async def _post(self, session: aiohttp.ClientSession, payload: bytes, mime_type: str) -> Any:
        t0 = time.perf_counter()
        for attempt in range(MAX_429_ATTEMPTS):
            async with session.post(self.url, **self._request_kwargs(payload, mime_type)) as r:
                status = r.status
                logger.info(f"{self.name} POST status={status} took={time.perf_counter() - t0:.2f}s")

                if status == 429:
                    if attempt == MAX_429_ATTEMPTS - 1:
                        raise BackendUnavailable(self.name, "rate limited")
                    ra = r.headers.get("Retry-After")
                    try:
                        wait_time = float(ra) + 0.5 if ra else 2.0 + random.random()
                    except ValueError:
                        wait_time = 2.0
                    logger.warning(f"{self.name} 429 rate limit hit - waiting {wait_time:.1f}s before retry")
                    await asyncio.sleep(wait_time)
                    continue
                if status in (401, 403):
                    raise BackendUnavailable(self.name, f"credentials rejected (HTTP {status})")
                r.raise_for_status()
                return await r.json(content_type=None)
        return None

    async def _call(self, payload: bytes, mime_type: str) -> Any:
        if self._session is not None:
            return await self._post(self._session, payload, mime_type)
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
            return await self._post(session, payload, mime_type)

    def _parse(self, body: Any) -> Optional[RecognizedText]:
        raise NotImplementedError

    async def _prepare(self, buffer: bytes, mime_type: str):
        return buffer, mime_type

    async def recognize(self, buffer: bytes, mime_type: str) -> Optional[RecognizedText]:
        self._check_configured()
        payload, payload_mime = await self._prepare(buffer, mime_type)
        body = await self._call(payload, payload_mime)
        if body is None:
            return None
        return self._parse(body)


class SimpleTexRecognizer(HttpRecognizer):
    """SimpleTex OCR: multipart upload authenticated with a ``token`` header."""

    name = "simpletex"

    def __init__(self, api_key: Optional[str] = SIMPLETEX_API_KEY, url: str = SIMPLETEX_API_URL,
                 timeout: float = HTTP_TIMEOUT) -> None:
        super().__init__(timeout)
        self.api_key = api_key
        self.url = url

    def _check_configured(self) -> None:
        if not self.api_key:
            raise BackendUnavailable(self.name, "SIMPLETEX_API_KEY not set")

    def _request_kwargs(self, payload: bytes, mime_type: str) -> Dict[str, Any]:
        form = aiohttp.FormData()
        form.add_field("file", payload, filename="boarding_pass", content_type=mime_type or "image/jpeg")
        return {"data": form, "headers": {"token": self.api_key}}

    def _parse(self, body: Any) -> Optional[RecognizedText]:
        if not isinstance(body, dict) or body.get("status") not in (True, "success"):
            logger.warning(f"SimpleTex OCR failed: {body.get('error') if isinstance(body, dict) else body!r}")
            return None
        res = body.get("res")
        if isinstance(res, dict):
            res = res.get("content") or res.get("latex") or res.get("text")
        text = (res or "").strip() if isinstance(res, str) else ""
        if not text:
            return None

        words: Optional[List[WordConfidence]] = None
        raw_conf = body.get("confidence")
        if isinstance(raw_conf, list) and raw_conf:
            words = [
                WordConfidence(word=str(c["word"]), confidence=max(0.0, min(float(c["confidence"]), 1.0)))
                for c in raw_conf
                if isinstance(c, dict) and "word" in c and "confidence" in c
            ] or None
        return RecognizedText(text=text, word_confidences=words, backend=self.name,
                              metadata={"request_id": body.get("request_id")})


class MathpixRecognizer(HttpRecognizer):
    """Mathpix ``/v3/text``: base64 data URI in, text plus per-line confidence out."""

    name = "mathpix"

    def __init__(self, app_id: Optional[str] = MATHPIX_APP_ID, app_key: Optional[str] = MATHPIX_APP_KEY,
                 url: str = MATHPIX_API_URL, timeout: float = HTTP_TIMEOUT) -> None:
        super().__init__(timeout)
        self.app_id = app_id
        self.app_key = app_key
        self.url = url

    def _check_configured(self) -> None:
        if not (self.app_id and self.app_key):
            raise BackendUnavailable(self.name, "MATHPIX_APP_ID / MATHPIX_APP_KEY not set")

    async def _prepare(self, buffer: bytes, mime_type: str):
        # /v3/text takes images only; send the first PDF page
        if is_pdf(buffer, mime_type):
            pages = await load_pages(buffer, mime_type)
            if not pages:
                return b"", "image/png"
            return encode_png(pages[0]), "image/png"
        return buffer, mime_type

    def _request_kwargs(self, payload: bytes, mime_type: str) -> Dict[str, Any]:
        src = f"data:{mime_type or 'image/png'};base64,{base64.b64encode(payload).decode('ascii')}"
        return {
            "json": {
                "src": src,
                "formats": ["text", "data"],
                "include_line_data": True,
                "ocr": ["en"],
            },
            "headers": {"app_id": self.app_id, "app_key": self.app_key},
        }

    def _parse(self, body: Any) -> Optional[RecognizedText]:
        if not isinstance(body, dict):
            return None
        if body.get("error"):
            logger.warning(f"Mathpix OCR failed: {body.get('error')}")
            return None

        words: List[WordConfidence] = []
        lines: List[str] = []
        for line in body.get("line_data") or []:
            text = (line.get("text") or "").strip()
            if not text:
                continue
            conf = line.get("confidence", body.get("confidence_rate", 0.7))
            line_no = len(lines)
            lines.append(text)
            for word in text.split():
                words.append(WordConfidence(word=word, confidence=max(0.0, min(float(conf), 1.0)), line=line_no))

        text = (body.get("text") or "\n".join(lines)).strip()
        if not text:
            return None
        return RecognizedText(
            text=text,
            word_confidences=words or None,
            backend=self.name,
            metadata={"confidence_rate": body.get("confidence_rate")},
        )

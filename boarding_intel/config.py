# config.py
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("boardingintel.config")

# OCR backends
GOOGLE_API_KEY: str | None = os.getenv("GOOGLE_API_KEY")
GEMINI_MODEL = os.getenv("BOARDING_INTEL_GEMINI_MODEL", "gemini-2.0-flash")

SIMPLETEX_API_KEY: str | None = os.getenv("SIMPLETEX_API_KEY")
SIMPLETEX_API_URL = os.getenv("SIMPLETEX_API_URL", "https://server.simpletex.net/api/latex_ocr")

MATHPIX_APP_ID: str | None = os.getenv("MATHPIX_APP_ID")
MATHPIX_APP_KEY: str | None = os.getenv("MATHPIX_APP_KEY")
MATHPIX_API_URL = os.getenv("MATHPIX_API_URL", "https://api.mathpix.com/v3/text")

TESSERACT_CONFIG = os.getenv("TESSERACT_CONFIG", "--oem 3 --psm 6")
PDF_DPI = int(os.getenv("PDF_DPI", "300"))

# Priority order, cheapest first
DEFAULT_BACKENDS = [
    b.strip()
    for b in os.getenv("BOARDING_INTEL_BACKENDS", "tesseract,simpletex,mathpix,gemini").split(",")
    if b.strip()
]
PIPELINE_MODE = os.getenv("BOARDING_INTEL_MODE", "strict").lower()

BACKEND_TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "45"))
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "20"))

# Confidence thresholds (tunable; keep the ordering FLOOR < CORRECTION < FILTER)
CONFIDENCE_FLOOR = float(os.getenv("CONFIDENCE_FLOOR", "0.5"))
CORRECTION_CEILING = float(os.getenv("CORRECTION_CEILING", "0.7"))
FILTER_THRESHOLD = float(os.getenv("FILTER_THRESHOLD", "0.75"))
TIME_KEYWORD_LOOKBACK = int(os.getenv("TIME_KEYWORD_LOOKBACK", "20"))

MAX_WORKERS = min(32, (os.cpu_count() or 4) * 2)
thread_pool = ThreadPoolExecutor(max_workers=MAX_WORKERS)

if not (CONFIDENCE_FLOOR < CORRECTION_CEILING < FILTER_THRESHOLD):
    logger.warning(
        "Confidence thresholds out of order: floor=%s correction=%s filter=%s",
        CONFIDENCE_FLOOR,
        CORRECTION_CEILING,
        FILTER_THRESHOLD,
    )

logger.debug(
    f"Config: backends={DEFAULT_BACKENDS}, mode={PIPELINE_MODE}, "
    f"timeout={BACKEND_TIMEOUT}s, workers={MAX_WORKERS}"
)

# recognizers/imaging.py
# Decoding, PDF rasterisation and OCR-oriented preprocessing shared by image backends.
from __future__ import annotations

import asyncio
import functools
from typing import Any, Dict, List, Tuple

import cv2
import numpy as np
from pdf2image import convert_from_bytes

from ..config import MAX_WORKERS, PDF_DPI, thread_pool
from ..logging_utils import get_logger

logger = get_logger("recognizers.imaging")


def is_pdf(buffer: bytes, mime_type: str) -> bool:
    return (mime_type or "").lower() == "application/pdf" or buffer[:5] == b"%PDF-"


def decode_image(buffer: bytes) -> np.ndarray:
    arr = np.frombuffer(buffer, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("Could not decode image buffer")
    return img


def encode_png(img: np.ndarray) -> bytes:
    ok, buf = cv2.imencode(".png", img)
    if not ok:
        raise ValueError("Failed to encode image to PNG")
    return buf.tobytes()


def pdf_to_images(pdf_bytes: bytes, dpi: int = PDF_DPI) -> List[np.ndarray]:
    """Rasterise every page to a BGR array (blocking; run in the thread pool)."""
    pil_pages = convert_from_bytes(
        pdf_bytes,
        dpi=dpi,
        fmt="PNG",
        thread_count=min(4, MAX_WORKERS),
        use_pdftocairo=True,
    )
    pages: List[np.ndarray] = []
    for pil_img in pil_pages:
        arr = np.array(pil_img)
        if arr.ndim == 2:
            pages.append(cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR))
        else:
            pages.append(cv2.cvtColor(arr, cv2.COLOR_RGB2BGR))
    return pages


async def load_pages(buffer: bytes, mime_type: str) -> List[np.ndarray]:
    """Decoded pages of an image or PDF upload; blocking work goes to ``thread_pool``."""
    loop = asyncio.get_running_loop()
    if is_pdf(buffer, mime_type):
        logger.start_timer("pdf_conversion")
        pages = await loop.run_in_executor(thread_pool, functools.partial(pdf_to_images, buffer))
        elapsed = logger.end_timer("pdf_conversion")
        logger.info(f"Converted {len(pages)} PDF pages in {elapsed:.2f}s")
        return pages
    img = await loop.run_in_executor(thread_pool, decode_image, buffer)
    return [img]


def analyze_image(img: np.ndarray) -> Dict[str, Any]:
    gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    sharpness = cv2.Laplacian(gray, cv2.CV_64F).var()
    contrast = gray.std()
    info = {
        "sharpness": sharpness,
        "contrast": contrast,
        "needs_enhancement": sharpness < 100 or contrast < 35,
        "is_very_blurry": sharpness < 50,
        "is_low_contrast": contrast < 25,
    }
    logger.debug(f"Image analysis: sharp={sharpness:.1f}, contrast={contrast:.1f}")
    return info


def create_optimal_versions(img: np.ndarray) -> List[Tuple[np.ndarray, str]]:
    """Original plus enhanced/sharpened/binary variants when the photo needs help."""
    analysis = analyze_image(img)
    versions: List[Tuple[np.ndarray, str]] = [(img, "original")]
    if not analysis["needs_enhancement"]:
        return versions

    gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    clahe = cv2.createCLAHE(clipLimit=3.0, tileGridSize=(8, 8))
    enhanced = clahe.apply(gray)
    versions.append((cv2.cvtColor(enhanced, cv2.COLOR_GRAY2BGR), "enhanced"))

    if analysis["is_very_blurry"]:
        denoised = cv2.fastNlMeansDenoising(enhanced, None, 10, 7, 21)
        kernel = np.array([[-1, -1, -1], [-1, 9, -1], [-1, -1, -1]])
        sharpened = cv2.filter2D(denoised, -1, kernel)
        versions.append((cv2.cvtColor(sharpened, cv2.COLOR_GRAY2BGR), "sharpened"))

    if analysis["is_low_contrast"]:
        _, binary = cv2.threshold(enhanced, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        versions.append((cv2.cvtColor(binary, cv2.COLOR_GRAY2BGR), "binary"))

    return versions

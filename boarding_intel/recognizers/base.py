# recognizers/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..models import RecognizedText


class TextRecognizer(ABC):
    """One OCR backend.

    ``recognize`` returns ``None`` when the backend ran but found nothing
    usable, and raises :class:`~boarding_intel.errors.BackendUnavailable` when
    it cannot run at all (missing key, binary or quota). Anything else it
    raises is treated by the pipeline as "no result" for this backend.
    """

    name: str = "base"
    mime_prefixes: tuple = ("image/", "application/pdf")

    def handles(self, mime_type: str) -> bool:
        mime = (mime_type or "").lower()
        return any(mime.startswith(p) for p in self.mime_prefixes)

    @abstractmethod
    async def recognize(self, buffer: bytes, mime_type: str) -> Optional[RecognizedText]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

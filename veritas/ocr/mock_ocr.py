from __future__ import annotations

from veritas.ocr.base_ocr import OCREngine, OCRExtraction

_SAMPLE_TEXT = (
    "BREAKING: Scientists CONFIRM the city water supply is unsafe!\n"
    "Share immediately with everyone you know before this post is deleted."
)


class MockOCREngine(OCREngine):
    """Returns fixed text; used for development and tests."""

    def __init__(self, text: str = _SAMPLE_TEXT, confidence: float = 0.85, name: str = "Mock OCR") -> None:
        self._text = text
        self._confidence = confidence
        self.name = name

    async def extract_text(self, image_bytes: bytes) -> OCRExtraction:
        return OCRExtraction(text=self._text, confidence=self._confidence)

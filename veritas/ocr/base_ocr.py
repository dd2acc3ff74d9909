from __future__ import annotations

from dataclasses import dataclass

from veritas.core.provenance import Provenance


@dataclass(frozen=True)
class OCRExtraction:
    """Raw answer from a single OCR provider."""

    text: str
    confidence: float  # 0.0 to 1.0


@dataclass(frozen=True)
class OCRResult:
    """Resolved OCR output handed to the analysis facade."""

    extracted_text: str
    provenance: Provenance
    engine: str


class OCREngine:
    name: str = "OCR engine"

    async def extract_text(self, image_bytes: bytes) -> OCRExtraction:
        raise NotImplementedError

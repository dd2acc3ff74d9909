"""Remote-then-local OCR resolution.

The remote engine is tried once under a timeout. Any failure (exception,
timeout or blank text) hands the same bytes to the local engine. The two
engines never run at the same time.
"""
from __future__ import annotations

import asyncio
import logging

from veritas.core.errors import OCRFailure
from veritas.core.provenance import Provenance
from veritas.ocr.base_ocr import OCREngine, OCRResult

logger = logging.getLogger(__name__)


class OCRResolver:
    def __init__(
        self,
        remote: OCREngine | None,
        local: OCREngine | None,
        *,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._remote = remote
        self._local = local
        self._timeout = timeout_seconds

    async def resolve(self, image_bytes: bytes) -> OCRResult:
        if self._remote is not None:
            try:
                extraction = await asyncio.wait_for(
                    self._remote.extract_text(image_bytes), timeout=self._timeout
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "remote_ocr_timeout_fallback",
                    extra={"engine": self._remote.name, "timeout_s": self._timeout},
                )
            except Exception as exc:
                logger.warning(
                    "remote_ocr_failed_fallback",
                    extra={"engine": self._remote.name, "error": str(exc)},
                )
            else:
                if extraction.text.strip():
                    logger.info(
                        "remote_ocr_used",
                        extra={"engine": self._remote.name, "confidence": round(extraction.confidence, 4)},
                    )
                    return OCRResult(
                        extracted_text=extraction.text,
                        provenance=Provenance.REMOTE,
                        engine=self._remote.name,
                    )
                logger.warning("remote_ocr_empty_fallback", extra={"engine": self._remote.name})

        if self._local is None:
            raise OCRFailure("Remote OCR failed and no local OCR engine is configured")

        try:
            extraction = await self._local.extract_text(image_bytes)
        except Exception as exc:
            logger.error(
                "local_ocr_failed",
                extra={"engine": self._local.name, "error": str(exc)},
            )
            raise OCRFailure(f"All OCR engines failed: {exc}") from exc

        if not extraction.text.strip():
            raise OCRFailure("No text found by any OCR engine")

        logger.info(
            "local_ocr_used",
            extra={"engine": self._local.name, "confidence": round(extraction.confidence, 4)},
        )
        return OCRResult(
            extracted_text=extraction.text,
            provenance=Provenance.LOCAL,
            engine=self._local.name,
        )

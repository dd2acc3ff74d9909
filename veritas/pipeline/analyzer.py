"""Analysis facade: orchestrates OCR → sentiment → scoring.

Each stage consumes the previous stage's output, so the stages run strictly
one after another inside a request.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from veritas.core.config import Settings, settings as default_settings
from veritas.core.errors import NoReadableContent, OCRFailure
from veritas.ocr.factory import get_local_ocr_engine, get_remote_ocr_engine
from veritas.ocr.resolver import OCRResolver
from veritas.scoring.scorer import score_text
from veritas.sentiment.factory import get_local_sentiment_engine, get_remote_sentiment_engine
from veritas.sentiment.resolver import SentimentResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    score: float
    tricks: list[str] = field(default_factory=list)


class Analyzer:
    def __init__(self, ocr_resolver: OCRResolver, sentiment_resolver: SentimentResolver) -> None:
        self._ocr = ocr_resolver
        self._sentiment = sentiment_resolver

    async def analyze_text(self, text: str) -> AnalysisReport:
        sentiment = await self._sentiment.resolve(text)
        result = score_text(text, sentiment)

        logger.info(
            "text_analyzed",
            extra={
                "score": result.score,
                "tricks": len(result.tricks),
                "sentiment_provenance": sentiment.provenance.value if sentiment.provenance else None,
            },
        )
        return AnalysisReport(score=result.score, tricks=list(result.tricks))

    async def analyze_image(self, image_bytes: bytes) -> AnalysisReport:
        try:
            ocr_result = await self._ocr.resolve(image_bytes)
        except OCRFailure as exc:
            raise NoReadableContent("No text could be read from the image.") from exc

        if not ocr_result.extracted_text.strip():
            raise NoReadableContent("No text could be read from the image.")

        logger.info(
            "ocr_resolved",
            extra={"provenance": ocr_result.provenance.value, "chars": len(ocr_result.extracted_text)},
        )

        report = await self.analyze_text(ocr_result.extracted_text)
        return AnalysisReport(
            score=report.score,
            tricks=[*report.tricks, f"**Vision Engine:** Extracted text via {ocr_result.engine}"],
        )


def build_analyzer(settings: Settings = default_settings) -> Analyzer:
    """Wire the configured providers into resolvers and return the facade."""
    ocr_resolver = OCRResolver(
        get_remote_ocr_engine(settings),
        get_local_ocr_engine(settings),
        timeout_seconds=settings.remote_timeout_seconds,
    )
    sentiment_resolver = SentimentResolver(
        get_remote_sentiment_engine(settings),
        get_local_sentiment_engine(settings),
        timeout_seconds=settings.remote_timeout_seconds,
    )
    return Analyzer(ocr_resolver, sentiment_resolver)

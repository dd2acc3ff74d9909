"""Remote-then-local sentiment resolution with output normalization.

The remote provider reports a signed score and an unbounded magnitude. The
local classifier reports a label with a confidence. Both are mapped onto
:class:`SentimentResult` so the scorer never sees provider-specific shapes.
"""
from __future__ import annotations

import asyncio
import logging

from veritas.core.provenance import Provenance
from veritas.sentiment.base import (
    DocumentSentiment,
    LocalSentimentEngine,
    RemoteSentimentEngine,
    SentimentPrediction,
    SentimentResult,
)

logger = logging.getLogger(__name__)

# Local confidence (0..1) is scaled onto the remote magnitude range, where
# ~1.0 and above reads as unusually emotional for news-like text.
LOCAL_MAGNITUDE_SCALE = 2.0


def normalize_remote(sentiment: DocumentSentiment, engine: str) -> SentimentResult:
    return SentimentResult(
        polarity=max(-1.0, min(1.0, sentiment.score)),
        magnitude=max(0.0, sentiment.magnitude),
        provenance=Provenance.REMOTE,
        engine=engine,
    )


def normalize_local(prediction: SentimentPrediction, engine: str) -> SentimentResult:
    confidence = max(0.0, min(1.0, prediction.confidence))
    label = prediction.label.upper()

    if label == "POSITIVE":
        polarity = confidence
    elif label == "NEGATIVE":
        polarity = -confidence
    else:
        polarity = 0.0

    return SentimentResult(
        polarity=polarity,
        magnitude=confidence * LOCAL_MAGNITUDE_SCALE,
        provenance=Provenance.LOCAL,
        engine=f"{engine} ({label} {confidence * 100:.1f}%)",
        label=label,
    )


class SentimentResolver:
    def __init__(
        self,
        remote: RemoteSentimentEngine | None,
        local: LocalSentimentEngine | None,
        *,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._remote = remote
        self._local = local
        self._timeout = timeout_seconds

    async def resolve(self, text: str) -> SentimentResult:
        """Never raises; returns ``SentimentResult.unavailable()`` when every engine fails."""
        if self._remote is not None:
            try:
                sentiment = await asyncio.wait_for(self._remote.analyze(text), timeout=self._timeout)
                return normalize_remote(sentiment, self._remote.name)
            except asyncio.TimeoutError:
                logger.warning(
                    "remote_sentiment_timeout_fallback",
                    extra={"engine": self._remote.name, "timeout_s": self._timeout},
                )
            except Exception as exc:
                logger.warning(
                    "remote_sentiment_failed_fallback",
                    extra={"engine": self._remote.name, "error": str(exc)},
                )

        if self._local is None:
            logger.error("sentiment_unavailable", extra={"reason": "no local engine configured"})
            return SentimentResult.unavailable()

        try:
            prediction = await self._local.classify(text)
        except Exception:
            logger.exception("sentiment_unavailable", extra={"engine": self._local.name})
            return SentimentResult.unavailable()

        return normalize_local(prediction, self._local.name)

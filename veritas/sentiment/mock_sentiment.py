from __future__ import annotations

from veritas.sentiment.base import (
    DocumentSentiment,
    LocalSentimentEngine,
    RemoteSentimentEngine,
    SentimentPrediction,
)


class MockRemoteSentimentEngine(RemoteSentimentEngine):
    """Returns a fixed document sentiment; used for development and tests."""

    name = "Mock Natural Language API"

    def __init__(self, score: float = 0.0, magnitude: float = 0.1) -> None:
        self._score = score
        self._magnitude = magnitude

    async def analyze(self, text: str) -> DocumentSentiment:
        return DocumentSentiment(score=self._score, magnitude=self._magnitude)


class MockLocalSentimentEngine(LocalSentimentEngine):
    name = "Mock Local Classifier"

    def __init__(self, label: str = "POSITIVE", confidence: float = 0.55) -> None:
        self._label = label
        self._confidence = confidence

    async def classify(self, text: str) -> SentimentPrediction:
        return SentimentPrediction(label=self._label, confidence=self._confidence)

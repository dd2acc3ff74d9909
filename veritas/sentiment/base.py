from __future__ import annotations

from dataclasses import dataclass

from veritas.core.provenance import Provenance


@dataclass(frozen=True)
class DocumentSentiment:
    """Remote provider answer: signed score plus unsigned magnitude."""

    score: float      # -1.0 to 1.0
    magnitude: float  # 0.0 and up


@dataclass(frozen=True)
class SentimentPrediction:
    """Local classifier answer: a label with its confidence."""

    label: str
    confidence: float  # 0.0 to 1.0


@dataclass(frozen=True)
class SentimentResult:
    """Provider-independent sentiment handed to the scorer.

    ``provenance`` is None only for the neutral placeholder returned when
    every engine failed.
    """

    polarity: float
    magnitude: float
    provenance: Provenance | None
    engine: str
    label: str | None = None

    @property
    def available(self) -> bool:
        return self.provenance is not None

    @classmethod
    def unavailable(cls) -> SentimentResult:
        return cls(polarity=0.0, magnitude=0.0, provenance=None, engine="Unknown")


class RemoteSentimentEngine:
    name: str = "Remote sentiment engine"

    async def analyze(self, text: str) -> DocumentSentiment:
        raise NotImplementedError


class LocalSentimentEngine:
    name: str = "Local sentiment engine"

    async def classify(self, text: str) -> SentimentPrediction:
        raise NotImplementedError

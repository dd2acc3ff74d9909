"""Credibility scoring.

Starts from a ceiling of 10.0 and applies independent deductions:

    Excessive capitalization   -1.5   (more than 2 distinct ALL-CAPS words, 3+ letters)
    False urgency              -2.0   (any urgency phrase, counted once)
    Emotional charge           -min(magnitude * 0.5, 4.0)   when magnitude > 0.5
    Extreme bias               -1.0   when |polarity| > 0.8

The result is clamped to [0, 10] and rounded half-up to one decimal.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from veritas.sentiment.base import SentimentResult

MAX_SCORE = 10.0
MIN_SCORE = 0.0

CAPS_PATTERN = re.compile(r"\b[A-Z]{3,}\b")
CAPS_WORD_LIMIT = 2
CAPS_PENALTY = 1.5

URGENCY_PHRASES: tuple[str, ...] = (
    "share immediately",
    "forward this",
    "delete soon",
    "act now",
    "urgent",
)
URGENCY_PENALTY = 2.0

EMOTION_MAGNITUDE_THRESHOLD = 0.5
EMOTION_SCALE = 0.5
EMOTION_PENALTY_CAP = 4.0
EMOTION_EXPLAIN_ABOVE = 1.0

BIAS_THRESHOLD = 0.8
BIAS_PENALTY = 1.0


@dataclass(frozen=True)
class ScoreResult:
    score: float
    tricks: list[str] = field(default_factory=list)


def _round_tenths(value: float) -> float:
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def has_excessive_caps(text: str) -> bool:
    return len(set(CAPS_PATTERN.findall(text))) > CAPS_WORD_LIMIT


def has_false_urgency(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in URGENCY_PHRASES)


def score_text(text: str, sentiment: SentimentResult) -> ScoreResult:
    score = MAX_SCORE
    tricks: list[str] = []

    if has_excessive_caps(text):
        score -= CAPS_PENALTY
        tricks.append("**Excessive Capitalization:** Uses wildly capitalized words to grab attention.")

    if has_false_urgency(text):
        score -= URGENCY_PENALTY
        tricks.append("**False Urgency:** Demands immediate action to bypass critical thinking.")

    if not sentiment.available:
        tricks.append("AI analysis skipped (All engines failed).")
    else:
        if sentiment.magnitude > EMOTION_MAGNITUDE_THRESHOLD:
            penalty = min(sentiment.magnitude * EMOTION_SCALE, EMOTION_PENALTY_CAP)
            score -= penalty
            if penalty > EMOTION_EXPLAIN_ABOVE:
                tricks.append(
                    f"**High Emotional Charge:** Detected an emotional magnitude of "
                    f"{sentiment.magnitude:.1f}. Neutral news is usually below 1.0."
                )

        if abs(sentiment.polarity) > BIAS_THRESHOLD:
            score -= BIAS_PENALTY
            tricks.append(
                f"**Extreme Bias:** The language is heavily skewed (Score: {sentiment.polarity:.2f})."
            )

    score = _round_tenths(max(MIN_SCORE, min(MAX_SCORE, score)))
    tricks.append(f"**Analysis Engine:** Executed via {sentiment.engine}")

    return ScoreResult(score=score, tricks=tricks)

"""Sentiment resolver, normalization and lazy model loading tests."""
from __future__ import annotations

import asyncio
import sys
import threading
import time
import types
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from veritas.core.config import Settings
from veritas.core.errors import ProviderUnavailable
from veritas.core.provenance import Provenance
from veritas.sentiment.base import (
    DocumentSentiment,
    LocalSentimentEngine,
    RemoteSentimentEngine,
    SentimentPrediction,
    SentimentResult,
)
from veritas.sentiment.engines import (
    GoogleLanguageSentimentEngine,
    TransformersSentimentEngine,
    build_pipeline_loader,
)
from veritas.sentiment.model import LazyModel
from veritas.sentiment.resolver import SentimentResolver, normalize_local, normalize_remote


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _remote(*, result: DocumentSentiment | None = None, error: Exception | None = None) -> AsyncMock:
    engine = AsyncMock(spec=RemoteSentimentEngine)
    engine.name = "Remote NLP"
    engine.analyze = AsyncMock(side_effect=error, return_value=result)
    return engine


def _local(*, result: SentimentPrediction | None = None, error: Exception | None = None) -> AsyncMock:
    engine = AsyncMock(spec=LocalSentimentEngine)
    engine.name = "Local Net"
    engine.classify = AsyncMock(side_effect=error, return_value=result)
    return engine


class _CountingLoader:
    def __init__(self, delay: float = 0.05) -> None:
        self.calls = 0
        self._delay = delay
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
        time.sleep(self._delay)

        def pipe(text, truncation=True):
            return [{"label": "NEGATIVE", "score": 0.9}]

        return pipe


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def test_normalize_local_positive() -> None:
    result = normalize_local(SentimentPrediction(label="POSITIVE", confidence=0.9), "Local Net")
    assert result.polarity == pytest.approx(0.9)
    assert result.magnitude == pytest.approx(1.8)
    assert result.provenance is Provenance.LOCAL
    assert result.label == "POSITIVE"
    assert result.engine == "Local Net (POSITIVE 90.0%)"


def test_normalize_local_negative() -> None:
    result = normalize_local(SentimentPrediction(label="negative", confidence=0.75), "Local Net")
    assert result.polarity == pytest.approx(-0.75)
    assert result.magnitude == pytest.approx(1.5)


def test_normalize_local_unknown_label_is_neutral() -> None:
    result = normalize_local(SentimentPrediction(label="LABEL_2", confidence=0.6), "Local Net")
    assert result.polarity == 0.0
    assert result.magnitude == pytest.approx(1.2)


def test_normalize_remote_bounds_values() -> None:
    result = normalize_remote(DocumentSentiment(score=1.3, magnitude=-0.2), "Remote NLP")
    assert result.polarity == 1.0
    assert result.magnitude == 0.0
    assert result.provenance is Provenance.REMOTE


# ---------------------------------------------------------------------------
# SentimentResolver
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_resolver_uses_remote_when_available() -> None:
    remote = _remote(result=DocumentSentiment(score=-0.4, magnitude=2.2))
    local = _local(result=SentimentPrediction(label="POSITIVE", confidence=0.99))

    result = await SentimentResolver(remote, local).resolve("text")

    assert result.polarity == pytest.approx(-0.4)
    assert result.magnitude == pytest.approx(2.2)
    assert result.provenance is Provenance.REMOTE
    assert result.engine == "Remote NLP"
    local.classify.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolver_falls_back_to_local_once() -> None:
    remote = _remote(error=RuntimeError("permission denied"))
    local = _local(result=SentimentPrediction(label="NEGATIVE", confidence=0.8))

    result = await SentimentResolver(remote, local).resolve("text")

    local.classify.assert_awaited_once_with("text")
    assert result.provenance is Provenance.LOCAL
    assert -1.0 <= result.polarity <= 1.0
    assert result.magnitude >= 0.0
    assert result.polarity == pytest.approx(-0.8)


@pytest.mark.asyncio
async def test_resolver_falls_back_on_timeout() -> None:
    class _Slow(RemoteSentimentEngine):
        name = "Slow NLP"

        async def analyze(self, text: str) -> DocumentSentiment:
            await asyncio.sleep(5)
            return DocumentSentiment(score=0.0, magnitude=0.0)

    local = _local(result=SentimentPrediction(label="POSITIVE", confidence=0.5))

    result = await SentimentResolver(_Slow(), local, timeout_seconds=0.05).resolve("text")

    assert result.provenance is Provenance.LOCAL


@pytest.mark.asyncio
async def test_resolver_returns_placeholder_when_all_fail() -> None:
    remote = _remote(error=RuntimeError("network down"))
    local = _local(error=RuntimeError("model missing"))

    result = await SentimentResolver(remote, local).resolve("text")

    assert result == SentimentResult.unavailable()
    assert result.available is False


@pytest.mark.asyncio
async def test_resolver_without_engines_returns_placeholder() -> None:
    result = await SentimentResolver(None, None).resolve("text")
    assert result.provenance is None


# ---------------------------------------------------------------------------
# LazyModel / TransformersSentimentEngine
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_lazy_model_loads_once_under_concurrency() -> None:
    loader = _CountingLoader()
    model = LazyModel(loader, name="fake")

    handles = await asyncio.gather(*(model.get() for _ in range(10)))

    assert loader.calls == 1
    assert all(h is handles[0] for h in handles)
    assert model.loaded is True


@pytest.mark.asyncio
async def test_lazy_model_retries_after_failed_load() -> None:
    attempts = {"n": 0}

    def flaky_loader():
        attempts["n"] += 1
        if attempts["n"] == 1:
            raise OSError("hub unreachable")
        return "model"

    model = LazyModel(flaky_loader)

    with pytest.raises(OSError):
        await model.get()
    assert model.loaded is False

    assert await model.get() == "model"


@pytest.mark.asyncio
async def test_lazy_model_failed_load_is_shared_by_concurrent_callers() -> None:
    calls = {"n": 0}

    def failing_loader():
        calls["n"] += 1
        time.sleep(0.05)
        raise OSError("hub unreachable")

    model = LazyModel(failing_loader, name="fake")

    results = await asyncio.gather(*(model.get() for _ in range(8)), return_exceptions=True)

    assert calls["n"] == 1
    assert all(isinstance(r, OSError) for r in results)
    assert all(r is results[0] for r in results)

    # A later request starts a fresh load
    with pytest.raises(OSError):
        await model.get()
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_lazy_model_load_survives_cancelled_caller() -> None:
    loader = _CountingLoader(delay=0.1)
    model = LazyModel(loader, name="fake")

    first = asyncio.ensure_future(model.get())
    await asyncio.sleep(0.01)
    first.cancel()

    handle = await model.get()

    assert callable(handle)
    assert loader.calls == 1


@pytest.mark.asyncio
async def test_concurrent_local_fallbacks_share_one_model_load() -> None:
    loader = _CountingLoader()
    engine = TransformersSentimentEngine(LazyModel(loader, name="fake"))
    resolver = SentimentResolver(_remote(error=RuntimeError("down")), engine)

    results = await asyncio.gather(*(resolver.resolve(f"text {i}") for i in range(8)))

    assert loader.calls == 1
    assert all(r.provenance is Provenance.LOCAL for r in results)
    assert all(r.polarity == pytest.approx(-0.9) for r in results)
    assert all(r.magnitude == pytest.approx(1.8) for r in results)


# ---------------------------------------------------------------------------
# Sentiment Factory
# ---------------------------------------------------------------------------

def test_sentiment_factory_builds_configured_engines() -> None:
    from veritas.sentiment.factory import get_local_sentiment_engine, get_remote_sentiment_engine

    settings = Settings(remote_sentiment_provider="google_language", local_sentiment_provider="transformers")
    assert isinstance(get_remote_sentiment_engine(settings), GoogleLanguageSentimentEngine)
    assert isinstance(get_local_sentiment_engine(settings), TransformersSentimentEngine)


def test_sentiment_factory_raises_on_unknown_provider() -> None:
    from veritas.sentiment.factory import get_local_sentiment_engine

    with pytest.raises(ValueError, match="Unknown LOCAL_SENTIMENT_PROVIDER"):
        get_local_sentiment_engine(Settings(local_sentiment_provider="bogus"))


# ---------------------------------------------------------------------------
# GoogleLanguageSentimentEngine (client stubbed)
# ---------------------------------------------------------------------------

class _FakeSentimentResponse:
    def __init__(self, sentiment: SimpleNamespace | None) -> None:
        self._sentiment = sentiment

    def __contains__(self, field_name: str) -> bool:
        return field_name == "document_sentiment" and self._sentiment is not None

    @property
    def document_sentiment(self) -> SimpleNamespace:
        return self._sentiment or SimpleNamespace(score=0.0, magnitude=0.0)


@pytest.mark.asyncio
async def test_google_language_returns_document_sentiment_with_deadline() -> None:
    engine = GoogleLanguageSentimentEngine(timeout_seconds=2.5)
    engine._client = MagicMock()
    engine._client.analyze_sentiment.return_value = _FakeSentimentResponse(
        SimpleNamespace(score=-0.6, magnitude=3.2)
    )

    result = await engine.analyze("Outrageous!")

    assert result == DocumentSentiment(score=-0.6, magnitude=3.2)
    kwargs = engine._client.analyze_sentiment.call_args.kwargs
    assert kwargs["timeout"] == 2.5
    assert kwargs["retry"] is None
    assert kwargs["request"]["document"]["content"] == "Outrageous!"


@pytest.mark.asyncio
async def test_google_language_missing_sentiment_is_provider_error() -> None:
    engine = GoogleLanguageSentimentEngine()
    engine._client = MagicMock()
    engine._client.analyze_sentiment.return_value = _FakeSentimentResponse(None)

    with pytest.raises(ProviderUnavailable):
        await engine.analyze("text")


def test_sentiment_factory_passes_remote_timeout() -> None:
    from veritas.sentiment.factory import get_remote_sentiment_engine

    engine = get_remote_sentiment_engine(
        Settings(remote_sentiment_provider="google_language", remote_timeout_seconds=3.0)
    )
    assert engine._timeout == 3.0


# ---------------------------------------------------------------------------
# build_pipeline_loader retry policy
# ---------------------------------------------------------------------------

def _fake_transformers(pipeline: MagicMock) -> types.ModuleType:
    module = types.ModuleType("transformers")
    module.pipeline = pipeline
    return module


def test_pipeline_loader_retries_os_errors() -> None:
    pipeline = MagicMock(side_effect=[OSError("hub timeout"), OSError("hub timeout"), "pipe"])

    with patch.dict(sys.modules, {"transformers": _fake_transformers(pipeline)}):
        loader = build_pipeline_loader("some-model", attempts=3, backoff_seconds=0)
        assert loader() == "pipe"

    assert pipeline.call_count == 3
    pipeline.assert_called_with("sentiment-analysis", model="some-model")


def test_pipeline_loader_gives_up_after_configured_attempts() -> None:
    pipeline = MagicMock(side_effect=OSError("hub down"))

    with patch.dict(sys.modules, {"transformers": _fake_transformers(pipeline)}):
        loader = build_pipeline_loader("some-model", attempts=2, backoff_seconds=0)
        with pytest.raises(OSError):
            loader()

    assert pipeline.call_count == 2


def test_pipeline_loader_does_not_retry_other_errors() -> None:
    pipeline = MagicMock(side_effect=ValueError("unknown task"))

    with patch.dict(sys.modules, {"transformers": _fake_transformers(pipeline)}):
        loader = build_pipeline_loader("some-model", attempts=3, backoff_seconds=0)
        with pytest.raises(ValueError):
            loader()

    assert pipeline.call_count == 1

"""Remote (Google Cloud Natural Language) and local (transformers) sentiment adapters."""
from __future__ import annotations

import asyncio
import logging

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from veritas.core.errors import ProviderUnavailable
from veritas.sentiment.base import (
    DocumentSentiment,
    LocalSentimentEngine,
    RemoteSentimentEngine,
    SentimentPrediction,
)
from veritas.sentiment.model import LazyModel

logger = logging.getLogger(__name__)

# language_v1.Document.Type.PLAIN_TEXT
_PLAIN_TEXT = 1


# ---------------------------------------------------------------------------
# GoogleLanguageSentimentEngine: Cloud Natural Language
# ---------------------------------------------------------------------------

class GoogleLanguageSentimentEngine(RemoteSentimentEngine):
    """Document sentiment from Google Cloud Natural Language ``analyzeSentiment``.

    Install dependency:
        pip install google-cloud-language

    Config (via .env):
        REMOTE_SENTIMENT_PROVIDER=google_language
        GOOGLE_CREDENTIALS_FILE=credentials.json   # optional
    """

    name = "Cloud Natural Language API"

    def __init__(self, credentials_file: str | None = None, timeout_seconds: float = 10.0) -> None:
        self._credentials_file = credentials_file
        self._timeout = timeout_seconds
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                from google.cloud import language_v1  # type: ignore[import]
            except ModuleNotFoundError as exc:
                raise RuntimeError(
                    "google-cloud-language is not installed. Run: pip install google-cloud-language"
                ) from exc
            if self._credentials_file:
                self._client = language_v1.LanguageServiceClient.from_service_account_file(
                    self._credentials_file
                )
            else:
                self._client = language_v1.LanguageServiceClient()
        return self._client

    async def analyze(self, text: str) -> DocumentSentiment:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._analyze_sentiment, text)

    def _analyze_sentiment(self, text: str) -> DocumentSentiment:
        response = self._get_client().analyze_sentiment(
            request={"document": {"content": text, "type_": _PLAIN_TEXT}},
            retry=None,
            timeout=self._timeout,
        )
        # proto-plus returns an empty message for unset fields, never None
        if "document_sentiment" not in response:
            raise ProviderUnavailable("Natural Language API returned no document sentiment")
        sentiment = response.document_sentiment

        logger.info(
            "cloud_sentiment_complete",
            extra={"score": sentiment.score, "magnitude": sentiment.magnitude},
        )
        return DocumentSentiment(score=float(sentiment.score), magnitude=float(sentiment.magnitude))


# ---------------------------------------------------------------------------
# TransformersSentimentEngine: local DistilBERT (or any text-classification model)
# ---------------------------------------------------------------------------

def build_pipeline_loader(model_name: str, *, attempts: int = 3, backoff_seconds: float = 1.0):
    """Return a blocking loader for a ``transformers`` sentiment pipeline.

    The first load downloads weights from the Hugging Face hub, so transient
    network errors (OSError) are retried with exponential backoff.
    """

    @retry(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=backoff_seconds, min=backoff_seconds, max=10),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _load():
        try:
            from transformers import pipeline  # type: ignore[import]
        except ModuleNotFoundError as exc:
            raise RuntimeError(
                "transformers is not installed. Run: pip install transformers torch"
            ) from exc
        return pipeline("sentiment-analysis", model=model_name)

    return _load


class TransformersSentimentEngine(LocalSentimentEngine):
    """Local sentiment classifier backed by a ``transformers`` pipeline.

    The pipeline comes from a shared :class:`LazyModel`, so the weights are
    loaded once per process no matter how many requests arrive first.

    Config (via .env):
        LOCAL_SENTIMENT_PROVIDER=transformers
        SENTIMENT_MODEL=distilbert-base-uncased-finetuned-sst-2-english
    """

    name = "Local Neural Network"

    def __init__(self, model: LazyModel) -> None:
        self._model = model

    async def classify(self, text: str) -> SentimentPrediction:
        pipe = await self._model.get()
        loop = asyncio.get_running_loop()
        outputs = await loop.run_in_executor(None, lambda: pipe(text, truncation=True))
        # [{"label": "POSITIVE" | "NEGATIVE", "score": 0.99}]
        top = outputs[0]
        return SentimentPrediction(label=str(top["label"]), confidence=float(top["score"]))

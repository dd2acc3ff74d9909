from __future__ import annotations

from veritas.core.config import Settings, settings as default_settings
from veritas.sentiment.base import LocalSentimentEngine, RemoteSentimentEngine
from veritas.sentiment.mock_sentiment import MockLocalSentimentEngine, MockRemoteSentimentEngine


def get_remote_sentiment_engine(settings: Settings = default_settings) -> RemoteSentimentEngine | None:
    """Return the configured remote sentiment engine, or None when disabled.

    REMOTE_SENTIMENT_PROVIDER options:
        google_language: GoogleLanguageSentimentEngine (pip install google-cloud-language)
        mock: fixed neutral sentiment
        none: always use the local engine
    """
    provider = settings.remote_sentiment_provider.lower().strip()

    if provider == "none":
        return None

    if provider == "mock":
        return MockRemoteSentimentEngine()

    if provider == "google_language":
        from veritas.sentiment.engines import GoogleLanguageSentimentEngine
        return GoogleLanguageSentimentEngine(
            credentials_file=settings.google_credentials_file,
            timeout_seconds=settings.remote_timeout_seconds,
        )

    raise ValueError(f"Unknown REMOTE_SENTIMENT_PROVIDER={settings.remote_sentiment_provider!r}")


def get_local_sentiment_engine(settings: Settings = default_settings) -> LocalSentimentEngine | None:
    """Return the configured local sentiment engine, or None when disabled.

    LOCAL_SENTIMENT_PROVIDER options:
        transformers: TransformersSentimentEngine (pip install transformers torch)
        mock: fixed label/confidence
        none: no fallback
    """
    provider = settings.local_sentiment_provider.lower().strip()

    if provider == "none":
        return None

    if provider == "mock":
        return MockLocalSentimentEngine()

    if provider == "transformers":
        from veritas.sentiment.engines import TransformersSentimentEngine, build_pipeline_loader
        from veritas.sentiment.model import LazyModel

        model = LazyModel(
            build_pipeline_loader(settings.sentiment_model, attempts=settings.model_load_attempts),
            name=settings.sentiment_model,
        )
        return TransformersSentimentEngine(model)

    raise ValueError(f"Unknown LOCAL_SENTIMENT_PROVIDER={settings.local_sentiment_provider!r}")

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    # Allowed browser origin for the web client
    client_url: str = "http://localhost:3000"

    # Request limits
    max_message_length: int = 5000
    max_image_bytes: int = 5 * 1024 * 1024

    # Remote provider calls are abandoned (and the local fallback used) after this
    remote_timeout_seconds: float = 10.0

    # OCR providers
    #   remote: google_vision | aws_textract | mock | none
    #   local:  paddleocr | mock | none
    remote_ocr_provider: str = "google_vision"
    local_ocr_provider: str = "paddleocr"
    paddle_lang: str = "en"
    paddle_use_gpu: bool = False

    # Sentiment providers
    #   remote: google_language | mock | none
    #   local:  transformers | mock | none
    remote_sentiment_provider: str = "google_language"
    local_sentiment_provider: str = "transformers"
    sentiment_model: str = "distilbert-base-uncased-finetuned-sst-2-english"
    model_load_attempts: int = 3

    # Google Cloud (falls back to GOOGLE_APPLICATION_CREDENTIALS when unset)
    google_credentials_file: str | None = None

    # AWS Textract (only needed when remote_ocr_provider=aws_textract)
    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None


settings = Settings()

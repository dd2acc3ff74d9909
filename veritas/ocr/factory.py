from __future__ import annotations

from veritas.core.config import Settings, settings as default_settings
from veritas.ocr.base_ocr import OCREngine
from veritas.ocr.mock_ocr import MockOCREngine


def get_remote_ocr_engine(settings: Settings = default_settings) -> OCREngine | None:
    """Return the configured remote OCR engine, or None when disabled.

    REMOTE_OCR_PROVIDER options:
        google_vision: GoogleVisionOCREngine (pip install google-cloud-vision)
        aws_textract: CloudOCREngine (pip install boto3 + AWS credentials)
        mock: fixed text (dev/test, no deps required)
        none: skip straight to the local engine
    """
    provider = settings.remote_ocr_provider.lower().strip()

    if provider == "none":
        return None

    if provider == "mock":
        return MockOCREngine(name="Mock Remote OCR")

    if provider == "google_vision":
        from veritas.ocr.engines import GoogleVisionOCREngine
        return GoogleVisionOCREngine(
            credentials_file=settings.google_credentials_file,
            timeout_seconds=settings.remote_timeout_seconds,
        )

    if provider == "aws_textract":
        from veritas.ocr.engines import CloudOCREngine
        return CloudOCREngine(
            region=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            timeout_seconds=settings.remote_timeout_seconds,
        )

    raise ValueError(f"Unknown REMOTE_OCR_PROVIDER={settings.remote_ocr_provider!r}")


def get_local_ocr_engine(settings: Settings = default_settings) -> OCREngine | None:
    """Return the configured local OCR engine, or None when disabled.

    LOCAL_OCR_PROVIDER options:
        paddleocr: LocalOCREngine (pip install paddlepaddle paddleocr)
        mock: fixed text
        none: no fallback
    """
    provider = settings.local_ocr_provider.lower().strip()

    if provider == "none":
        return None

    if provider == "mock":
        return MockOCREngine(name="Mock Local OCR")

    if provider == "paddleocr":
        from veritas.ocr.engines import LocalOCREngine
        return LocalOCREngine(lang=settings.paddle_lang, use_gpu=settings.paddle_use_gpu)

    raise ValueError(f"Unknown LOCAL_OCR_PROVIDER={settings.local_ocr_provider!r}")

"""Remote OCR adapters (Google Cloud Vision, AWS Textract) and the local PaddleOCR adapter."""
from __future__ import annotations

import asyncio
import io
import logging
import threading

from veritas.core.errors import ProviderUnavailable
from veritas.ocr.base_ocr import OCREngine, OCRExtraction

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# GoogleVisionOCREngine: Cloud Vision text detection
# ---------------------------------------------------------------------------

class GoogleVisionOCREngine(OCREngine):
    """OCR engine backed by Google Cloud Vision ``text_detection``.

    Install dependency:
        pip install google-cloud-vision

    Config (via .env):
        REMOTE_OCR_PROVIDER=google_vision
        GOOGLE_CREDENTIALS_FILE=credentials.json   # optional; otherwise
                                                   # GOOGLE_APPLICATION_CREDENTIALS
    """

    name = "Cloud Vision API (v1)"

    def __init__(self, credentials_file: str | None = None, timeout_seconds: float = 10.0) -> None:
        self._credentials_file = credentials_file
        self._timeout = timeout_seconds
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                from google.cloud import vision  # type: ignore[import]
            except ModuleNotFoundError as exc:
                raise RuntimeError(
                    "google-cloud-vision is not installed. Run: pip install google-cloud-vision"
                ) from exc
            if self._credentials_file:
                self._client = vision.ImageAnnotatorClient.from_service_account_file(
                    self._credentials_file
                )
            else:
                self._client = vision.ImageAnnotatorClient()
        return self._client

    async def extract_text(self, image_bytes: bytes) -> OCRExtraction:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._detect_text, image_bytes)

    def _detect_text(self, image_bytes: bytes) -> OCRExtraction:
        # The deadline bounds the worker thread too; retry=None keeps it to one attempt.
        response = self._get_client().text_detection(
            image={"content": image_bytes},
            retry=None,
            timeout=self._timeout,
        )
        if response.error.message:
            raise ProviderUnavailable(f"Cloud Vision error: {response.error.message}")

        annotation = response.full_text_annotation
        text = annotation.text if annotation else ""
        if not text.strip():
            raise ProviderUnavailable("No text found by Cloud Vision")

        confidences = [float(page.confidence) for page in annotation.pages if page.confidence]
        avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0

        logger.info(
            "cloud_vision_complete",
            extra={"chars": len(text), "avg_confidence": round(avg_confidence, 4)},
        )
        return OCRExtraction(text=text, confidence=avg_confidence)


# ---------------------------------------------------------------------------
# CloudOCREngine: AWS Textract
# ---------------------------------------------------------------------------

class CloudOCREngine(OCREngine):
    """OCR engine backed by AWS Textract ``DetectDocumentText``.

    Config (via .env):
        REMOTE_OCR_PROVIDER=aws_textract
        AWS_REGION=us-east-1
        AWS_ACCESS_KEY_ID=...      (or use IAM role)
        AWS_SECRET_ACCESS_KEY=...

    Install dependency:
        pip install boto3
    """

    name = "AWS Textract"

    def __init__(
        self,
        region: str = "us-east-1",
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._region = region
        self._access_key = aws_access_key_id
        self._secret_key = aws_secret_access_key
        self._timeout = timeout_seconds
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                import boto3  # type: ignore[import]
                from botocore.config import Config  # type: ignore[import]
            except ModuleNotFoundError as exc:
                raise RuntimeError(
                    "boto3 is not installed. Run: pip install boto3"
                ) from exc
            kwargs: dict = {
                "region_name": self._region,
                # Socket timeouts free the worker thread; one attempt per call.
                "config": Config(
                    connect_timeout=self._timeout,
                    read_timeout=self._timeout,
                    retries={"mode": "standard", "total_max_attempts": 1},
                ),
            }
            if self._access_key:
                kwargs["aws_access_key_id"] = self._access_key
                kwargs["aws_secret_access_key"] = self._secret_key
            self._client = boto3.client("textract", **kwargs)
        return self._client

    async def extract_text(self, image_bytes: bytes) -> OCRExtraction:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._call_textract, image_bytes)

    def _call_textract(self, image_bytes: bytes) -> OCRExtraction:
        client = self._get_client()
        response = client.detect_document_text(Document={"Bytes": image_bytes})

        lines: list[str] = []
        confidences: list[float] = []

        for block in response.get("Blocks", []):
            if block["BlockType"] == "LINE":
                lines.append(block.get("Text", ""))
                confidences.append(float(block.get("Confidence", 0)) / 100.0)

        if not lines:
            raise ProviderUnavailable("No text found by Textract")

        full_text = "\n".join(lines)
        avg_confidence = sum(confidences) / len(confidences)

        logger.info(
            "textract_complete",
            extra={"lines": len(lines), "avg_confidence": round(avg_confidence, 4)},
        )
        return OCRExtraction(text=full_text, confidence=avg_confidence)


# ---------------------------------------------------------------------------
# LocalOCREngine: PaddleOCR
# ---------------------------------------------------------------------------

class LocalOCREngine(OCREngine):
    """OCR engine backed by PaddleOCR (runs 100% locally, no cloud calls).

    Install dependency:
        pip install paddlepaddle paddleocr

    Config (via .env):
        LOCAL_OCR_PROVIDER=paddleocr
        PADDLE_LANG=en
        PADDLE_USE_GPU=false
    """

    name = "Local PaddleOCR Engine"

    def __init__(self, lang: str = "en", use_gpu: bool = False) -> None:
        self._lang = lang
        self._use_gpu = use_gpu
        self._ocr = None   # lazy-init to avoid import cost at startup
        self._init_lock = threading.Lock()

    def _get_ocr(self):
        # Called from executor threads, so concurrent first calls must not
        # construct two models.
        with self._init_lock:
            if self._ocr is None:
                try:
                    from paddleocr import PaddleOCR  # type: ignore[import]
                except ModuleNotFoundError as exc:
                    raise RuntimeError(
                        "PaddleOCR is not installed. Run: pip install paddlepaddle paddleocr"
                    ) from exc
                self._ocr = PaddleOCR(
                    use_angle_cls=True,
                    lang=self._lang,
                    use_gpu=self._use_gpu,
                    show_log=False,
                )
        return self._ocr

    async def extract_text(self, image_bytes: bytes) -> OCRExtraction:
        """Run PaddleOCR on *image_bytes* (PNG/JPEG) and return extracted text + confidence."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._recognize, image_bytes)

    def _recognize(self, image_bytes: bytes) -> OCRExtraction:
        import numpy as np  # type: ignore[import]
        from PIL import Image  # type: ignore[import]

        img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
        img_array = np.array(img)

        result = self._get_ocr().ocr(img_array, cls=True)

        lines: list[str] = []
        confidences: list[float] = []

        if result and result[0]:
            for line in result[0]:
                # Each line: [bounding_box, [text, confidence]]
                text, conf = line[1]
                lines.append(text)
                confidences.append(float(conf))

        full_text = "\n".join(lines)
        avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0

        logger.info(
            "paddleocr_complete",
            extra={"lines": len(lines), "avg_confidence": round(avg_confidence, 4)},
        )
        return OCRExtraction(text=full_text, confidence=avg_confidence)

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from veritas.core.config import settings
from veritas.core.errors import NoReadableContent
from veritas.pipeline.analyzer import Analyzer
from veritas.schemas import AnalysisReportOut, AnalyzeRequest, ErrorOut

logger = logging.getLogger(__name__)
router = APIRouter()


def get_analyzer(request: Request) -> Analyzer:
    return request.app.state.analyzer


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorOut(error=message).model_dump(exclude_none=True))


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/api/analyze", response_model=AnalysisReportOut)
async def analyze_text(
    body: AnalyzeRequest,
    analyzer: Analyzer = Depends(get_analyzer),
) -> AnalysisReportOut:
    report = await analyzer.analyze_text(body.message)
    return AnalysisReportOut(score=report.score, tricks=report.tricks)


@router.post(
    "/api/analyze-image",
    response_model=AnalysisReportOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def analyze_image(
    analyzer: Analyzer = Depends(get_analyzer),
    news_image: UploadFile | None = File(None, alias="newsImage"),
):
    if news_image is None:
        return _error(400, "Image file is required.")

    content_type = news_image.content_type or ""
    if not content_type.startswith("image/"):
        return _error(400, "Only image files are allowed!")

    image_bytes = await news_image.read(settings.max_image_bytes + 1)
    if len(image_bytes) > settings.max_image_bytes:
        return _error(400, "File too large")

    try:
        report = await analyzer.analyze_image(image_bytes)
    except NoReadableContent as exc:
        logger.info("image_unreadable", extra={"upload_filename": news_image.filename})
        return _error(400, str(exc))
    except Exception:
        logger.exception("image_analysis_failed", extra={"upload_filename": news_image.filename})
        return _error(500, "Failed to process image content.")

    return AnalysisReportOut(score=report.score, tricks=report.tricks)

from __future__ import annotations

from pydantic import BaseModel, Field

from veritas.core.config import settings


class AnalyzeRequest(BaseModel):
    message: str = Field(min_length=1, max_length=settings.max_message_length)


class AnalysisReportOut(BaseModel):
    score: float
    tricks: list[str]


class ErrorOut(BaseModel):
    error: str
    details: list[dict] | None = None

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from veritas.api.routes import router
from veritas.core.config import settings
from veritas.core.logging import configure_logging
from veritas.pipeline.analyzer import Analyzer, build_analyzer


def create_app(analyzer: Analyzer | None = None) -> FastAPI:
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.analyzer = analyzer if analyzer is not None else build_analyzer(settings)
        logging.getLogger(__name__).info(
            "startup",
            extra={"app_env": settings.app_env, "client_url": settings.client_url},
        )
        yield

    app = FastAPI(title="Veritas Hybrid Core", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def _invalid_input(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "Invalid input", "details": details})

    @app.get("/")
    async def root():
        return {
            "message": "Veritas Hybrid Core is running.",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()

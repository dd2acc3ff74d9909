"""Once-only lazy loading for expensive local models."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class LazyModel:
    """Load a model the first time it is needed, exactly once.

    ``loader`` is a blocking callable and runs in the default executor.
    Concurrent first callers all await the same in-flight load and receive
    the same handle, or the same exception if it fails. A failed load is
    forgotten once it settles, so the next request starts a fresh one.
    """

    def __init__(self, loader: Callable[[], Any], *, name: str = "model") -> None:
        self._loader = loader
        self._name = name
        self._model: Any = None
        self._loading: asyncio.Future | None = None

    @property
    def loaded(self) -> bool:
        return self._model is not None

    async def get(self) -> Any:
        if self._model is not None:
            return self._model

        if self._loading is None:
            self._loading = asyncio.ensure_future(self._load())

        # A cancelled caller must not cancel the load the others are waiting on.
        return await asyncio.shield(self._loading)

    async def _load(self) -> Any:
        logger.info("model_load_started", extra={"model": self._name})
        loop = asyncio.get_running_loop()
        try:
            model = await loop.run_in_executor(None, self._loader)
        except Exception as exc:
            logger.error("model_load_failed", extra={"model": self._name, "error": str(exc)})
            self._loading = None
            raise

        self._model = model
        self._loading = None
        logger.info("model_load_complete", extra={"model": self._name})
        return model

"""
HTTP API for the short-link service.

Responsibilities:
    - Accept URLs as plain text, JSON, or JSON batches and answer with short URLs
    - Redirect short codes to their original URL
    - Expose a liveness probe backed by the storage `ping`

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - The storage handle is built once per app and closed on shutdown. Routes
      reach it only through the manager captured here, never via a global.
    - Status codes: 201 for a new link, 409 (same body) when the URL was
      already shortened, 400 for empty input, 404 for unknown codes,
      500 when the backend fails.

LLM Prompt Example:
    "Show how an application factory lets tests inject an in-memory, journal
    or database storage handle without touching route code."
"""

import contextlib
import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from .compress import GzipRequestMiddleware
from .config import Settings, load_settings
from .exceptions import NotFoundError, StorageError
from .logging_config import RequestLoggingMiddleware, configure_logging
from .manager.link_manager import ShortLinkManager
from .models import BatchItem, BatchResult, Conflict
from .storage.base import BaseStorage
from .storage.storage_factory import get_storage


class ShortenRequest(BaseModel):
    """Request payload for `POST /api/shorten`."""
    url: str


class ShortenResponse(BaseModel):
    result: str


def create_app(settings: Optional[Settings] = None, storage: Optional[BaseStorage] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        settings: Startup configuration; read from the environment when omitted.
        storage: Pre-built storage handle. When omitted, the backend is chosen
            from `settings` (database, then journal, then memory).

    Returns:
        FastAPI: A configured application owning its own storage handle.
    """
    cfg = settings if settings is not None else load_settings([])
    configure_logging(cfg.log_level)
    log = logging.getLogger("shortlink.api")

    store = storage if storage is not None else get_storage(cfg)
    manager = ShortLinkManager(storage=store, base_url=cfg.base_url)

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        store.close()

    app = FastAPI(
        title="Short Link Service",
        description="Deterministic URL shortener with memory, journal and PostgreSQL storage",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.storage = store
    app.state.manager = manager

    app.add_middleware(GZipMiddleware, minimum_size=0)
    app.add_middleware(GzipRequestMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/ping")
    def ping() -> Response:
        """Liveness probe: 200 when the backend answers, 500 otherwise."""
        try:
            store.ping()
        except StorageError as exc:
            log.error("Storage ping failed: %s", exc)
            return PlainTextResponse("Storage unavailable", status_code=500)
        return PlainTextResponse("OK")

    @app.post("/", status_code=201)
    async def shorten_text(request: Request) -> Response:
        """Shorten a URL sent as the raw request body."""
        body = await request.body()
        try:
            result = await run_in_threadpool(manager.shorten, body.decode("utf-8"))
        except ValueError:
            raise HTTPException(status_code=400, detail="Bad Request")
        except StorageError as exc:
            log.error("Failed to save %r: %s", body[:200], exc)
            raise HTTPException(status_code=500, detail="Failed to save")

        status_code = 409 if isinstance(result, Conflict) else 201
        return PlainTextResponse(manager.short_url(result.code), status_code=status_code)

    @app.post("/api/shorten", status_code=201, response_model=ShortenResponse)
    def shorten_json(req: ShortenRequest):
        """Shorten `{"url": ...}` and answer `{"result": short_url}`."""
        try:
            result = manager.shorten(req.url)
        except ValueError as ve:
            raise HTTPException(status_code=400, detail=str(ve))
        except StorageError as exc:
            log.error("Failed to save %r: %s", req.url, exc)
            raise HTTPException(status_code=500, detail="Failed to save")

        payload = {"result": manager.short_url(result.code)}
        if isinstance(result, Conflict):
            return JSONResponse(payload, status_code=409)
        return payload

    @app.post("/api/shorten/batch", status_code=201, response_model=List[BatchResult])
    def shorten_batch(items: List[BatchItem]):
        """Shorten many URLs; the response keeps the request order."""
        try:
            return manager.shorten_batch(items)
        except ValueError as ve:
            raise HTTPException(status_code=400, detail=str(ve))
        except StorageError as exc:
            log.error("Failed to save batch of %d: %s", len(items), exc)
            raise HTTPException(status_code=500, detail="Failed to save batch")

    @app.get("/{code}")
    def redirect(code: str) -> Response:
        """Redirect (307) to the original URL stored under `code`."""
        try:
            original = manager.resolve(code)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Not Found")
        except StorageError as exc:
            log.error("Lookup of %r failed: %s", code, exc)
            raise HTTPException(status_code=500, detail="Lookup failed")
        return RedirectResponse(url=original, status_code=307)

    return app

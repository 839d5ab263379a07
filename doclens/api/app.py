"""FastAPI application factory.

Lifespan
--------
On startup the app builds the summarization backend once from the active
settings (unless one was injected) and stores it on ``app.state.summarizer``.
A provider with missing credentials fails here, at startup, rather than on
the first request.  ``LLM_PROVIDER=none`` leaves the summarizer unset and the
analysis endpoint returns extracted content only.

Routers
-------
All endpoint groups are mounted under ``/api``:

    /api/analyze  — URL → cleaned content + analysis
    /api/chat     — question answering over extracted content
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from doclens.api.auth import require_bearer
from doclens.api.routers import analyze as analyze_router
from doclens.api.routers import chat as chat_router
from doclens.config import Settings, settings as default_settings
from doclens.llm.summarizer import Summarizer, build_summarizer

logger = logging.getLogger(__name__)


def _error_response(status: int, error: str, details: object = None) -> JSONResponse:
    body: dict = {"error": error, "status": status}
    if details is not None:
        body["details"] = details
    return JSONResponse(content=body, status_code=status)


def create_app(
    config: Optional[Settings] = None,
    summarizer: Optional[Summarizer] = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        config: Settings to use; defaults to the module-level singleton.
        summarizer: Pre-built summarizer (e.g. a fake in tests).  When omitted
            one is built from *config* during startup.
    """
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build the summarizer on startup."""
        if app.state.summarizer is None:
            app.state.summarizer = build_summarizer(config)
        if app.state.summarizer is None:
            logger.info("No summarization backend configured; analysis will be skipped")
        yield

    app = FastAPI(
        title="doclens API",
        description=(
            "Fetches a documentation page, extracts and cleans its main "
            "content, and summarises it with a language model."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.summarizer = summarizer

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):  # type: ignore[no-untyped-def]
        response = await call_next(request)
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Embedder-Policy"] = "require-corp"
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def body_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return _error_response(400, "Invalid request body", details)

    @app.get("/health", tags=["health"])
    async def health(request: Request) -> dict:
        return {"status": "ok", "summarizer": request.app.state.summarizer is not None}

    auth = [Depends(require_bearer)]
    app.include_router(analyze_router.router, prefix="/api", tags=["analyze"], dependencies=auth)
    app.include_router(chat_router.router, prefix="/api", tags=["chat"], dependencies=auth)

    return app

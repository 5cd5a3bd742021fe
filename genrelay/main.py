from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from genrelay.config import get_settings
from genrelay.exceptions import RelayError
from genrelay.handlers import generation_handler
from genrelay.services.llm import GenerationProvider
from genrelay.services.storage import ScratchStorage

logger = logging.getLogger(__name__)


def create_app(
    *,
    provider: Optional[GenerationProvider] = None,
    storage: Optional[ScratchStorage] = None,
) -> FastAPI:
    """Build the API. Without a *provider* the configured one is created on first request."""

    settings = get_settings()

    app = FastAPI(title="GenRelay API")
    app.state.provider = provider
    app.state.storage = storage or ScratchStorage(settings.scratch_dir)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["POST", "GET"],
            allow_headers=["*"],
        )

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(generation_handler.router)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    return app


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected malformed request to %s", request.url.path)
    messages = [str(error.get("msg", "invalid value")) for error in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "; ".join(messages) or "Invalid request"})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


logging.basicConfig(level=get_settings().log_level.upper())
app = create_app()

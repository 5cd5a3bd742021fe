"""Generation endpoints: text-only plus one handler shared by the media routes."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from genrelay.config import Settings, get_settings
from genrelay.exceptions import InvalidInput, ProcessingError, RelayError
from genrelay.models import (
    ErrorResponse,
    GenerationResult,
    MediaRoute,
    MediaStrategy,
    TextGenerationRequest,
    TextPart,
)
from genrelay.services.content import build_contents
from genrelay.services.llm import GenerationProvider, get_provider
from genrelay.services.storage import ScratchStorage

router = APIRouter()
logger = logging.getLogger(__name__)

MEDIA_ROUTES = (
    MediaRoute(
        path="/generate-from-image",
        field="image",
        default_prompt="Describe this image.",
        strategy=MediaStrategy.REMOTE,
        model_setting="image_model",
    ),
    MediaRoute(
        path="/generate-from-document",
        field="document",
        default_prompt="Summarize this document.",
        strategy=MediaStrategy.INLINE,
        model_setting="document_model",
    ),
    MediaRoute(
        path="/generate-from-audio",
        field="audio",
        default_prompt="Transcribe this audio.",
        strategy=MediaStrategy.INLINE,
        model_setting="audio_model",
    ),
)

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing prompt or file"},
    500: {"model": ErrorResponse, "description": "Generation or processing failure"},
}


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_generation_provider(request: Request) -> GenerationProvider:
    """Return the provider held by the app, building the configured one on first use."""
    provider = getattr(request.app.state, "provider", None)
    if provider is None:
        try:
            provider = get_provider()
        except Exception as exc:
            logger.exception("Could not build the generation provider")
            raise ProcessingError(f"Generation provider unavailable: {exc}") from exc
        request.app.state.provider = provider
    return provider


def get_scratch_storage(request: Request) -> ScratchStorage:
    return request.app.state.storage


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clean_prompt(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@asynccontextmanager
async def _request_boundary(path: str) -> AsyncIterator[None]:
    """Let relay errors through and fold anything else into a ProcessingError."""
    try:
        yield
    except RelayError as exc:
        logger.warning("%s failed (%s): %s", path, type(exc).__name__, exc.message)
        raise
    except Exception as exc:
        logger.exception("%s failed unexpectedly", path)
        raise ProcessingError(str(exc) or type(exc).__name__) from exc


def _multipart_body(field: str) -> dict[str, Any]:
    return {
        "requestBody": {
            "required": True,
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "required": [field],
                        "properties": {
                            field: {"type": "string", "format": "binary"},
                            "prompt": {"type": "string"},
                        },
                    }
                }
            },
        }
    }


# ---------------------------------------------------------------------------
# Text route
# ---------------------------------------------------------------------------


@router.post("/generate-text", response_model=GenerationResult, responses=_ERROR_RESPONSES)
async def generate_text(
    payload: Optional[TextGenerationRequest] = None,
    provider: GenerationProvider = Depends(get_generation_provider),
    settings: Settings = Depends(get_settings),
):
    prompt = _clean_prompt(payload.prompt if payload else None)
    if prompt is None:
        raise InvalidInput("Prompt is required")

    async with _request_boundary("/generate-text"):
        output = await provider.generate(settings.text_model, [TextPart(text=prompt)])

    logger.info("/generate-text completed (%d chars)", len(output))
    return GenerationResult(output=output)


# ---------------------------------------------------------------------------
# Media routes
# ---------------------------------------------------------------------------


def media_endpoint(route: MediaRoute) -> Callable[..., Any]:
    """Build the handler for one media route.

    Validation happens before any disk or network work; the scratch file is
    released on every exit path by ``ScratchStorage.scratch_file``.
    """

    async def endpoint(
        request: Request,
        provider: GenerationProvider = Depends(get_generation_provider),
        storage: ScratchStorage = Depends(get_scratch_storage),
        settings: Settings = Depends(get_settings),
    ):
        async with request.form() as form:
            uploads = form.getlist(route.field)
            if len(uploads) > 1:
                raise InvalidInput(f"Expected exactly one file under field '{route.field}', got {len(uploads)}")
            upload = uploads[0] if uploads else None
            if not isinstance(upload, UploadFile) or not upload.filename:
                raise InvalidInput(f"No file uploaded under field '{route.field}'")

            prompt = _clean_prompt(form.get("prompt")) or route.default_prompt
            model = getattr(settings, route.model_setting)

            async with _request_boundary(route.path):
                async with storage.scratch_file(upload) as scratch:
                    contents = await build_contents(
                        prompt,
                        scratch,
                        route.strategy,
                        provider,
                        inline_max_bytes=settings.inline_max_bytes,
                    )
                    output = await provider.generate(model, contents)

        logger.info("%s completed (%d chars)", route.path, len(output))
        return GenerationResult(output=output)

    endpoint.__name__ = f"generate_from_{route.field}"
    return endpoint


for _route in MEDIA_ROUTES:
    router.add_api_route(
        _route.path,
        media_endpoint(_route),
        methods=["POST"],
        response_model=GenerationResult,
        responses=_ERROR_RESPONSES,
        openapi_extra=_multipart_body(_route.field),
    )

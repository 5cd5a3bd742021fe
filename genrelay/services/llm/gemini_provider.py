from __future__ import annotations

import base64
import io
import logging
from typing import List, Optional, Sequence

from google import genai
from google.genai import types

from genrelay.config import get_settings
from genrelay.exceptions import RemoteError
from genrelay.models import ContentPart, InlineDataPart, RemoteFileHandle, RemoteFilePart, TextPart

from .base import GenerationProvider

logger = logging.getLogger(__name__)


class GeminiProvider(GenerationProvider):
    """Gemini API through the async surface of the google-genai SDK.

    Each call is attempted once; failures surface as :class:`RemoteError`.
    """

    name = "gemini"

    def __init__(self, api_key: Optional[str] = None) -> None:
        self._client = genai.Client(api_key=api_key or get_settings().gemini_api_key)

    async def upload_file(self, data: bytes, mime_type: str) -> RemoteFileHandle:
        try:
            uploaded = await self._client.aio.files.upload(
                file=io.BytesIO(data),
                config=types.UploadFileConfig(mime_type=mime_type),
            )
        except Exception as exc:
            logger.error("Gemini file upload failed: %s", exc)
            raise RemoteError(f"File upload failed: {exc}") from exc

        if not uploaded.uri:
            raise RemoteError("File upload returned no URI")
        logger.debug("Uploaded %d bytes to %s", len(data), uploaded.uri)
        return RemoteFileHandle(uri=uploaded.uri, mime_type=uploaded.mime_type or mime_type)

    async def generate(self, model: str, contents: Sequence[ContentPart]) -> str:
        request = [types.Content(role="user", parts=to_gemini_parts(contents))]
        try:
            response = await self._client.aio.models.generate_content(model=model, contents=request)
        except Exception as exc:
            logger.error("Gemini generate_content failed (model=%s): %s", model, exc)
            raise RemoteError(str(exc)) from exc

        text = response.text
        if not text:
            raise RemoteError("Model returned no text")

        usage = response.usage_metadata
        if usage is not None:
            logger.debug(
                "Gemini usage model=%s prompt_tokens=%s output_tokens=%s",
                model,
                usage.prompt_token_count,
                usage.candidates_token_count,
            )
        return text


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------

def to_gemini_parts(contents: Sequence[ContentPart]) -> List[types.Part]:
    parts: List[types.Part] = []
    for part in contents:
        if isinstance(part, TextPart):
            parts.append(types.Part.from_text(text=part.text))
        elif isinstance(part, InlineDataPart):
            parts.append(types.Part.from_bytes(data=base64.b64decode(part.data), mime_type=part.mime_type))
        elif isinstance(part, RemoteFilePart):
            parts.append(types.Part.from_uri(file_uri=part.uri, mime_type=part.mime_type))
        else:
            raise TypeError(f"Unsupported content part: {type(part).__name__}")
    return parts

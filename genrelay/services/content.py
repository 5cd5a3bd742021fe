"""Turn a prompt and a scratch file into the content list sent for generation.

Two strategies exist for the media part:

* inline: the whole file is read into memory and embedded as base64;
* remote: the bytes are uploaded to the provider first and referenced by URI.

A route names its preferred strategy. Inline routes switch to the remote
strategy for files larger than ``inline_max_bytes`` so oversized payloads
are never embedded in the generation request.
"""
from __future__ import annotations

import base64
import logging
from typing import List

from fastapi.concurrency import run_in_threadpool

from genrelay.exceptions import ProcessingError
from genrelay.models import ContentPart, InlineDataPart, MediaStrategy, RemoteFilePart, ScratchFile, TextPart
from genrelay.services.llm import GenerationProvider

logger = logging.getLogger(__name__)


async def read_scratch_bytes(scratch: ScratchFile) -> bytes:
    try:
        return await run_in_threadpool(scratch.path.read_bytes)
    except OSError as exc:
        raise ProcessingError(f"Could not read upload: {exc}") from exc


async def inline_part(scratch: ScratchFile) -> InlineDataPart:
    data = await read_scratch_bytes(scratch)
    encoded = base64.b64encode(data).decode("ascii")
    return InlineDataPart(data=encoded, mime_type=scratch.mime_type)


async def remote_part(scratch: ScratchFile, provider: GenerationProvider) -> RemoteFilePart:
    data = await read_scratch_bytes(scratch)
    handle = await provider.upload_file(data, scratch.mime_type)
    return RemoteFilePart(uri=handle.uri, mime_type=handle.mime_type)


def select_strategy(preferred: MediaStrategy, size: int, inline_max_bytes: int) -> MediaStrategy:
    if preferred is MediaStrategy.INLINE and size > inline_max_bytes:
        return MediaStrategy.REMOTE
    return preferred


async def build_contents(
    prompt: str,
    scratch: ScratchFile,
    strategy: MediaStrategy,
    provider: GenerationProvider,
    *,
    inline_max_bytes: int,
) -> List[ContentPart]:
    """Return ``[TextPart(prompt), <media part>]`` for one request."""

    chosen = select_strategy(strategy, scratch.size, inline_max_bytes)
    if chosen is not strategy:
        logger.info(
            "Upload of %d bytes exceeds inline limit of %d; using remote file reference",
            scratch.size,
            inline_max_bytes,
        )

    if chosen is MediaStrategy.REMOTE:
        media: ContentPart = await remote_part(scratch, provider)
    else:
        media = await inline_part(scratch)
    return [TextPart(text=prompt), media]

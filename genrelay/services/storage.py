"""Scratch-file storage for uploaded media.

Each media request owns exactly one file under the configured scratch
directory. Files are named by :func:`tempfile.mkstemp`, so concurrent
requests never collide, and are removed on every exit path through
:meth:`ScratchStorage.scratch_file`.
"""
from __future__ import annotations

import logging
import mimetypes
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from genrelay.exceptions import ProcessingError
from genrelay.models import ScratchFile

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class ScratchStorage:
    """Saves uploads to a local directory and guarantees their removal."""

    _CHUNK_SIZE = 1024 * 1024  # 1 MB

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    async def save(self, upload: UploadFile) -> ScratchFile:
        """Stream *upload* into a fresh scratch file and describe it.

        The declared content type is trusted; without one the type is
        guessed from the client filename.
        """

        mime_type = resolve_mime_type(upload.content_type, upload.filename)
        fd, raw_path = tempfile.mkstemp(dir=self._directory, suffix=_suffix_for(mime_type, upload.filename))
        path = Path(raw_path)
        size = 0
        completed = False
        try:
            with os.fdopen(fd, "wb") as handle:
                while True:
                    chunk = await upload.read(self._CHUNK_SIZE)
                    if not chunk:
                        break
                    await run_in_threadpool(handle.write, chunk)
                    size += len(chunk)
            completed = True
        except OSError as exc:
            raise ProcessingError(f"Could not store upload: {exc}") from exc
        finally:
            if not completed:
                self._remove(path)

        logger.debug("Saved upload to %s (%d bytes, %s)", path, size, mime_type)
        return ScratchFile(path=path, mime_type=mime_type, size=size)

    def delete(self, scratch: ScratchFile) -> None:
        """Remove the scratch file; a file that is already gone is fine."""

        self._remove(scratch.path)

    @asynccontextmanager
    async def scratch_file(self, upload: UploadFile) -> AsyncIterator[ScratchFile]:
        scratch = await self.save(upload)
        try:
            yield scratch
        finally:
            self.delete(scratch)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _remove(path: Path) -> None:
        if path.exists():
            try:
                path.unlink()
            except FileNotFoundError:
                return
            logger.debug("Deleted scratch file %s", path)


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------

def resolve_mime_type(content_type: Optional[str], filename: Optional[str]) -> str:
    if content_type:
        return content_type.split(";", 1)[0].strip().lower()
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return DEFAULT_MIME_TYPE


def _suffix_for(mime_type: str, filename: Optional[str]) -> str:
    suffix = mimetypes.guess_extension(mime_type)
    if suffix:
        return suffix
    if filename:
        return Path(filename).suffix
    return ""

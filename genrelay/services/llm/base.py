from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from genrelay.models import ContentPart, RemoteFileHandle


class GenerationProvider(ABC):
    """Abstract interface for a generative-content provider."""

    name: str = "abstract"

    @abstractmethod
    async def upload_file(self, data: bytes, mime_type: str) -> RemoteFileHandle:
        """Store *data* with the provider and return a reference to it.

        Raises
        ------
        RemoteError
            The upload failed for any reason (transport, quota, rejection).
        """

    @abstractmethod
    async def generate(self, model: str, contents: Sequence[ContentPart]) -> str:
        """Run one generation call and return its text.

        Raises
        ------
        RemoteError
            The call failed or the response carried no text.
        """

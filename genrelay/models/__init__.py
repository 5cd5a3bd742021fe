from .content import ContentPart, InlineDataPart, RemoteFileHandle, RemoteFilePart, TextPart
from .generation import (
    ErrorResponse,
    GenerationResult,
    MediaRoute,
    MediaStrategy,
    ScratchFile,
    TextGenerationRequest,
)

__all__ = [
    "ContentPart",
    "InlineDataPart",
    "RemoteFileHandle",
    "RemoteFilePart",
    "TextPart",
    "ErrorResponse",
    "GenerationResult",
    "MediaRoute",
    "MediaStrategy",
    "ScratchFile",
    "TextGenerationRequest",
]

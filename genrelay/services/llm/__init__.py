from __future__ import annotations

from .base import GenerationProvider
from .gemini_provider import GeminiProvider
from .registry import get_provider

__all__ = [
    "GenerationProvider",
    "GeminiProvider",
    "get_provider",
]

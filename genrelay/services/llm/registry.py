from __future__ import annotations

from functools import lru_cache

from genrelay.config import get_settings

from .base import GenerationProvider
from .gemini_provider import GeminiProvider

_PROVIDERS: dict[str, type[GenerationProvider]] = {
    "gemini": GeminiProvider,
}


@lru_cache()
def get_provider() -> GenerationProvider:
    settings = get_settings()
    provider_key = settings.llm_provider.lower()
    if provider_key not in _PROVIDERS:
        raise ValueError(f"Unsupported LLM provider: {provider_key}")
    return _PROVIDERS[provider_key]()

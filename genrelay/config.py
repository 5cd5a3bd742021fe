from __future__ import annotations

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Gemini
    gemini_api_key: str = Field(..., description="API key for the Gemini API.")
    llm_provider: str = Field("gemini", description="Registered generation provider name.")

    # Model per route, never chosen by the caller
    text_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash"
    document_model: str = "gemini-2.5-flash"
    audio_model: str = "gemini-2.5-flash"

    # Uploads
    scratch_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "genrelay-uploads",
        description="Directory holding one scratch file per in-flight media request.",
    )
    inline_max_bytes: int = Field(
        20 * 1024 * 1024,
        ge=0,
        description="Largest upload sent inline; bigger files go through the Files API.",
    )

    # HTTP
    cors_origins: List[str] = Field(default_factory=list)
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MediaStrategy(str, Enum):
    INLINE = "inline"
    REMOTE = "remote"


class TextGenerationRequest(BaseModel):
    prompt: Optional[str] = None


class GenerationResult(BaseModel):
    output: str


class ErrorResponse(BaseModel):
    error: str


class ScratchFile(BaseModel):
    """One uploaded file materialized on local disk for a single request."""

    model_config = ConfigDict(frozen=True)

    path: Path
    mime_type: str
    size: int = Field(0, ge=0)


class MediaRoute(BaseModel):
    """Everything that differs between the media endpoints."""

    model_config = ConfigDict(frozen=True)

    path: str
    field: str
    default_prompt: str
    strategy: MediaStrategy
    model_setting: str = Field(..., description="Settings attribute holding the model id")

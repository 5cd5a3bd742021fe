from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class InlineDataPart(BaseModel):
    """Media embedded in the request as base64 text."""

    kind: Literal["inline_data"] = "inline_data"
    data: str = Field(..., description="Base64-encoded file bytes")
    mime_type: str


class RemoteFilePart(BaseModel):
    """Media previously uploaded to the provider's file storage."""

    kind: Literal["remote_file"] = "remote_file"
    uri: str
    mime_type: str


ContentPart = Annotated[
    Union[TextPart, InlineDataPart, RemoteFilePart],
    Field(discriminator="kind"),
]


class RemoteFileHandle(BaseModel):
    uri: str
    mime_type: str

"""
Chat request/response models and attachment payloads.
"""

from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """A prior user or assistant turn as sent by the UI. The system turn is built server-side."""
    """A prior conversation turn as sent by the UI."""

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1)


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat."""

    messages: list[ChatMessage]
    property_id: int = Field(description="Property whose rooms and inventory ground the chat")


class TokenUsage(BaseModel):
    """Token counters reported by the model provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponse(BaseModel):
    """Response body for the chat endpoints."""

    # None when the ceiling was hit on an unresolved function call
    message: str | None
    usage: TokenUsage | None = None
    function_call_count: int = 0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class FileDescriptor(BaseModel):
    """An uploaded attachment stored on disk, before preprocessing."""

    mime_type: str
    path: str
    original_name: str | None = None
    size: int | None = None


class ImagePayload(BaseModel):
    """Image attachment, inlined as a base64 data URL."""

    kind: Literal["image"] = "image"
    mime_type: str
    data_url: str
    size_bytes: int


class DocumentPayload(BaseModel):
    """Document attachment, reduced to its extracted plain text."""

    kind: Literal["document"] = "document"
    text: str
    page_count: int
    original_name: str | None = None


ProcessedFile = Annotated[ImagePayload | DocumentPayload, Field(discriminator="kind")]

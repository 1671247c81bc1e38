"""Pydantic models for API requests, responses and the response stream.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - UIMessage: One conversation turn made of text and file parts
    - ChatRequest: Incoming chat request payload
    - ErrorResponse: Body of a failed chat request
    - StreamChunk: One event of the streamed assistant reply
"""

from curriculum_assistant.models.schemas import (
    PDF_MEDIA_TYPE,
    ChatRequest,
    ErrorResponse,
    FilePart,
    Part,
    Role,
    StreamChunk,
    StreamChunkType,
    TextPart,
    UIMessage,
)

__all__ = [
    "PDF_MEDIA_TYPE",
    "ChatRequest",
    "ErrorResponse",
    "FilePart",
    "Part",
    "Role",
    "StreamChunk",
    "StreamChunkType",
    "TextPart",
    "UIMessage",
]

from enum import Enum
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PDF_MEDIA_TYPE = "application/pdf"

# Final event of a UI message stream
DONE_MARKER = "[DONE]"


def new_id() -> str:
    return uuid4().hex


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Role(str, Enum):
    """Speaker of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class TextPart(CamelModel):
    """A span of message text."""

    type: Literal["text"] = "text"
    text: str


class FilePart(CamelModel):
    """A file attached to a message as an inline base64 data URL.

    Attributes:
        filename: Original file name.
        media_type: MIME type of the file (``mediaType`` on the wire).
        url: ``data:<media type>;base64,<payload>`` string.
    """

    type: Literal["file"] = "file"
    filename: str
    media_type: str
    url: str

    @property
    def is_pdf(self) -> bool:
        return self.media_type == PDF_MEDIA_TYPE


Part = Annotated[TextPart | FilePart, Field(discriminator="type")]

_KNOWN_PART_TYPES = {"text", "file"}


class UIMessage(CamelModel):
    """One turn of the conversation as exchanged between client and endpoint.

    Attributes:
        id: Opaque identifier, unique within a conversation.
        role: Who produced the message.
        parts: Ordered message content.
    """

    id: str = Field(default_factory=new_id)
    role: Role
    parts: list[Part] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def drop_unknown_parts(cls, v: Any) -> Any:
        """Skip part shapes this application does not handle (e.g. step markers)."""
        if isinstance(v, list):
            return [
                p for p in v
                if not isinstance(p, dict) or p.get("type") in _KNOWN_PART_TYPES
            ]
        return v

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def files(self) -> list[FilePart]:
        return [p for p in self.parts if isinstance(p, FilePart)]


class ChatRequest(CamelModel):
    """Request payload for the chat endpoint.

    Attributes:
        messages: The full conversation so far, oldest first.
    """

    messages: list[UIMessage] = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    """Body returned with status 500 when a request cannot be served."""

    error: str


class StreamChunkType(str, Enum):
    """Event types of the UI message stream."""

    START = "start"
    START_STEP = "start-step"
    TEXT_START = "text-start"
    TEXT_DELTA = "text-delta"
    TEXT_END = "text-end"
    FINISH_STEP = "finish-step"
    FINISH = "finish"
    ERROR = "error"


class StreamChunk(CamelModel):
    """A single event of the UI message stream.

    Attributes:
        type: Event type.
        message_id: Assistant message id (``start`` only).
        id: Text block id (``text-*`` events).
        delta: Text appended by a ``text-delta`` event.
        error_text: Human readable failure (``error`` only).
    """

    type: StreamChunkType
    message_id: str | None = None
    id: str | None = None
    delta: str | None = None
    error_text: str | None = None

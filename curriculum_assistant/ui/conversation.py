"""Conversation state for one chat page and the client side of the stream.

``ChatSession`` is the single owner of the page's conversation. It is created
empty when the page loads and discarded with it. Nothing here depends on
NiceGUI, so the submit flow can be exercised directly.
"""

import logging
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from curriculum_assistant.agent.config import Language, get_chat_language
from curriculum_assistant.agent.prompts import (
    file_read_error,
    file_too_large_error,
    generic_error,
)
from curriculum_assistant.attachments import MAX_FILE_SIZE, AttachmentError, to_file_part
from curriculum_assistant.models.schemas import (
    DONE_MARKER,
    ChatRequest,
    FilePart,
    Role,
    StreamChunk,
    StreamChunkType,
    TextPart,
    UIMessage,
)

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
CHAT_PATH = "/api/chat"


@dataclass
class SelectedFile:
    """A file picked by the user, read lazily on submit.

    Attributes:
        name: Original file name.
        media_type: MIME type reported by the browser.
        size: Size in bytes.
        read: Coroutine function returning the file content.
    """

    name: str
    media_type: str | None
    size: int
    read: Callable[[], Awaitable[bytes]]

    @classmethod
    def from_bytes(cls, name: str, media_type: str | None, content: bytes) -> "SelectedFile":
        """Wrap content already received by the server, such as a finished upload."""

        async def read() -> bytes:
            return content

        return cls(name=name, media_type=media_type, size=len(content), read=read)


def visible_parts(message: UIMessage) -> list[TextPart | FilePart]:
    """Parts shown in the chat: all text and PDF attachments, nothing else."""
    return [
        part for part in message.parts
        if isinstance(part, TextPart) or (isinstance(part, FilePart) and part.is_pdf)
    ]


class ChatSession:
    """Manages chat state for one page session.

    Holds the text input, the file selection, an error slot and the
    conversation. Only one submission can be in flight at a time.
    """

    def __init__(
        self,
        api_base_url: str = API_BASE_URL,
        language: Language | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.messages: list[UIMessage] = []
        self.input_text: str = ""
        self.files: list[SelectedFile] = []
        self.error: str | None = None
        self.is_streaming: bool = False
        self.language: Language = language or get_chat_language()
        self._api_base_url = api_base_url
        self._transport = transport
        self._text_parts: dict[str, TextPart] = {}

    @property
    def selected_file(self) -> SelectedFile | None:
        """The attachment that will be sent; extra selections are ignored."""
        return self.files[0] if self.files else None

    @property
    def has_content(self) -> bool:
        return bool(self.input_text.strip()) or self.selected_file is not None

    @property
    def can_submit(self) -> bool:
        return not self.is_streaming and self.has_content

    def select_files(self, files: Sequence[SelectedFile]) -> None:
        self.files = list(files)

    def clear_selection(self) -> None:
        self.files = []

    async def submit(self, on_update: Callable[[], None] | None = None) -> bool:
        """Send the current input and attachment, then stream the reply.

        Args:
            on_update: Called whenever visible state changes.

        Returns:
            True if the reply streamed without error; False if the submission
            was skipped or did not complete.
        """
        if not self.can_submit:
            return False

        notify = on_update or (lambda: None)
        self.is_streaming = True
        self.error = None
        notify()

        try:
            parts = await self._build_parts()
            if parts is None:
                return False

            self.messages.append(UIMessage(role=Role.USER, parts=parts))
            self.input_text = ""
            self.clear_selection()
            notify()

            await self._stream_reply(notify)
            return self.error is None
        finally:
            self.is_streaming = False
            notify()

    async def _build_parts(self) -> list[TextPart | FilePart] | None:
        parts: list[TextPart | FilePart] = [TextPart(text=self.input_text)]

        selected = self.selected_file
        if selected is None:
            return parts

        if selected.size > MAX_FILE_SIZE:
            self.error = file_too_large_error(self.language)
            return None

        try:
            content = await selected.read()
            parts.append(to_file_part(selected.name, selected.media_type, content))
        except AttachmentError:
            self.error = file_too_large_error(self.language)
            return None
        except Exception:
            logger.exception(f"Failed to read attachment {selected.name}")
            self.error = file_read_error(self.language)
            return None

        return parts

    async def _stream_reply(self, notify: Callable[[], None]) -> None:
        """Consume the UI message stream from the chat endpoint."""
        self._text_parts = {}
        request = ChatRequest(messages=self.messages)

        async with httpx.AsyncClient(
            base_url=self._api_base_url,
            transport=self._transport,
            timeout=120.0,
        ) as client:
            try:
                async with client.stream(
                    "POST",
                    CHAT_PATH,
                    json=request.to_wire(),
                    headers={"Accept": "text/event-stream"},
                ) as response:
                    if response.is_error:
                        await response.aread()
                        self.error = self._error_from_response(response)
                        return

                    async for line in response.aiter_lines():
                        if not line.startswith("data: "):
                            continue
                        data = line.removeprefix("data: ").strip()
                        if data == DONE_MARKER:
                            break
                        self._apply_chunk(StreamChunk.model_validate_json(data))
                        notify()
            except httpx.RequestError as e:
                logger.warning(f"Chat request failed: {e}")
                self.error = generic_error(self.language)
            except ValidationError as e:
                logger.warning(f"Malformed stream chunk: {e}")
                self.error = generic_error(self.language)

    def _error_from_response(self, response: httpx.Response) -> str:
        logger.warning(f"Chat endpoint returned HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        return error if isinstance(error, str) and error else generic_error(self.language)

    def _assistant_message(self, message_id: str | None = None) -> UIMessage:
        last = self.messages[-1] if self.messages else None
        if last is not None and last.role == Role.ASSISTANT:
            return last
        message = UIMessage(role=Role.ASSISTANT)
        if message_id:
            message.id = message_id
        self.messages.append(message)
        return message

    def _text_part(self, text_id: str | None) -> TextPart:
        key = text_id or ""
        if key not in self._text_parts:
            part = TextPart(text="")
            self._assistant_message().parts.append(part)
            self._text_parts[key] = part
        return self._text_parts[key]

    def _apply_chunk(self, chunk: StreamChunk) -> None:
        if chunk.type == StreamChunkType.START:
            self._assistant_message(chunk.message_id)
        elif chunk.type == StreamChunkType.TEXT_START:
            self._text_part(chunk.id)
        elif chunk.type == StreamChunkType.TEXT_DELTA:
            self._text_part(chunk.id).text += chunk.delta or ""
        elif chunk.type == StreamChunkType.ERROR:
            self.error = chunk.error_text or generic_error(self.language)

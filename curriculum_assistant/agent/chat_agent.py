"""Agno agent service streaming Gemini replies for a whole conversation.

Core module for the assistant's intelligence.

Architecture Decisions:

1. **Stateless Agent** - The client sends the full conversation with every
   request, so the agent runs without storage or session history. Each request
   is an independent unit of work and nothing is written locally.

2. **Singleton Pattern** - Agent initialization (model client, system message)
   is done once and reused across all requests.

3. **Service Wrapper** - Decouples the HTTP layer from Agno's interface. The
   endpoint only sees ``stream_response(messages)``, an async generator of
   text fragments, so the provider can be swapped in one place.

4. **Inline Files** - PDF attachments arrive as data URLs and are passed to
   Gemini as raw bytes; the model reads the document itself.
"""

import logging
from collections.abc import AsyncGenerator, Sequence
from typing import Protocol

from agno.agent import Agent
from agno.media import File
from agno.models.google import Gemini
from agno.models.message import Message
from agno.run.agent import RunEvent

from curriculum_assistant.agent.config import AgentConfig, get_agent_config
from curriculum_assistant.agent.prompts import system_prompt
from curriculum_assistant.attachments import decode_data_url
from curriculum_assistant.models.schemas import UIMessage

logger = logging.getLogger(__name__)


class AgentServiceError(RuntimeError):
    """Raised when the model run reports a failure instead of content."""

    pass


class ResponseStreamer(Protocol):
    """Anything that turns a conversation into a stream of text fragments."""

    def stream_response(self, messages: Sequence[UIMessage]) -> AsyncGenerator[str]: ...


def to_agno_messages(messages: Sequence[UIMessage]) -> list[Message]:
    """Convert UI messages into Agno messages with inline file content.

    Args:
        messages: Conversation in client order.

    Returns:
        Agno messages in the same order.

    Raises:
        AttachmentError: If a file part carries a malformed data URL.
    """
    converted: list[Message] = []
    for message in messages:
        files = []
        for part in message.files:
            _, content = decode_data_url(part.url)
            files.append(
                File(content=content, mime_type=part.media_type, filename=part.filename)
            )

        converted.append(
            Message(
                role=message.role.value,
                content=message.text,
                files=files or None,
            )
        )
    return converted


class AgentService:
    """Service for managing the Agno chat agent.

    Wraps Agno's Agent with:
    - Google Gemini model and a fixed system instruction
    - Singleton lifecycle management
    - Clean streaming interface for the chat endpoint
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    @property
    def config(self) -> AgentConfig:
        return self._config

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Configured Agent with the Gemini model and system instruction.
        """
        model = Gemini(
            id=self._config.model_name,
            api_key=self._config.api_key,
            temperature=self._config.temperature,
            max_output_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            system_message=system_prompt(self._config.language),
            # No storage: the client owns the conversation
            add_history_to_context=False,
            markdown=True,
        )

    async def stream_response(
        self,
        messages: Sequence[UIMessage],
    ) -> AsyncGenerator[str]:
        """Stream response chunks for a conversation.

        Args:
            messages: The conversation so far, ending with the new user turn.

        Yields:
            Response text chunks as they arrive.

        Raises:
            AgentServiceError: If the run reports an error event.
        """
        agno_messages = to_agno_messages(messages)
        logger.info(
            f"Streaming reply for {len(agno_messages)} messages "
            f"with model {self._config.model_name}"
        )

        async for chunk in self._agent.arun(agno_messages, stream=True):
            event = getattr(chunk, "event", None)
            if event == RunEvent.run_error:
                raise AgentServiceError(str(getattr(chunk, "content", "") or "Model run failed"))
            if event == RunEvent.run_content and chunk.content:
                yield str(chunk.content)


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service

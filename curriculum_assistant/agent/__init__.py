"""Agno agent logic for LLM orchestration.

Forwards a whole conversation, including inline PDF attachments, to Google
Gemini and streams the reply back as text fragments.

Responsibilities:
    - Agent initialization with the Gemini model
    - Fixed system instruction per language
    - Conversion of UI messages to provider messages
    - Streaming token generation coordination

Maintains clean separation from the HTTP layer.
"""

from curriculum_assistant.agent.chat_agent import (
    AgentService,
    AgentServiceError,
    ResponseStreamer,
    get_agent_service,
    to_agno_messages,
)
from curriculum_assistant.agent.config import AgentConfig, get_agent_config, get_chat_language

__all__ = [
    "AgentConfig",
    "AgentService",
    "AgentServiceError",
    "ResponseStreamer",
    "get_agent_config",
    "get_agent_service",
    "get_chat_language",
    "to_agno_messages",
]

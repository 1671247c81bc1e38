"""Agent configuration with environment variable loading.

Pydantic-based configuration for the Agno chat agent backed by Google Gemini.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

Language = Literal["en", "ar"]

# Wall-clock ceiling for one chat request, in seconds
MAX_DURATION_SECONDS = float(os.getenv("MAX_DURATION_SECONDS", "30"))


def _env_language() -> str:
    return os.getenv("CHAT_LANGUAGE", "en").strip().lower()


def get_chat_language() -> Language:
    """Return the configured chat language without requiring model credentials.

    Falls back to English for unsupported values, so the page, the error
    texts and the system instruction always agree.
    """
    language = _env_language()
    return "ar" if language == "ar" else "en"


class AgentConfig(BaseModel):
    """Configuration for the Agno chat agent.

    Attributes:
        api_key: Google AI Studio API key for Gemini access.
        model_name: Gemini model identifier.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        language: Language of the system instruction and user-facing errors.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_API_KEY", os.getenv("GEMINI_API_KEY", "")),
        validate_default=True,
        description="API key for the Gemini API",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gemini-2.0-flash-exp"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=8192,
        ge=1,
        le=65536,
        description="Maximum tokens in generated response",
    )
    language: Language = Field(
        default_factory=get_chat_language,
        description="Assistant language: 'en' or 'ar'",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set GOOGLE_API_KEY or GEMINI_API_KEY in .env"
            )
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return AgentConfig()

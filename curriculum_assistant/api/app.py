"""FastAPI application for the curriculum assistant.

``create_app`` builds the chat proxy: the ``/api/chat`` router, a health
probe and CORS for the NiceGUI page when it is served from another origin.
The request duration ceiling is kept on ``app.state`` so tests can shorten it.
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from curriculum_assistant import __version__
from curriculum_assistant.agent.config import MAX_DURATION_SECONDS, get_chat_language
from curriculum_assistant.api.routes import router as chat_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log the effective chat settings while the proxy is up."""
    logger.info(
        f"Curriculum Assistant API up (language={get_chat_language()}, "
        f"max duration={app.state.max_duration_seconds}s)"
    )
    yield
    logger.info("Curriculum Assistant API stopped")


def _cors_origins() -> list[str]:
    origins = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


def create_app(max_duration_seconds: float = MAX_DURATION_SECONDS) -> FastAPI:
    """Build the chat proxy application.

    Args:
        max_duration_seconds: Wall-clock ceiling for one chat request.

    Returns:
        The FastAPI application.
    """
    application = FastAPI(
        title="Curriculum Assistant API",
        description=(
            "Chat with an uploaded curriculum document. Conversations, including "
            "inline PDF attachments, are forwarded to a hosted Gemini model and the "
            "reply is streamed back as it is generated."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    application.state.max_duration_seconds = max_duration_seconds

    # The page may run on UI_PORT in separate mode
    application.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "curriculum-assistant"}

    return application


app = create_app()

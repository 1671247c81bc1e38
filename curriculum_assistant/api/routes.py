"""Chat endpoint proxying a conversation to the model and streaming the reply.

Validates the conversation and reports model failures as JSON or in-band.
"""

import asyncio
import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse

from curriculum_assistant.agent.chat_agent import ResponseStreamer, get_agent_service
from curriculum_assistant.agent.config import get_chat_language
from curriculum_assistant.agent.prompts import generic_error
from curriculum_assistant.api.streaming import (
    STREAM_HEADERS,
    next_fragment,
    ui_message_stream,
)
from curriculum_assistant.models.schemas import ChatRequest, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


def agent_service_factory() -> Callable[[], ResponseStreamer]:
    """Return the factory used to obtain the model service.

    The factory is called inside the request guard so configuration
    failures are reported like any other failure.
    """
    return get_agent_service


def _error_response(language: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=generic_error(language)).model_dump(),
    )


@router.post(
    "/chat",
    response_class=StreamingResponse,
    response_model=None,
    responses={500: {"model": ErrorResponse}},
)
async def chat(
    request: Request,
    service_factory: Callable[[], ResponseStreamer] = Depends(agent_service_factory),
) -> Response:
    """Stream the assistant's reply to a conversation.

    Accepts ``{"messages": [...]}`` with the whole conversation (file parts
    inline as data URLs), forwards it to the model with the fixed system
    instruction and streams the reply as a UI message stream.

    Returns:
        StreamingResponse with ``text/event-stream`` content.

    Raises:
        500: Malformed request or model failure before the reply started,
             reported as ``{"error": "..."}``.
    """
    language = get_chat_language()
    deadline = asyncio.get_running_loop().time() + request.app.state.max_duration_seconds

    try:
        payload = await request.json()
        chat_request = ChatRequest.model_validate(payload)
        fragments = service_factory().stream_response(chat_request.messages)
        first = await next_fragment(fragments, deadline)
    except Exception:
        logger.exception("Chat request failed before streaming started")
        return _error_response(language)

    logger.info(f"Streaming reply to conversation of {len(chat_request.messages)} messages")

    return StreamingResponse(
        ui_message_stream(first, fragments, deadline=deadline, error_text=generic_error(language)),
        media_type="text/event-stream",
        headers=STREAM_HEADERS,
    )

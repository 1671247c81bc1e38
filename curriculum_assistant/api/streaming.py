"""UI message stream framing for streamed assistant replies.

The reply is sent as Server-Sent Events. Every event carries one JSON
``StreamChunk``; the stream ends with a literal ``[DONE]`` event:

    data: {"type":"start","messageId":"..."}
    data: {"type":"start-step"}
    data: {"type":"text-start","id":"..."}
    data: {"type":"text-delta","id":"...","delta":"Hel"}
    data: {"type":"text-delta","id":"...","delta":"lo"}
    data: {"type":"text-end","id":"..."}
    data: {"type":"finish-step"}
    data: {"type":"finish"}
    data: [DONE]

Failures after the response has started are reported in-band with an
``error`` chunk followed by ``[DONE]``.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator, AsyncIterator

from curriculum_assistant.models.schemas import DONE_MARKER, StreamChunk, StreamChunkType, new_id

logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
    "x-vercel-ai-ui-message-stream": "v1",
}


def format_sse(chunk: StreamChunk | str) -> str:
    """Frame a chunk (or the done marker) as one SSE event."""
    data = chunk if isinstance(chunk, str) else json.dumps(chunk.to_wire(), ensure_ascii=False)
    return f"data: {data}\n\n"


def remaining_time(deadline: float) -> float:
    return max(deadline - asyncio.get_running_loop().time(), 0.0)


async def next_fragment(fragments: AsyncIterator[str], deadline: float) -> str | None:
    """Await the next text fragment, or None once the model is done.

    Raises:
        TimeoutError: If the deadline passes first.
    """
    try:
        return await asyncio.wait_for(anext(fragments), timeout=remaining_time(deadline))
    except StopAsyncIteration:
        return None


async def ui_message_stream(
    first: str | None,
    fragments: AsyncGenerator[str],
    *,
    deadline: float,
    error_text: str,
) -> AsyncGenerator[str]:
    """Re-frame model text fragments as the UI message stream.

    Args:
        first: Fragment already pulled before the response started, if any.
        fragments: Remaining model output.
        deadline: Event loop time after which the stream is cut off.
        error_text: User-facing message sent if the stream fails.

    Yields:
        SSE-framed events.
    """
    message_id = new_id()
    text_id = new_id()

    yield format_sse(StreamChunk(type=StreamChunkType.START, message_id=message_id))
    yield format_sse(StreamChunk(type=StreamChunkType.START_STEP))
    yield format_sse(StreamChunk(type=StreamChunkType.TEXT_START, id=text_id))

    try:
        fragment = first
        while fragment is not None:
            if fragment:
                yield format_sse(
                    StreamChunk(type=StreamChunkType.TEXT_DELTA, id=text_id, delta=fragment)
                )
            fragment = await next_fragment(fragments, deadline)
    except TimeoutError:
        logger.error(f"Reply {message_id} exceeded the request duration limit")
        yield format_sse(StreamChunk(type=StreamChunkType.ERROR, error_text=error_text))
        yield format_sse(DONE_MARKER)
        return
    except Exception:
        logger.exception(f"Reply {message_id} failed while streaming")
        yield format_sse(StreamChunk(type=StreamChunkType.ERROR, error_text=error_text))
        yield format_sse(DONE_MARKER)
        return
    finally:
        await fragments.aclose()

    yield format_sse(StreamChunk(type=StreamChunkType.TEXT_END, id=text_id))
    yield format_sse(StreamChunk(type=StreamChunkType.FINISH_STEP))
    yield format_sse(StreamChunk(type=StreamChunkType.FINISH))
    yield format_sse(DONE_MARKER)
    logger.info(f"Reply {message_id} complete")

# This project was developed with assistance from AI tools.
"""OpenAI-compatible chat completions endpoint.

The router answers only the last user message. Whatever model the client asks
for, the classifier and model selector decide which backend answers, and the
response reports that model.

Streaming protocol (server-sent events):
  data: {chat.completion.chunk, delta: {"content": "..."}}   one per fragment
  data: {chat.completion.chunk, delta: {}, finish_reason: "stop"}
  data: [DONE]

If the provider fails mid-stream, an error event replaces the stop chunk:
  data: {"error": {"message": "...", "type": "generation_error"}}
  data: [DONE]
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..core.exceptions import GenerationError, ValidationError
from ..schemas.chat import (
    SSE_DONE,
    ChatCompletion,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatMessage,
    new_completion_id,
    sse_error,
    sse_event,
)
from ..services.smart_router import SmartRouter, get_smart_router

logger = logging.getLogger(__name__)

router = APIRouter()

STREAM_INTERRUPTED = "The answer stream was interrupted."

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def extract_query(messages: list[ChatMessage]) -> str:
    """Return the text of the last user message.

    Raises:
        ValidationError: no messages, no user message, or an empty user message.
    """
    if not messages:
        raise ValidationError("Messages are required")

    last_user = next((m for m in reversed(messages) if m.role == "user"), None)
    if last_user is None:
        raise ValidationError("No user message found")

    query = last_user.text()
    if not query.strip():
        raise ValidationError("User message content is empty")
    return query


@router.post("/chat/completions", response_model=None)
async def create_chat_completion(
    body: ChatCompletionRequest,
    smart_router: SmartRouter = Depends(get_smart_router),
) -> ChatCompletion | StreamingResponse:
    """Route the last user message and answer it, batch or streamed."""
    query = extract_query(body.messages)
    decision = await smart_router.route(query)

    if not body.stream:
        answer = await smart_router.generator.generate(
            query, decision.model, decision.classification
        )
        return ChatCompletion.from_answer(answer, decision.model)

    fragments = await smart_router.generator.generate_stream(
        query, decision.model, decision.classification
    )
    return StreamingResponse(
        stream_chunks(fragments, new_completion_id(), decision.model),
        media_type="text/event-stream",
        headers=STREAM_HEADERS,
    )


async def stream_chunks(
    fragments: AsyncGenerator[str, None],
    completion_id: str,
    model: str,
) -> AsyncGenerator[str, None]:
    """Frame generator fragments as chat.completion.chunk server-sent events.

    Pulls one fragment at a time and forwards it before pulling the next. When
    the client disconnects, the response task is cancelled and ``fragments``
    is closed, which closes the provider stream.
    """
    try:
        async for fragment in fragments:
            yield sse_event(ChatCompletionChunk.content(completion_id, model, fragment))
        yield sse_event(ChatCompletionChunk.stop(completion_id, model))
    except GenerationError as exc:
        logger.warning("Stream %s ended with an error: %s", completion_id, exc.message)
        yield sse_error(exc.message)
    except Exception:
        logger.exception("Stream %s failed unexpectedly", completion_id)
        yield sse_error(STREAM_INTERRUPTED)
    finally:
        await fragments.aclose()
    yield SSE_DONE

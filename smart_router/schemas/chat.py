# This project was developed with assistance from AI tools.
"""OpenAI chat-completions wire schemas.

Only the subset of the API that the router reads or writes is modelled.
Unknown request fields (temperature, max_tokens, tools, ...) are accepted and
ignored so unmodified OpenAI clients can talk to the router.
"""

import json
import time
import uuid
from typing import Any, Literal

from pydantic import BaseModel, Field

SSE_DONE = "data: [DONE]\n\n"


def new_completion_id() -> str:
    """Return a fresh ``chatcmpl-`` id, shared by every chunk of one response."""
    return f"chatcmpl-{uuid.uuid4().hex}"


def _now() -> int:
    return int(time.time())


# -- Request --


class ChatMessage(BaseModel):
    role: str = Field(description="user, assistant or system. Other roles are ignored.")
    content: str | list[dict[str, Any]] | None = None

    def text(self) -> str:
        """Return the message text, joining the text parts of multi-part content."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        parts = [
            part.get("text", "")
            for part in self.content
            if part.get("type") == "text" and isinstance(part.get("text"), str)
        ]
        return "\n".join(parts)


class ChatCompletionRequest(BaseModel):
    model: str = Field(default="smart-router", description="Ignored; the router picks the model.")
    messages: list[ChatMessage] = Field(default_factory=list)
    stream: bool | None = False


# -- Non-streaming response --


class AssistantMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str


class CompletionChoice(BaseModel):
    index: int = 0
    message: AssistantMessage
    finish_reason: Literal["stop"] = "stop"


class Usage(BaseModel):
    """Token usage. The router does no token accounting, so these stay zero."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletion(BaseModel):
    id: str = Field(default_factory=new_completion_id)
    object: Literal["chat.completion"] = "chat.completion"
    created: int = Field(default_factory=_now)
    model: str
    choices: list[CompletionChoice]
    usage: Usage = Field(default_factory=Usage)

    @classmethod
    def from_answer(cls, answer: str, model: str) -> "ChatCompletion":
        return cls(
            model=model,
            choices=[CompletionChoice(message=AssistantMessage(content=answer))],
        )


# -- Streaming response --


class ChunkChoice(BaseModel):
    index: int = 0
    delta: dict[str, str] = Field(default_factory=dict)
    finish_reason: Literal["stop"] | None = None


class ChatCompletionChunk(BaseModel):
    id: str
    object: Literal["chat.completion.chunk"] = "chat.completion.chunk"
    created: int = Field(default_factory=_now)
    model: str
    choices: list[ChunkChoice]

    @classmethod
    def content(cls, completion_id: str, model: str, fragment: str) -> "ChatCompletionChunk":
        return cls(id=completion_id, model=model, choices=[ChunkChoice(delta={"content": fragment})])

    @classmethod
    def stop(cls, completion_id: str, model: str) -> "ChatCompletionChunk":
        return cls(id=completion_id, model=model, choices=[ChunkChoice(finish_reason="stop")])


def sse_event(payload: BaseModel | dict[str, Any]) -> str:
    """Frame one payload as a server-sent event line."""
    if isinstance(payload, BaseModel):
        data = payload.model_dump_json()
    else:
        data = json.dumps(payload)
    return f"data: {data}\n\n"


def sse_error(message: str) -> str:
    """Frame a mid-stream failure the way OpenAI streams report errors."""
    return sse_event({"error": {"message": message, "type": "generation_error"}})


# -- Model listing --


class ModelCard(BaseModel):
    id: str
    object: Literal["model"] = "model"
    created: int = Field(default_factory=_now)
    owned_by: str = "smart-router"


class ModelList(BaseModel):
    object: Literal["list"] = "list"
    data: list[ModelCard]

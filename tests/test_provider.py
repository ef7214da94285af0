# This project was developed with assistance from AI tools.
"""Tests for the OpenAI-compatible provider client.

The openai SDK client is replaced with mocks; no network access.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError

from smart_router.core.exceptions import ProviderError
from smart_router.inference.client import OpenAICompatibleProvider
from smart_router.inference.config import ModelTier


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _chunk(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class _FakeStream:
    """Stands in for openai's AsyncStream: async-iterable with an async close()."""

    def __init__(self, chunks, error: Exception | None = None) -> None:
        self._chunks = chunks
        self._error = error
        self.closed = False

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error

    async def close(self) -> None:
        self.closed = True


def _connection_error() -> APIConnectionError:
    return APIConnectionError(request=httpx.Request("POST", "http://localhost:8000/v1"))


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def llm(router_config, mock_client) -> OpenAICompatibleProvider:
    provider = OpenAICompatibleProvider(router_config)
    provider._get_client = MagicMock(return_value=mock_client)
    return provider


# -- Structured generation --


@pytest.mark.asyncio
async def test_generate_structured_requests_json_schema(llm, mock_client):
    mock_client.chat.completions.create.return_value = _completion('{"classification": "TRIVIAL"}')
    schema = {"type": "object"}

    result = await llm.generate_structured("test-classifier", "prompt", schema, name="q")

    assert result == {"classification": "TRIVIAL"}
    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-classifier"
    assert kwargs["response_format"]["type"] == "json_schema"
    assert kwargs["response_format"]["json_schema"]["schema"] is schema
    assert kwargs["response_format"]["json_schema"]["name"] == "q"


@pytest.mark.asyncio
async def test_generate_structured_rejects_invalid_json(llm, mock_client):
    mock_client.chat.completions.create.return_value = _completion("TRIVIAL, probably")

    with pytest.raises(ProviderError, match="not valid JSON"):
        await llm.generate_structured("test-classifier", "prompt", {})


@pytest.mark.asyncio
async def test_generate_structured_rejects_non_object(llm, mock_client):
    mock_client.chat.completions.create.return_value = _completion('["TRIVIAL"]')

    with pytest.raises(ProviderError, match="not an object"):
        await llm.generate_structured("test-classifier", "prompt", {})


@pytest.mark.asyncio
async def test_generate_structured_wraps_sdk_errors(llm, mock_client):
    mock_client.chat.completions.create.side_effect = _connection_error()

    with pytest.raises(ProviderError):
        await llm.generate_structured("test-classifier", "prompt", {})


# -- Batch generation --


@pytest.mark.asyncio
async def test_generate_returns_message_content(llm, mock_client):
    mock_client.chat.completions.create.return_value = _completion("Paris")

    assert await llm.generate("test-fast", "capital of France?") == "Paris"
    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "capital of France?"}]


@pytest.mark.asyncio
async def test_generate_treats_null_content_as_empty(llm, mock_client):
    mock_client.chat.completions.create.return_value = _completion(None)
    assert await llm.generate("test-fast", "q") == ""


@pytest.mark.asyncio
async def test_generate_wraps_sdk_errors(llm, mock_client):
    mock_client.chat.completions.create.side_effect = _connection_error()

    with pytest.raises(ProviderError, match="test-fast"):
        await llm.generate("test-fast", "q")


# -- Streaming --


@pytest.mark.asyncio
async def test_stream_yields_non_empty_deltas_and_closes(llm, mock_client):
    stream = _FakeStream([_chunk("Once"), _chunk(None), _chunk(" upon"), _chunk("")])
    mock_client.chat.completions.create.return_value = stream

    fragments = await llm.stream("test-capable", "story")

    assert [f async for f in fragments] == ["Once", " upon"]
    assert stream.closed is True
    assert mock_client.chat.completions.create.call_args.kwargs["stream"] is True


@pytest.mark.asyncio
async def test_stream_skips_chunks_without_choices(llm, mock_client):
    stream = _FakeStream([SimpleNamespace(choices=[]), _chunk("a")])
    mock_client.chat.completions.create.return_value = stream

    fragments = await llm.stream("test-capable", "q")

    assert [f async for f in fragments] == ["a"]


@pytest.mark.asyncio
async def test_stream_open_error_raises_immediately(llm, mock_client):
    mock_client.chat.completions.create.side_effect = _connection_error()

    with pytest.raises(ProviderError):
        await llm.stream("test-capable", "q")


@pytest.mark.asyncio
async def test_stream_mid_error_is_wrapped_and_closes(llm, mock_client):
    stream = _FakeStream([_chunk("partial")], error=_connection_error())
    mock_client.chat.completions.create.return_value = stream

    fragments = await llm.stream("test-capable", "q")
    assert await fragments.__anext__() == "partial"
    with pytest.raises(ProviderError, match="interrupted"):
        await fragments.__anext__()
    assert stream.closed is True


@pytest.mark.asyncio
async def test_stream_transport_error_is_wrapped_and_closes(llm, mock_client):
    """A dropped connection while reading the body surfaces as ProviderError."""
    stream = _FakeStream([_chunk("partial")], error=httpx.RemoteProtocolError("peer closed"))
    mock_client.chat.completions.create.return_value = stream

    fragments = await llm.stream("test-capable", "q")
    assert await fragments.__anext__() == "partial"
    with pytest.raises(ProviderError, match="interrupted"):
        await fragments.__anext__()
    assert stream.closed is True


# -- Client selection --


def test_clients_are_cached_per_endpoint(router_config):
    provider = OpenAICompatibleProvider(router_config)

    assert provider._get_client("test-fast") is provider._get_client("test-classifier")


def test_unknown_model_uses_capable_endpoint(router_config):
    config = router_config.model_copy(
        update={
            "capable": ModelTier(
                provider="openai_compatible",
                model_name="test-capable",
                endpoint="http://capable:9000/v1",
            )
        }
    )
    provider = OpenAICompatibleProvider(config)

    client = provider._get_client("not-configured")

    assert str(client.base_url).startswith("http://capable:9000/v1")


def test_api_key_env_fallback(router_config, monkeypatch):
    monkeypatch.setenv("API_KEY", "sk-from-env")
    provider = OpenAICompatibleProvider(router_config)

    assert provider._get_client("test-fast").api_key == "sk-from-env"


def test_explicit_tier_selects_its_endpoint(router_config):
    """Two tiers sharing a model name still reach their own endpoints."""
    capable = ModelTier(
        provider="openai_compatible",
        model_name="test-fast",
        endpoint="http://capable:9000/v1",
        api_key="sk-capable",
    )
    provider = OpenAICompatibleProvider(router_config.model_copy(update={"capable": capable}))

    client = provider._get_client("test-fast", capable)

    assert str(client.base_url).startswith("http://capable:9000/v1")
    assert client.api_key == "sk-capable"


@pytest.mark.asyncio
async def test_reconfigure_keeps_client_pool(router_config):
    provider = OpenAICompatibleProvider(router_config)
    client = provider._get_client("test-fast")

    provider.reconfigure(router_config.model_copy(update={"complex_prompt_template": "{query}"}))

    assert provider._get_client("test-fast") is client
    await provider.aclose()

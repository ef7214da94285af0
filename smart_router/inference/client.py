# This project was developed with assistance from AI tools.
"""Generation provider interface and its OpenAI-compatible implementation.

The classifier and answer generator depend on ``GenerationProvider`` only, so
tests can hand them a fake. ``OpenAICompatibleProvider`` wraps the openai
Python SDK with a configurable base_url so it works against any
OpenAI-compatible endpoint (OpenAI, Gemini, vLLM, Ollama, etc.).
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from typing import Any

import httpx
from openai import AsyncOpenAI, OpenAIError

from ..core.exceptions import ProviderError
from .config import ModelTier, RouterConfig

logger = logging.getLogger(__name__)


class GenerationProvider(ABC):
    """The three calls the router makes against a generation backend.

    Each call takes the model id and, optionally, the ``ModelTier`` it was
    selected from. A tier pins the endpoint and key; without one the
    implementation resolves them from the model id.
    """

    @abstractmethod
    async def generate_structured(
        self,
        model: str,
        prompt: str,
        schema: dict[str, Any],
        *,
        name: str = "response",
        tier: ModelTier | None = None,
    ) -> dict[str, Any]:
        """Single-shot generation constrained to a JSON schema; returns the decoded object."""

    @abstractmethod
    async def generate(self, model: str, prompt: str, *, tier: ModelTier | None = None) -> str:
        """Single-shot free-text generation."""

    @abstractmethod
    async def stream(
        self, model: str, prompt: str, *, tier: ModelTier | None = None
    ) -> AsyncGenerator[str, None]:
        """Open a streamed generation and return its text fragments.

        The connection is established before this coroutine returns, so
        connection failures raise here rather than on the first pull.
        """

    def reconfigure(self, config: RouterConfig) -> None:
        """Adopt a hot-reloaded routing config."""

    async def aclose(self) -> None:
        """Release any pooled connections."""


class OpenAICompatibleProvider(GenerationProvider):
    """``GenerationProvider`` backed by OpenAI-compatible chat completions."""

    def __init__(
        self,
        config: RouterConfig,
        *,
        timeout: float = 60.0,
        max_retries: int = 2,
    ) -> None:
        self._config = config
        self._timeout = timeout
        self._max_retries = max_retries
        # Per-endpoint client cache, shared across config reloads
        self._clients: dict[tuple[str, str], AsyncOpenAI] = {}

    def reconfigure(self, config: RouterConfig) -> None:
        self._config = config

    def _tier_for(self, model: str) -> ModelTier:
        for tier in self._config.tiers():
            if tier.model_name == model:
                return tier
        # Unknown model names go to the capable tier's endpoint.
        return self._config.capable

    def _get_client(self, model: str, tier: ModelTier | None = None) -> AsyncOpenAI:
        """Return a cached AsyncOpenAI client for the endpoint serving ``model``."""
        tier = tier or self._tier_for(model)
        api_key = tier.api_key or os.environ.get("API_KEY") or "not-needed"
        key = (tier.endpoint, api_key)
        if key not in self._clients:
            self._clients[key] = AsyncOpenAI(
                base_url=tier.endpoint,
                api_key=api_key,
                timeout=self._timeout,
                max_retries=self._max_retries,
            )
        return self._clients[key]

    async def generate_structured(
        self,
        model: str,
        prompt: str,
        schema: dict[str, Any],
        *,
        name: str = "response",
        tier: ModelTier | None = None,
    ) -> dict[str, Any]:
        client = self._get_client(model, tier)
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": name, "schema": schema, "strict": True},
                },
            )
        except OpenAIError as exc:
            raise ProviderError(f"Structured generation failed on {model}") from exc

        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ProviderError(f"{model} returned output that is not valid JSON") from exc
        if not isinstance(result, dict):
            raise ProviderError(f"{model} returned JSON that is not an object")
        return result

    async def generate(self, model: str, prompt: str, *, tier: ModelTier | None = None) -> str:
        client = self._get_client(model, tier)
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            raise ProviderError(f"Generation failed on {model}") from exc
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def stream(
        self, model: str, prompt: str, *, tier: ModelTier | None = None
    ) -> AsyncGenerator[str, None]:
        client = self._get_client(model, tier)
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                stream=True,
            )
        except OpenAIError as exc:
            raise ProviderError(f"Streamed generation failed on {model}") from exc
        return self._iter_deltas(response, model)

    async def _iter_deltas(self, response: Any, model: str) -> AsyncGenerator[str, None]:
        """Yield content deltas, closing the HTTP response on every exit path.

        The SDK does not wrap transport errors raised while reading the body,
        so httpx errors are caught alongside the SDK's own.
        """
        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except (OpenAIError, httpx.HTTPError) as exc:
            raise ProviderError(f"Stream from {model} was interrupted") from exc
        finally:
            await response.close()

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()


def log_provider_status(config: RouterConfig) -> None:
    """Log the endpoints and models the router will use. Call at startup."""
    endpoints = sorted({tier.endpoint for tier in config.tiers()})
    logger.warning(
        "Smart router models: classifier=%s fast=%s capable=%s (endpoints=%s)",
        config.classifier_model,
        config.fast_model,
        config.capable_model,
        ", ".join(endpoints),
    )
    if not any(tier.api_key for tier in config.tiers()) and not os.environ.get("API_KEY"):
        logger.warning("No LLM API key configured; provider calls may be rejected")

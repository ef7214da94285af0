# This project was developed with assistance from AI tools.
"""Answer generation in batch and streaming modes."""

import logging
from collections.abc import AsyncGenerator

from ..core.exceptions import GenerationError, ProviderError
from ..schemas.routing import Classification
from .client import GenerationProvider
from .config import ModelTier, RouterConfig
from .router import select_tier

logger = logging.getLogger(__name__)


class AnswerGenerator:
    """Get an answer for a routed query from the selected model.

    TRIVIAL queries are sent verbatim. COMPLEX queries are wrapped in the
    configured elaboration template to nudge the model toward a longer,
    structured answer.
    """

    def __init__(self, provider: GenerationProvider, config: RouterConfig) -> None:
        self._provider = provider
        self._config = config
        self._complex_template = config.complex_prompt_template

    def build_prompt(self, query: str, classification: Classification) -> str:
        if classification is Classification.COMPLEX:
            return self._complex_template.replace("{query}", query)
        return query

    def _tier_for(self, model: str, classification: Classification) -> ModelTier | None:
        # The routed tier pins the endpoint; a model chosen elsewhere is resolved by name.
        tier = select_tier(classification, self._config)
        return tier if tier.model_name == model else None

    async def generate(
        self,
        query: str,
        model: str,
        classification: Classification = Classification.TRIVIAL,
    ) -> str:
        """Return the complete answer text.

        Raises:
            GenerationError: the provider call failed.
        """
        prompt = self.build_prompt(query, classification)
        try:
            return await self._provider.generate(
                model, prompt, tier=self._tier_for(model, classification)
            )
        except ProviderError as exc:
            logger.error("Answer generation failed with model %s: %s", model, exc)
            raise GenerationError("Failed to generate an answer from the model.") from exc

    async def generate_stream(
        self,
        query: str,
        model: str,
        classification: Classification = Classification.TRIVIAL,
    ) -> AsyncGenerator[str, None]:
        """Open a stream and return its fragments in provider order.

        The returned generator is single-use. Closing it (or exhausting it)
        closes the provider stream.

        Raises:
            GenerationError: the stream could not be opened. Failures after
                opening are raised from the returned generator.
        """
        prompt = self.build_prompt(query, classification)
        try:
            fragments = await self._provider.stream(
                model, prompt, tier=self._tier_for(model, classification)
            )
        except ProviderError as exc:
            logger.error("Could not open answer stream with model %s: %s", model, exc)
            raise GenerationError("Failed to generate a streaming answer from the model.") from exc
        return self._relay(fragments, model)

    async def _relay(
        self, fragments: AsyncGenerator[str, None], model: str
    ) -> AsyncGenerator[str, None]:
        try:
            async for fragment in fragments:
                if fragment:
                    yield fragment
        except ProviderError as exc:
            logger.error("Answer stream from model %s failed mid-stream: %s", model, exc)
            raise GenerationError("The answer stream was interrupted.") from exc
        finally:
            await fragments.aclose()

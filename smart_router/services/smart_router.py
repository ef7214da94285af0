# This project was developed with assistance from AI tools.
"""Smart router service: classify a query, pick a model, answer it.

One ``SmartRouter`` is built per ``RouterConfig``. ``get_smart_router`` is the
FastAPI dependency; it rebuilds the service when models.yaml is hot-reloaded,
reusing the existing provider.
"""

import logging

from ..core.config import settings
from ..core.exceptions import GenerationError
from ..inference.classifier import QueryClassifier
from ..inference.client import GenerationProvider, OpenAICompatibleProvider
from ..inference.config import RouterConfig, get_router_config
from ..inference.generator import AnswerGenerator
from ..inference.router import select_model
from ..schemas.routing import RoutingDecision, SmartAnswer

logger = logging.getLogger(__name__)


class SmartRouter:
    """Classifier + model selector + answer generator over one provider."""

    def __init__(self, config: RouterConfig, provider: GenerationProvider) -> None:
        self.config = config
        self.provider = provider
        self.classifier = QueryClassifier(provider, config)
        self.generator = AnswerGenerator(provider, config)

    @classmethod
    def from_config(cls, config: RouterConfig) -> "SmartRouter":
        provider = OpenAICompatibleProvider(
            config,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_retries=settings.LLM_MAX_RETRIES,
        )
        return cls(config, provider)

    async def route(self, query: str) -> RoutingDecision:
        """Classify ``query`` and select its model. Always succeeds."""
        classification = await self.classifier.classify(query)
        model = select_model(classification, self.config)
        logger.info("Query classified as %s, using model %s", classification.value, model)
        return RoutingDecision(classification=classification, model=model)

    async def answer(self, query: str) -> SmartAnswer:
        """Route and answer ``query``, folding generation failures into the result."""
        decision = await self.route(query)
        try:
            text = await self.generator.generate(query, decision.model, decision.classification)
        except GenerationError as exc:
            return SmartAnswer(
                classification=decision.classification,
                model_used=decision.model,
                error=f"Smart Router Error: {exc.message}",
            )
        return SmartAnswer(
            classification=decision.classification,
            model_used=decision.model,
            answer=text,
        )

    async def aclose(self) -> None:
        await self.provider.aclose()


_router: SmartRouter | None = None


def get_smart_router() -> SmartRouter:
    """Return the shared ``SmartRouter``, rebuilt when the routing config changes.

    A rebuilt router keeps the previous provider and its connection pools, so
    requests still running on the old router are not cut off.
    """
    global _router  # noqa: PLW0603
    config = get_router_config()
    if _router is None:
        _router = SmartRouter.from_config(config)
    elif _router.config is not config:
        logger.info("Routing config changed, rebuilding smart router")
        _router.provider.reconfigure(config)
        _router = SmartRouter(config, _router.provider)
    return _router


async def shutdown_smart_router() -> None:
    """Close the shared router's provider connections. Call at shutdown."""
    global _router  # noqa: PLW0603
    if _router is not None:
        await _router.aclose()
        _router = None

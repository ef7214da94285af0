# This project was developed with assistance from AI tools.
"""LLM-backed query classifier for model routing.

Asks the classifier model to label a query TRIVIAL or COMPLEX through
schema-constrained generation, so the answer is a decoded object rather than
free text that has to be parsed.

Fallback behaviour: any provider failure, whatever it raises, or undecodable
output is logged and the query is treated as COMPLEX, so the more capable
model handles uncertainty and the pipeline stays available.
"""

import logging
from typing import Any

from ..core.exceptions import ClassificationError
from ..schemas.routing import Classification
from .client import GenerationProvider
from .config import RouterConfig

logger = logging.getLogger(__name__)

CLASSIFICATION_PROMPT = """\
Analyze the following user query and classify it as either 'TRIVIAL' or 'COMPLEX'.
- A 'TRIVIAL' query can be answered with a short, factual statement, a simple \
definition, or a quick calculation. Examples: "What is the capital of France?", \
"How many feet are in a mile?".
- A 'COMPLEX' query requires in-depth explanation, creative generation, multi-step \
reasoning, or analysis of a nuanced topic. Examples: "Explain the theory of relativity \
in simple terms", "Write a short story about a robot who discovers music".

Respond ONLY with a JSON object. Do not add any other text or markdown formatting.

Query: "{query}"
"""

CLASSIFICATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "classification": {
            "type": "string",
            "enum": [c.value for c in Classification],
        },
    },
    "required": ["classification"],
    "additionalProperties": False,
}

FALLBACK_CLASSIFICATION = Classification.COMPLEX


def build_classification_prompt(query: str) -> str:
    return CLASSIFICATION_PROMPT.replace("{query}", query)


def decode_classification(result: dict[str, Any]) -> Classification:
    """Turn the provider's structured output into a ``Classification``."""
    value = result.get("classification")
    if not isinstance(value, str):
        raise ClassificationError("Classifier output has no 'classification' string")
    try:
        return Classification(value.strip().upper())
    except ValueError as exc:
        raise ClassificationError(f"Unknown classification '{value}'") from exc


class QueryClassifier:
    """Classify queries as TRIVIAL or COMPLEX using the configured classifier model."""

    def __init__(self, provider: GenerationProvider, config: RouterConfig) -> None:
        self._provider = provider
        self._tier = config.classifier
        self._model = config.classifier_model

    async def classify(self, query: str) -> Classification:
        """Return the query's classification. Never raises.

        Args:
            query: The user's message text. Non-empty; the caller enforces it.

        Returns:
            ``Classification.TRIVIAL`` or ``Classification.COMPLEX``; COMPLEX
            whenever the classifier call fails.
        """
        try:
            result = await self._provider.generate_structured(
                self._model,
                build_classification_prompt(query),
                CLASSIFICATION_SCHEMA,
                name="query_classification",
                tier=self._tier,
            )
            return decode_classification(result)
        except ClassificationError as exc:
            logger.warning(
                "Query classification failed (%s), defaulting to %s",
                exc,
                FALLBACK_CLASSIFICATION.value,
            )
            return FALLBACK_CLASSIFICATION
        except Exception:
            logger.warning(
                "Classifier call failed, defaulting to %s",
                FALLBACK_CLASSIFICATION.value,
                exc_info=True,
            )
            return FALLBACK_CLASSIFICATION

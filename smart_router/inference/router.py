# This project was developed with assistance from AI tools.
"""Model selection keyed off the query classification."""

from ..schemas.routing import Classification
from .config import ModelTier, RouterConfig


def select_tier(classification: Classification, config: RouterConfig) -> ModelTier:
    """Return the tier that answers a classification: TRIVIAL→fast, COMPLEX→capable."""
    if classification is Classification.TRIVIAL:
        return config.fast
    return config.capable


def select_model(classification: Classification, config: RouterConfig) -> str:
    """Return the backend model id for a classification.

    Pure lookup; both ids come from configuration.
    """
    return select_tier(classification, config).model_name

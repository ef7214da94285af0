# This project was developed with assistance from AI tools.
"""Inference module -- provider client, classification, model routing, generation."""

from .classifier import QueryClassifier
from .client import GenerationProvider, OpenAICompatibleProvider
from .config import RouterConfig, get_router_config
from .generator import AnswerGenerator
from .router import select_model, select_tier

__all__ = [
    "AnswerGenerator",
    "GenerationProvider",
    "OpenAICompatibleProvider",
    "QueryClassifier",
    "RouterConfig",
    "get_router_config",
    "select_model",
    "select_tier",
]

# This project was developed with assistance from AI tools.
"""Routing decision and smart answer schemas."""

import enum

from pydantic import BaseModel, Field


class Classification(str, enum.Enum):
    """How demanding a query is. Decides which backend model answers it."""

    TRIVIAL = "TRIVIAL"
    COMPLEX = "COMPLEX"


class RoutingDecision(BaseModel):
    """Outcome of classification plus model selection for one query."""

    classification: Classification
    model: str


class AnswerRequest(BaseModel):
    query: str = Field(description="Natural-language query to route and answer.")


class SmartAnswer(BaseModel):
    """Full result of routing and answering one query.

    When ``error`` is set, ``answer`` is empty and ``classification`` /
    ``model_used`` keep the routing decision that was made before the failure.
    """

    classification: Classification
    model_used: str
    answer: str = ""
    error: str | None = None

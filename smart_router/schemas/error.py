# This project was developed with assistance from AI tools.
"""Error response schema."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned for every 4xx/5xx answer.

    Shaped as ``{"error": "<message>"}`` so chat clients that only look for an
    ``error`` key can surface it; ``request_id`` correlates the failure with logs.
    """

    error: str = Field(description="Short human-readable explanation of the failure.")
    request_id: str = Field(
        default="",
        description="Correlation ID for tracing this request in logs.",
    )

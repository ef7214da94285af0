# This project was developed with assistance from AI tools.
"""Error taxonomy for the routing pipeline.

Every error carries a short, client-safe ``message`` and the HTTP status the
API layer answers with. Provider diagnostics stay in the logs.
"""


class SmartRouterError(Exception):
    """Base class for all routing pipeline errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SmartRouterError):
    """Request is malformed or carries no usable user query."""

    status_code = 400


class ProviderError(SmartRouterError):
    """The external generation provider failed or returned unusable output."""


class ClassificationError(SmartRouterError):
    """Classifier output could not be decoded. Always recovered locally."""


class GenerationError(SmartRouterError):
    """Answer generation failed, in batch mode or mid-stream."""

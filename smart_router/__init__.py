# This project was developed with assistance from AI tools.
"""OpenAI-compatible smart router for natural-language queries."""

__version__ = "0.1.0"

# This project was developed with assistance from AI tools.
"""
Application configuration.

All settings read from environment variables with sensible local dev defaults.
Model tiers (names, endpoints, keys) live in config/models.yaml; see
``smart_router.inference.config``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve project root .env regardless of CWD (matches inference/config.py approach)
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings -- single source of truth for env-driven config."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- App --
    APP_NAME: str = "smart-router"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # -- Server --
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # -- CORS --
    ALLOWED_HOSTS: list[str] = ["*"]

    # -- Routing --
    PUBLIC_MODEL_ID: str = Field(
        default="smart-router",
        description="Model id advertised on /v1/models. Clients may send anything.",
    )
    MODELS_CONFIG_PATH: str | None = Field(
        default=None,
        description="Override path to models.yaml. Defaults to <project root>/config/models.yaml.",
    )

    # -- LLM --
    LLM_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        description="Per-request timeout for calls to the generation provider.",
    )
    LLM_MAX_RETRIES: int = Field(
        default=2,
        description="Retries performed by the OpenAI SDK on transient provider errors.",
    )


settings = Settings()

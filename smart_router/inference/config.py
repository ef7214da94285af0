# This project was developed with assistance from AI tools.
"""Model routing configuration loader.

Reads config/models.yaml, substitutes ${ENV_VAR:-default} placeholders,
validates required fields, and supports mtime-based hot-reload so config
changes take effect without restarting the server.

Components never read the raw dict: they receive an immutable
``RouterConfig`` built from it at construction time.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from ..core.config import settings

# Load .env into os.environ so YAML ${VAR} placeholders resolve correctly.
# pydantic-settings reads .env into its Settings object but doesn't set
# os.environ; the YAML config loader needs actual env vars.
load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "models.yaml"
_CONFIG_PATH = (
    Path(settings.MODELS_CONFIG_PATH) if settings.MODELS_CONFIG_PATH else _DEFAULT_CONFIG_PATH
)
_cached_config: dict[str, Any] | None = None
_cached_mtime: float = 0.0
_cached_router_config: "RouterConfig | None" = None

_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)(?::-(.*?))?\}")

REQUIRED_MODEL_FIELDS = {"provider", "model_name", "endpoint"}
REQUIRED_TIERS = ("classifier", "fast", "capable")
SUPPORTED_PROVIDERS = {"openai_compatible"}

DEFAULT_COMPLEX_PROMPT_TEMPLATE = (
    'Provide a detailed, in-depth, and well-structured answer for the following query: "{query}"'
)


class ModelTier(BaseModel):
    """One backend model and where to reach it."""

    model_config = ConfigDict(frozen=True)

    provider: str
    model_name: str
    endpoint: str
    api_key: str = ""


class RouterConfig(BaseModel):
    """Immutable routing configuration shared by classifier, selector and generator."""

    model_config = ConfigDict(frozen=True)

    classifier: ModelTier
    fast: ModelTier
    capable: ModelTier
    complex_prompt_template: str = DEFAULT_COMPLEX_PROMPT_TEMPLATE

    @property
    def classifier_model(self) -> str:
        return self.classifier.model_name

    @property
    def fast_model(self) -> str:
        return self.fast.model_name

    @property
    def capable_model(self) -> str:
        return self.capable.model_name

    def tiers(self) -> list[ModelTier]:
        return [self.classifier, self.fast, self.capable]


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR:-default} patterns with environment values."""

    def _replace(match: re.Match) -> str:
        var_name = match.group(1)
        default = match.group(2) or ""
        return os.environ.get(var_name, default)

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars(obj: Any) -> Any:
    """Recursively resolve env var placeholders in a config tree."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _resolve_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_resolve_env_vars(item) for item in obj]
    return obj


def _validate_config(config: Any) -> None:
    """Validate tiers, required model fields and the routing section."""
    if not isinstance(config, dict):
        raise ValueError("models.yaml must be a mapping")

    models = config.get("models")
    if not models or not isinstance(models, dict):
        raise ValueError("models.yaml must contain a 'models' section with at least one model")

    missing_tiers = [tier for tier in REQUIRED_TIERS if tier not in models]
    if missing_tiers:
        raise ValueError(f"models.yaml is missing required tiers: {missing_tiers}")

    for name, model in models.items():
        if not isinstance(model, dict):
            raise ValueError(f"Model '{name}' must be a mapping")
        missing = REQUIRED_MODEL_FIELDS - set(model.keys())
        if missing:
            raise ValueError(f"Model '{name}' is missing required fields: {missing}")
        if model["provider"] not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Model '{name}' has unsupported provider '{model['provider']}'")
        if not model["model_name"]:
            raise ValueError(f"Model '{name}' has an empty model_name")

    routing = config.get("routing") or {}
    if not isinstance(routing, dict):
        raise ValueError("'routing' section must be a mapping")
    template = routing.get("complex_prompt_template")
    if template is not None and "{query}" not in template:
        raise ValueError("routing.complex_prompt_template must contain a {query} placeholder")


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load and validate models.yaml from disk."""
    config_path = path or _CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Model config not found: {config_path}")

    raw = config_path.read_text()
    config = yaml.safe_load(raw)
    config = _resolve_env_vars(config)
    _validate_config(config)
    return config


def get_config(path: Path | None = None) -> dict[str, Any]:
    """Return cached config, reloading if the file's mtime has changed.

    A reload that fails to parse or validate keeps serving the last good
    config. With nothing cached yet, the error propagates (startup fails).
    """
    global _cached_config, _cached_mtime, _cached_router_config  # noqa: PLW0603
    config_path = path or _CONFIG_PATH

    try:
        current_mtime = config_path.stat().st_mtime
    except FileNotFoundError:
        if _cached_config is not None:
            logger.warning("Config file disappeared, using cached config")
            return _cached_config
        raise

    if _cached_config is None or current_mtime > _cached_mtime:
        logger.info("Loading model config from %s", config_path)
        try:
            config = load_config(config_path)
        except (yaml.YAMLError, ValueError):
            if _cached_config is None:
                raise
            logger.warning(
                "Invalid model config at %s, keeping last valid config",
                config_path,
                exc_info=True,
            )
            _cached_mtime = current_mtime
            return _cached_config
        _cached_config = config
        _cached_mtime = current_mtime
        _cached_router_config = None

    return _cached_config


def build_router_config(config: dict[str, Any]) -> RouterConfig:
    """Build the immutable ``RouterConfig`` from a validated config dict."""
    models = config["models"]
    routing = config.get("routing") or {}
    return RouterConfig(
        classifier=ModelTier(**_tier_fields(models["classifier"])),
        fast=ModelTier(**_tier_fields(models["fast"])),
        capable=ModelTier(**_tier_fields(models["capable"])),
        complex_prompt_template=(
            routing.get("complex_prompt_template") or DEFAULT_COMPLEX_PROMPT_TEMPLATE
        ),
    )


def _tier_fields(model: dict[str, Any]) -> dict[str, Any]:
    fields = {key: model[key] for key in REQUIRED_MODEL_FIELDS}
    fields["api_key"] = model.get("api_key") or ""
    return fields


def get_router_config(path: Path | None = None) -> RouterConfig:
    """Return the current ``RouterConfig``, rebuilt whenever models.yaml reloads."""
    global _cached_router_config  # noqa: PLW0603
    config = get_config(path)
    if _cached_router_config is None:
        _cached_router_config = build_router_config(config)
    return _cached_router_config

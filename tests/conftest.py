# This project was developed with assistance from AI tools.
"""Shared fixtures: a deterministic fake provider and a client wired to it.

The real app from ``smart_router.main`` is a module singleton.
``_clean_overrides`` clears dependency_overrides after every test so a fake
router from one test never leaks into the next.
"""

import pytest
from fastapi.testclient import TestClient

from smart_router.core.exceptions import ProviderError
from smart_router.inference.config import ModelTier, RouterConfig
from smart_router.main import app as real_app
from smart_router.services.smart_router import SmartRouter, get_smart_router
from tests.fakes import FakeProvider


@pytest.fixture
def router_config() -> RouterConfig:
    def tier(name: str) -> ModelTier:
        return ModelTier(
            provider="openai_compatible",
            model_name=name,
            endpoint="http://localhost:8000/v1",
        )

    return RouterConfig(
        classifier=tier("test-classifier"),
        fast=tier("test-fast"),
        capable=tier("test-capable"),
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def smart_router(router_config, provider) -> SmartRouter:
    return SmartRouter(router_config, provider)


@pytest.fixture(autouse=True)
def _clean_overrides():
    """Clear app dependency overrides after each test."""
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture
def client(smart_router) -> TestClient:
    real_app.dependency_overrides[get_smart_router] = lambda: smart_router
    return TestClient(real_app)


@pytest.fixture
def provider_error() -> ProviderError:
    return ProviderError("upstream unavailable")

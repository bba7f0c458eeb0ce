"""pytest configuration and fixtures for prompt-fanout tests.

This module provides shared fixtures for unit tests.
Fixtures are minimal and focused.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Generator
from typing import TYPE_CHECKING

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from prompt_fanout.core.config import Settings, get_settings
from prompt_fanout.core.logging import reset_logging
from prompt_fanout.models.registry import ModelDescriptor, get_registry


if TYPE_CHECKING:
    from fastapi import FastAPI

# =============================================================================
# Constants
# =============================================================================

TEST_API_KEY = "hf_test_token"
TEST_PROMPT = "Write a haiku about rain"


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_caches() -> Generator[None, None, None]:
    """Clear cached settings/registry and logging state around each test."""
    get_settings.cache_clear()
    get_registry.cache_clear()
    reset_logging()
    yield
    get_settings.cache_clear()
    get_registry.cache_clear()
    reset_logging()


# =============================================================================
# Settings & Registry Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings with a credential and no tracing."""
    return Settings(hf_api_key=TEST_API_KEY, log_level="DEBUG")


@pytest.fixture
def settings_without_key() -> Settings:
    """Settings with the credential explicitly unset."""
    return Settings(hf_api_key=None)


@pytest.fixture
def hf_model() -> ModelDescriptor:
    return ModelDescriptor(
        id="zephyr-7b",
        label="Zephyr 7B Beta",
        provider="huggingface",
        model_name="HuggingFaceH4/zephyr-7b-beta",
    )


@pytest.fixture
def models() -> tuple[ModelDescriptor, ...]:
    """Mixed registry: two huggingface models around an unsupported one."""
    return (
        ModelDescriptor(
            id="mistral-7b",
            label="Mistral 7B Instruct",
            provider="huggingface",
            model_name="mistralai/Mistral-7B-Instruct-v0.2",
        ),
        ModelDescriptor(
            id="gpt-4o-mini",
            label="GPT-4o mini",
            provider="openai",
            model_name="gpt-4o-mini",
        ),
        ModelDescriptor(
            id="zephyr-7b",
            label="Zephyr 7B Beta",
            provider="huggingface",
            model_name="HuggingFaceH4/zephyr-7b-beta",
        ),
    )


# =============================================================================
# Outbound HTTP Fixtures
# =============================================================================


@pytest.fixture
def hf_transport() -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport that answers every request with one response.

    Recorded requests are available as ``transport.requests``.
    """

    def _build(
        json_body: object = None,
        status_code: int = 200,
        text: str | None = None,
    ) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body)

        transport = httpx.MockTransport(_handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return _build


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """FastAPI application built from test settings."""
    from prompt_fanout.main import create_app

    return create_app(settings)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://testserver") as client:
        yield client

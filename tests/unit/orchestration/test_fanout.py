"""Tests for FanoutMode orchestration.

Tests verify:
- All models are dispatched concurrently
- Results follow registry order, not completion order
- Unsupported providers yield a placeholder without a call
- Provider errors fail the request unless failures are isolated
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from prompt_fanout.core.config import Settings
from prompt_fanout.core.exceptions import ConfigurationError, UpstreamError
from prompt_fanout.models.registry import ModelDescriptor
from prompt_fanout.orchestration.fanout import (
    AttemptFailure,
    AttemptSuccess,
    FanoutMode,
)
from prompt_fanout.providers.huggingface import HuggingFaceProvider
from tests.unit.providers.mock_provider import MockProvider


PROMPT = "Name a colour"


def _model(model_id: str, provider: str = "mock") -> ModelDescriptor:
    return ModelDescriptor(
        id=model_id,
        label=model_id.upper(),
        provider=provider,
        model_name=f"org/{model_id}",
    )


class TestResults:
    @pytest.mark.asyncio
    async def test_one_result_per_model_in_registry_order(self) -> None:
        models = [_model("a"), _model("b"), _model("c")]
        provider = MockProvider(
            delays={"org/a": 0.05, "org/b": 0.0, "org/c": 0.02},
        )
        mode = FanoutMode(models, {"mock": provider})

        results = await mode.execute(PROMPT)

        assert [r.id for r in results] == ["a", "b", "c"]
        assert [r.label for r in results] == ["A", "B", "C"]
        assert results[0].output == f"org/a: {PROMPT}"
        # b finished first, but order follows the registry
        assert provider.completed[0] == "org/b"

    @pytest.mark.asyncio
    async def test_all_attempts_start_before_any_finishes(self) -> None:
        models = [_model(str(i)) for i in range(5)]
        provider = MockProvider(delays={f"org/{i}": 0.01 for i in range(5)})
        mode = FanoutMode(models, {"mock": provider})

        task = asyncio.ensure_future(mode.execute(PROMPT))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        started = len(provider.calls)
        await task

        assert started == 5

    @pytest.mark.asyncio
    async def test_empty_registry(self) -> None:
        assert await FanoutMode([], {}).execute(PROMPT) == []

    @pytest.mark.asyncio
    async def test_prompt_passed_unchanged(self) -> None:
        provider = MockProvider()
        mode = FanoutMode([_model("a"), _model("b")], {"mock": provider})

        await mode.execute(PROMPT)

        assert sorted(provider.calls) == [("org/a", PROMPT), ("org/b", PROMPT)]


class TestUnsupportedProvider:
    @pytest.mark.asyncio
    async def test_placeholder_without_call(self) -> None:
        provider = MockProvider()
        models = [_model("a"), _model("x", provider="openai")]
        mode = FanoutMode(models, {"mock": provider})

        results = await mode.execute(PROMPT)

        assert results[1].output == "Provider not implemented"
        assert results[1].error is None
        assert provider.calls == [("org/a", PROMPT)]

    def test_provider_lookup_normalizes_tag(self) -> None:
        provider = MockProvider()
        mode = FanoutMode([], {"mock": provider})
        assert mode.provider_for(_model("a", provider=" Mock ")) is provider
        assert mode.provider_for(_model("a", provider="openai")) is None


class TestFailFast:
    @pytest.mark.asyncio
    async def test_provider_error_propagates(self) -> None:
        provider = MockProvider(
            errors={"org/b": UpstreamError("HF error (org/b): 500 - boom")}
        )
        mode = FanoutMode([_model("a"), _model("b")], {"mock": provider})

        with pytest.raises(UpstreamError, match="boom"):
            await mode.execute(PROMPT)

    @pytest.mark.asyncio
    async def test_missing_credential_propagates(self) -> None:
        async with httpx.AsyncClient() as client:
            hf = HuggingFaceProvider(client=client, api_key=None)
            mode = FanoutMode([_model("a", provider="huggingface")], {"huggingface": hf})

            with pytest.raises(ConfigurationError, match="HF_API_KEY"):
                await mode.execute(PROMPT)


class TestIsolatedFailures:
    @pytest.mark.asyncio
    async def test_failure_recorded_per_model(self) -> None:
        provider = MockProvider(errors={"org/b": RuntimeError("connection reset")})
        models = [_model("a"), _model("b"), _model("x", provider="openai")]
        mode = FanoutMode(models, {"mock": provider}, isolate_failures=True)

        results = await mode.execute(PROMPT)

        assert len(results) == 3
        assert results[0].output == f"org/a: {PROMPT}"
        assert results[0].error is None
        assert results[1].error == "connection reset"
        assert results[1].output == "Error: connection reset"
        assert results[2].output == "Provider not implemented"

    @pytest.mark.asyncio
    async def test_attempt_outcome_variants(self) -> None:
        provider = MockProvider(errors={"org/b": RuntimeError("nope")})
        mode = FanoutMode([], {"mock": provider}, isolate_failures=True)

        ok = await mode._attempt(_model("a"), PROMPT)
        failed = await mode._attempt(_model("b"), PROMPT)

        assert isinstance(ok, AttemptSuccess)
        assert isinstance(failed, AttemptFailure)
        assert failed.reason == "nope"


class TestFromSettings:
    @pytest.mark.asyncio
    async def test_builds_supported_providers_only(
        self,
        settings: Settings,
        models: tuple[ModelDescriptor, ...],
        hf_transport: Callable[..., httpx.MockTransport],
    ) -> None:
        transport = hf_transport([{"generated_text": "hello"}])
        async with httpx.AsyncClient(transport=transport) as client:
            mode = FanoutMode.from_settings(settings, client, models)
            results = await mode.execute(PROMPT)

        assert list(mode.providers) == ["huggingface"]
        assert mode.isolate_failures is False
        assert [r.output for r in results] == [
            "hello",
            "Provider not implemented",
            "hello",
        ]
        assert len(transport.requests) == 2  # type: ignore[attr-defined]

    def test_isolation_follows_settings(self, models: tuple[ModelDescriptor, ...]) -> None:
        settings = Settings(hf_api_key="k", isolate_failures=True)
        mode = FanoutMode.from_settings(settings, httpx.AsyncClient(), models)
        assert mode.isolate_failures is True
        assert mode.model_ids == ["mistral-7b", "gpt-4o-mini", "zephyr-7b"]

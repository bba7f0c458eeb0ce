"""Fan-out mode orchestration - one prompt → every registered model → results.

FanoutMode dispatches one inference attempt per Model Descriptor:
1. Every attempt is started before any is awaited (asyncio.gather)
2. Supported providers are called; unsupported ones get a placeholder
3. Results are joined in registry order, not completion order

Flow:
    Prompt → [All models](parallel) → Results (registry order)

Failure policy:
- isolate_failures=False (default): a provider error propagates out of
  execute() and fails the whole request.
- isolate_failures=True: each attempt captures its own error as an
  AttemptFailure; other models are unaffected.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from prompt_fanout.core.constants import PROVIDER_NOT_IMPLEMENTED
from prompt_fanout.core.logging import get_logger
from prompt_fanout.models.registry import ModelDescriptor
from prompt_fanout.models.responses import InferenceResult
from prompt_fanout.observability.tracing import provider_span
from prompt_fanout.providers.base import InferenceProvider
from prompt_fanout.providers.factory import ProviderFactory


if TYPE_CHECKING:
    import httpx

    from prompt_fanout.core.config import Settings


logger = get_logger(__name__)

FAILURE_OUTPUT_PREFIX = "Error: "


# =============================================================================
# Attempt Outcomes
# =============================================================================


@dataclass(frozen=True)
class AttemptSuccess:
    """A model produced output (or a placeholder for unsupported providers)."""

    model: ModelDescriptor
    output: str

    def to_result(self) -> InferenceResult:
        return InferenceResult(
            id=self.model.id,
            label=self.model.label,
            output=self.output,
        )


@dataclass(frozen=True)
class AttemptFailure:
    """A model's call raised; only produced when failures are isolated."""

    model: ModelDescriptor
    reason: str

    def to_result(self) -> InferenceResult:
        return InferenceResult(
            id=self.model.id,
            label=self.model.label,
            output=FAILURE_OUTPUT_PREFIX + self.reason,
            error=self.reason,
        )


AttemptOutcome = Union[AttemptSuccess, AttemptFailure]


# =============================================================================
# FanoutMode Implementation
# =============================================================================


class FanoutMode:
    """Fan a prompt out to every model in the registry.

    Attributes:
        models: Registry entries, in result order.
        providers: Provider instances keyed by normalized provider tag.
            A model whose tag is absent here is "not implemented".
        isolate_failures: Capture provider errors per model.

    Example:
        async with httpx.AsyncClient(timeout=None) as client:
            mode = FanoutMode.from_settings(settings, client, models)
            results = await mode.execute("Write a haiku about rain")
    """

    def __init__(
        self,
        models: Sequence[ModelDescriptor],
        providers: Mapping[str, InferenceProvider],
        isolate_failures: bool = False,
    ) -> None:
        self._models = tuple(models)
        self._providers = dict(providers)
        self._isolate_failures = isolate_failures

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient,
        models: Sequence[ModelDescriptor],
    ) -> FanoutMode:
        """Build a FanoutMode with one provider per supported tag in ``models``."""
        providers = ProviderFactory.create_all(
            [m.provider for m in models], settings, client
        )
        return cls(
            models=models,
            providers=providers,
            isolate_failures=settings.isolate_failures,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def models(self) -> tuple[ModelDescriptor, ...]:
        return self._models

    @property
    def model_ids(self) -> list[str]:
        return [m.id for m in self._models]

    @property
    def providers(self) -> dict[str, InferenceProvider]:
        return dict(self._providers)

    @property
    def isolate_failures(self) -> bool:
        return self._isolate_failures

    def provider_for(self, model: ModelDescriptor) -> InferenceProvider | None:
        """Provider that serves ``model``, or None if its tag is unsupported."""
        return self._providers.get(model.provider.strip().lower())

    # -------------------------------------------------------------------------
    # Main Execution
    # -------------------------------------------------------------------------

    async def execute(self, prompt: str) -> list[InferenceResult]:
        """Run every model on the prompt concurrently.

        Args:
            prompt: Prompt text shared (read-only) by all attempts.

        Returns:
            One InferenceResult per model, in registry order.

        Raises:
            Exception: The first provider error, when failures are not isolated.
        """
        start_time = time.perf_counter()
        logger.info("Fan-out started", model_count=len(self._models))

        outcomes = await asyncio.gather(
            *(self._attempt(model, prompt) for model in self._models)
        )

        failed = sum(1 for o in outcomes if isinstance(o, AttemptFailure))
        logger.info(
            "Fan-out finished",
            model_count=len(outcomes),
            failed_count=failed,
            elapsed_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return [outcome.to_result() for outcome in outcomes]

    async def _attempt(self, model: ModelDescriptor, prompt: str) -> AttemptOutcome:
        """Run one model, producing its outcome."""
        provider = self.provider_for(model)
        if provider is None:
            logger.info(
                "Provider not implemented",
                model_id=model.id,
                provider=model.provider,
            )
            return AttemptSuccess(model=model, output=PROVIDER_NOT_IMPLEMENTED)

        if not self._isolate_failures:
            return AttemptSuccess(model=model, output=await self._call(provider, model, prompt))

        try:
            output = await self._call(provider, model, prompt)
        except Exception as e:
            logger.warning(
                "Model attempt failed",
                model_id=model.id,
                provider=model.provider,
                error=str(e),
            )
            return AttemptFailure(model=model, reason=str(e))
        return AttemptSuccess(model=model, output=output)

    async def _call(
        self,
        provider: InferenceProvider,
        model: ModelDescriptor,
        prompt: str,
    ) -> str:
        logger.debug(
            "Dispatching model",
            model_id=model.id,
            provider=provider.name,
            model_name=model.model_name,
        )
        with provider_span(model.id, model.model_name, provider.name):
            return await provider.generate(model.model_name, prompt)

"""Base class for inference providers.

Defines the InferenceProvider ABC that every provider call routine
implements. A provider turns (model name, prompt) into generated text.

Patterns applied:
- ABC with @abstractmethod decorator
- Ports and adapters: InferenceProvider is the port, concrete classes
  (HuggingFaceProvider, ...) are the adapters
- Alternate constructor from_settings() so credentials are injected, never
  read from the environment inside a call
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar


if TYPE_CHECKING:
    import httpx

    from prompt_fanout.core.config import Settings


class InferenceProvider(ABC):
    """Abstract base class for inference providers.

    Example:
        class MyProvider(InferenceProvider):
            name = "my-provider"

            @classmethod
            def from_settings(cls, settings, client):
                return cls(client=client)

            async def generate(self, model_name, prompt):
                ...
                return "generated text"
    """

    name: ClassVar[str]

    @classmethod
    @abstractmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient
    ) -> InferenceProvider:
        """Build a provider from application settings.

        Args:
            settings: Application settings holding credentials and endpoints.
            client: Shared HTTP client owned by the caller.

        Returns:
            Configured provider instance.
        """
        ...

    @property
    def is_configured(self) -> bool:
        """Whether the provider has everything it needs to make calls.

        Providers that need credentials override this. Used by the
        readiness probe only; calls still fail on their own.
        """
        return True

    @abstractmethod
    async def generate(self, model_name: str, prompt: str) -> str:
        """Generate text for a prompt with one model.

        Args:
            model_name: Provider-side model identifier.
            prompt: Prompt text.

        Returns:
            Generated text, normalized to a single string.

        Raises:
            ConfigurationError: If the provider is missing its credential.
            UpstreamError: If the endpoint returns a non-success status.
            httpx.HTTPError: On network failure.
        """
        ...

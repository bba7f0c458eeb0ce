"""Provider factory mapping registry provider tags to call routines.

Per the GoF Factory pattern, the factory creates the provider that handles
a given tag, so the fan-out never branches on provider names itself.
Tags without a registered class are "not implemented": the fan-out answers
them with a placeholder instead of calling out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prompt_fanout.models.registry import ProviderName
from prompt_fanout.providers.base import InferenceProvider
from prompt_fanout.providers.huggingface import HuggingFaceProvider


if TYPE_CHECKING:
    import httpx

    from prompt_fanout.core.config import Settings


class ProviderFactoryError(ValueError):
    """Raised when the factory cannot create a provider for a tag."""


class ProviderFactory:
    """Factory for provider call routines.

    Tags are compared case-insensitively.

    Example:
        >>> ProviderFactory.supports("huggingface")
        True
        >>> ProviderFactory.supports("openai")
        False
        >>> provider = ProviderFactory.create("huggingface", settings, client)
    """

    _registry: dict[str, type[InferenceProvider]] = {
        ProviderName.HUGGINGFACE.value: HuggingFaceProvider,
    }

    @staticmethod
    def _normalize(tag: str) -> str:
        return tag.strip().lower()

    @classmethod
    def supports(cls, tag: str) -> bool:
        """Whether a call routine is registered for the tag."""
        return cls._normalize(tag) in cls._registry

    @classmethod
    def create(
        cls,
        tag: str,
        settings: Settings,
        client: httpx.AsyncClient,
    ) -> InferenceProvider:
        """Create a provider instance for a tag.

        Args:
            tag: Provider tag from the registry (e.g. "huggingface").
            settings: Application settings (credentials, endpoints).
            client: Shared HTTP client.

        Returns:
            Configured InferenceProvider.

        Raises:
            ProviderFactoryError: If no provider is registered for the tag.
        """
        key = cls._normalize(tag)
        if key not in cls._registry:
            raise ProviderFactoryError(
                f"Unknown provider: '{tag}'. "
                f"Supported providers: {list(cls._registry.keys())}. "
                "Use register_provider() to add custom providers."
            )
        return cls._registry[key].from_settings(settings, client)

    @classmethod
    def create_all(
        cls,
        tags: list[str],
        settings: Settings,
        client: httpx.AsyncClient,
    ) -> dict[str, InferenceProvider]:
        """Create one provider per distinct supported tag.

        Unsupported tags are skipped; the fan-out reports them per model.

        Returns:
            Mapping of normalized tag to provider instance.
        """
        providers: dict[str, InferenceProvider] = {}
        for tag in tags:
            key = cls._normalize(tag)
            if key in cls._registry and key not in providers:
                providers[key] = cls.create(key, settings, client)
        return providers

    @classmethod
    def register_provider(
        cls,
        tag: str,
        provider_class: type[InferenceProvider],
    ) -> None:
        """Register a provider class for a tag (Open/Closed extension point)."""
        cls._registry[cls._normalize(tag)] = provider_class

    @classmethod
    def unregister_provider(cls, tag: str) -> None:
        """Remove a registered provider. No-op if absent."""
        cls._registry.pop(cls._normalize(tag), None)

    @classmethod
    def get_registered_providers(cls) -> list[str]:
        """Return the tags that have registered call routines."""
        return list(cls._registry.keys())

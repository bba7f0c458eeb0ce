"""Hugging Face inference provider.

Calls the Hugging Face inference router over HTTPS:

    POST {base_url}/v1/inference/{model_name}
    Authorization: Bearer <HF_API_KEY>
    {"inputs": <prompt>, "parameters": {"max_new_tokens": 256, "temperature": 0.7}}

Patterns applied:
- InferenceProvider ABC implementation
- Credential injected via constructor, validated per call
- Shared httpx.AsyncClient passed in (owned by the application lifespan)
- Response body classified by parse_payload() (tagged union)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

import httpx

from prompt_fanout.core.constants import (
    DEFAULT_HF_BASE_URL,
    HF_API_KEY_ENV,
    HF_INFERENCE_PATH,
    MAX_NEW_TOKENS,
    TEMPERATURE,
)
from prompt_fanout.core.exceptions import ConfigurationError, UpstreamError
from prompt_fanout.core.logging import get_logger
from prompt_fanout.providers.base import InferenceProvider
from prompt_fanout.providers.payloads import parse_payload


if TYPE_CHECKING:
    from prompt_fanout.core.config import Settings


logger = get_logger(__name__)


class HuggingFaceProvider(InferenceProvider):
    """Provider for models served by the Hugging Face inference router.

    Args:
        client: Shared async HTTP client.
        api_key: Bearer token. A missing token fails every call with
            ConfigurationError rather than failing construction, so the
            service still starts and reports the problem per request.
        base_url: Router base URL without trailing slash.

    Example:
        >>> async with httpx.AsyncClient(timeout=None) as client:
        ...     provider = HuggingFaceProvider(client=client, api_key="hf_xxx")
        ...     text = await provider.generate("HuggingFaceH4/zephyr-7b-beta", "Hi")
    """

    name: ClassVar[str] = "huggingface"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = DEFAULT_HF_BASE_URL,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient
    ) -> HuggingFaceProvider:
        return cls(
            client=client,
            api_key=settings.hf_api_key,
            base_url=settings.hf_base_url,
        )

    @property
    def is_configured(self) -> bool:
        """True if an API key is configured."""
        return bool(self._api_key)

    def endpoint_for(self, model_name: str) -> str:
        """Full inference URL for a model."""
        return self._base_url + HF_INFERENCE_PATH.format(model_name=model_name)

    @staticmethod
    def build_payload(prompt: str) -> dict[str, Any]:
        """Request body with the fixed generation parameters."""
        return {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": MAX_NEW_TOKENS,
                "temperature": TEMPERATURE,
            },
        }

    async def generate(self, model_name: str, prompt: str) -> str:
        """Run one inference call and normalize the answer to text.

        Args:
            model_name: Hugging Face model id (e.g. "HuggingFaceH4/zephyr-7b-beta").
            prompt: Prompt text.

        Returns:
            The first generated_text when the body has that shape, otherwise
            the whole body as indented JSON.

        Raises:
            ConfigurationError: If no API key is configured.
            UpstreamError: If the router answers with a non-2xx status.
            httpx.HTTPError: On transport failure.
            ValueError: If a 2xx body is not valid JSON.
        """
        if not self._api_key:
            raise ConfigurationError(
                f"Missing {HF_API_KEY_ENV} environment variable",
                setting="hf_api_key",
            )

        response = await self._client.post(
            self.endpoint_for(model_name),
            headers={"Authorization": f"Bearer {self._api_key}"},
            json=self.build_payload(prompt),
        )

        if not response.is_success:
            logger.warning(
                "Upstream inference error",
                provider=self.name,
                model_name=model_name,
                status_code=response.status_code,
            )
            raise UpstreamError(
                f"HF error ({model_name}): {response.status_code} - {response.text}",
                model_name=model_name,
                status_code=response.status_code,
                body=response.text,
            )

        payload = parse_payload(response.json())
        logger.debug(
            "Upstream inference complete",
            provider=self.name,
            model_name=model_name,
            payload_shape=type(payload).__name__,
        )
        return payload.text

"""Inference providers for prompt-fanout.

Providers:
- base: InferenceProvider ABC
- huggingface: HuggingFaceProvider (Hugging Face inference router)
- factory: ProviderFactory (provider tag -> provider class)
- payloads: upstream response shapes
"""

from prompt_fanout.providers.base import InferenceProvider
from prompt_fanout.providers.factory import ProviderFactory, ProviderFactoryError
from prompt_fanout.providers.huggingface import HuggingFaceProvider
from prompt_fanout.providers.payloads import (
    GeneratedTextPayload,
    InferencePayload,
    UnknownPayload,
    parse_payload,
)


__all__: list[str] = [
    "GeneratedTextPayload",
    "HuggingFaceProvider",
    "InferencePayload",
    "InferenceProvider",
    "ProviderFactory",
    "ProviderFactoryError",
    "UnknownPayload",
    "parse_payload",
]

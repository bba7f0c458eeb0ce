"""Model registry: the static, ordered list of models a prompt fans out to.

The registry is configuration data. It is either the built-in DEFAULT_MODELS
list or loaded once from a YAML/JSON file named by FANOUT_MODELS_FILE.
Order is significant: results are returned in registry order.

File format (YAML shown; JSON with the same structure is accepted):

    models:
      - id: mistral-7b
        label: Mistral 7B Instruct
        provider: huggingface
        modelName: mistralai/Mistral-7B-Instruct-v0.2

A bare top-level list of entries is accepted too.
"""

from __future__ import annotations

import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from prompt_fanout.core.exceptions import ConfigurationError


# =============================================================================
# Provider Tags
# =============================================================================


class ProviderName(str, Enum):
    """Provider tags that may appear in the registry.

    Only providers with a registered call routine in ProviderFactory are
    dispatched; the rest produce a placeholder result.
    """

    HUGGINGFACE = "huggingface"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    REPLICATE = "replicate"


# =============================================================================
# Model Descriptor
# =============================================================================


class ModelDescriptor(BaseModel):
    """One registry entry.

    Attributes:
        id: Stable identifier echoed back in each result.
        label: Display name echoed back in each result.
        provider: Provider tag (see ProviderName). Unknown tags are kept
            as-is so they can be reported as not implemented.
        model_name: Provider-side model identifier (``modelName`` on the wire).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    label: str
    provider: str
    model_name: str = Field(alias="modelName")


DEFAULT_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="mistral-7b",
        label="Mistral 7B Instruct",
        provider=ProviderName.HUGGINGFACE.value,
        model_name="mistralai/Mistral-7B-Instruct-v0.2",
    ),
    ModelDescriptor(
        id="zephyr-7b",
        label="Zephyr 7B Beta",
        provider=ProviderName.HUGGINGFACE.value,
        model_name="HuggingFaceH4/zephyr-7b-beta",
    ),
    ModelDescriptor(
        id="llama-3-8b",
        label="Llama 3 8B Instruct",
        provider=ProviderName.HUGGINGFACE.value,
        model_name="meta-llama/Meta-Llama-3-8B-Instruct",
    ),
    ModelDescriptor(
        id="gpt-4o-mini",
        label="GPT-4o mini",
        provider=ProviderName.OPENAI.value,
        model_name="gpt-4o-mini",
    ),
)


# =============================================================================
# Loading
# =============================================================================


def parse_registry(data: Any) -> tuple[ModelDescriptor, ...]:
    """Validate raw registry data into descriptors.

    Args:
        data: A list of entries, or a mapping with a ``models`` list.

    Returns:
        Descriptors in file order.

    Raises:
        ConfigurationError: If the structure or any entry is invalid, or if
            two entries share an id.
    """
    if isinstance(data, dict):
        data = data.get("models")
    if not isinstance(data, list):
        raise ConfigurationError(
            "Model registry must be a list of models or a mapping with a 'models' list",
            setting="models_file",
        )

    try:
        models = tuple(ModelDescriptor.model_validate(entry) for entry in data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid model registry entry: {e}",
            setting="models_file",
        ) from e

    seen: set[str] = set()
    for model in models:
        if model.id in seen:
            raise ConfigurationError(
                f"Duplicate model id in registry: '{model.id}'",
                setting="models_file",
            )
        seen.add(model.id)

    return models


def load_registry(path: str | Path | None = None) -> tuple[ModelDescriptor, ...]:
    """Load the model registry.

    Args:
        path: YAML (.yaml/.yml) or JSON file. None returns DEFAULT_MODELS.

    Returns:
        Ordered, immutable tuple of descriptors.

    Raises:
        ConfigurationError: If the file is missing or unparseable.
    """
    if path is None:
        return DEFAULT_MODELS

    registry_path = Path(path)
    if not registry_path.is_file():
        raise ConfigurationError(
            f"Model registry file not found: {registry_path}",
            setting="models_file",
        )

    text = registry_path.read_text(encoding="utf-8")

    if registry_path.suffix.lower() in {".yaml", ".yml"}:
        import yaml

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Could not parse model registry {registry_path}: {e}",
                setting="models_file",
            ) from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Could not parse model registry {registry_path}: {e}",
                setting="models_file",
            ) from e

    return parse_registry(data)


@lru_cache
def get_registry(path: str | None = None) -> tuple[ModelDescriptor, ...]:
    """Get the registry for ``path``, loading each file once per process."""
    return load_registry(path)

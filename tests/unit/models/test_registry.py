"""Tests for the model registry."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from prompt_fanout.core.exceptions import ConfigurationError
from prompt_fanout.models.registry import (
    DEFAULT_MODELS,
    ModelDescriptor,
    ProviderName,
    get_registry,
    load_registry,
    parse_registry,
)


ENTRY = {
    "id": "zephyr-7b",
    "label": "Zephyr 7B Beta",
    "provider": "huggingface",
    "modelName": "HuggingFaceH4/zephyr-7b-beta",
}


class TestModelDescriptor:
    def test_wire_name_alias(self) -> None:
        model = ModelDescriptor.model_validate(ENTRY)
        assert model.model_name == "HuggingFaceH4/zephyr-7b-beta"
        assert model.model_dump(by_alias=True)["modelName"] == model.model_name

    def test_is_immutable(self) -> None:
        model = ModelDescriptor.model_validate(ENTRY)
        with pytest.raises(ValidationError):
            model.label = "changed"  # type: ignore[misc]

    def test_unknown_provider_tag_kept(self) -> None:
        model = ModelDescriptor.model_validate({**ENTRY, "provider": "cohere"})
        assert model.provider == "cohere"


class TestDefaultRegistry:
    def test_load_without_path_returns_defaults(self) -> None:
        assert load_registry() is DEFAULT_MODELS

    def test_defaults_have_unique_ids(self) -> None:
        ids = [m.id for m in DEFAULT_MODELS]
        assert len(ids) == len(set(ids))

    def test_defaults_include_huggingface(self) -> None:
        assert any(m.provider == ProviderName.HUGGINGFACE.value for m in DEFAULT_MODELS)


class TestParseRegistry:
    def test_accepts_bare_list(self) -> None:
        models = parse_registry([ENTRY])
        assert [m.id for m in models] == ["zephyr-7b"]

    def test_accepts_models_mapping(self) -> None:
        second = {**ENTRY, "id": "other"}
        models = parse_registry({"models": [ENTRY, second]})
        assert [m.id for m in models] == ["zephyr-7b", "other"]

    def test_rejects_non_list(self) -> None:
        with pytest.raises(ConfigurationError, match="list"):
            parse_registry({"model": ENTRY})

    def test_rejects_invalid_entry(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid model registry entry"):
            parse_registry([{"id": "x"}])

    def test_rejects_duplicate_ids(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate model id"):
            parse_registry([ENTRY, ENTRY])


class TestLoadRegistry:
    def test_loads_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "models.yaml"
        path.write_text(
            "models:\n"
            "  - id: a\n"
            "    label: Model A\n"
            "    provider: huggingface\n"
            "    modelName: org/a\n"
            "  - id: b\n"
            "    label: Model B\n"
            "    provider: openai\n"
            "    modelName: b\n",
            encoding="utf-8",
        )

        models = load_registry(path)

        assert [m.id for m in models] == ["a", "b"]
        assert models[0].model_name == "org/a"

    def test_loads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "models.json"
        path.write_text(json.dumps([ENTRY]), encoding="utf-8")

        assert load_registry(str(path))[0].id == "zephyr-7b"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_registry(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "models.yml"
        path.write_text("models: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_registry(path)

    def test_malformed_json(self, tmp_path: Path) -> None:
        path = tmp_path / "models.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_registry(path)

    def test_get_registry_caches_per_path(self, tmp_path: Path) -> None:
        path = tmp_path / "models.json"
        path.write_text(json.dumps([ENTRY]), encoding="utf-8")

        first = get_registry(str(path))
        path.write_text("[]", encoding="utf-8")

        assert get_registry(str(path)) is first

"""Upstream response payload shapes.

Inference endpoints answer with untyped JSON. parse_payload() classifies a
decoded body into one of a closed set of variants so callers never probe
the structure themselves:

- GeneratedTextPayload: ``[{"generated_text": "..."}, ...]``
- UnknownPayload: anything else, kept raw and rendered as indented JSON

An unknown shape is not an error; its text is the pretty-printed body.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


GENERATED_TEXT_KEY = "generated_text"


@dataclass(frozen=True)
class GeneratedTextPayload:
    """Text-generation task output: first element's generated_text."""

    text: str


@dataclass(frozen=True)
class UnknownPayload:
    """Unrecognized body, carried verbatim."""

    raw: Any

    @property
    def text(self) -> str:
        return json.dumps(self.raw, indent=2, ensure_ascii=False)


InferencePayload = Union[GeneratedTextPayload, UnknownPayload]


def parse_payload(data: Any) -> InferencePayload:
    """Classify a decoded JSON body.

    Args:
        data: Decoded JSON value from the inference endpoint.

    Returns:
        GeneratedTextPayload when ``data`` is a non-empty list whose first
        element is an object with a non-empty string ``generated_text``;
        UnknownPayload otherwise.

    Example:
        >>> parse_payload([{"generated_text": "hello"}]).text
        'hello'
        >>> parse_payload({"foo": "bar"}).text
        '{\\n  "foo": "bar"\\n}'
    """
    if isinstance(data, list) and data:
        first = data[0]
        if isinstance(first, dict):
            text = first.get(GENERATED_TEXT_KEY)
            if isinstance(text, str) and text:
                return GeneratedTextPayload(text=text)
    return UnknownPayload(raw=data)

"""Response schemas for prompt-fanout.

Patterns applied:
- Pydantic v2 BaseModel for every JSON body the service emits
- Optional fields dropped with model_dump(exclude_none=True)
"""

from pydantic import BaseModel, Field


class InferenceResult(BaseModel):
    """Outcome of one model for one prompt.

    Attributes:
        id: Registry id of the model.
        label: Registry label of the model.
        output: Generated text, fallback payload text, or a placeholder.
        error: Failure description. Only set when per-model failure
            isolation is enabled and the call failed.
    """

    id: str
    label: str
    output: str
    error: str | None = None


class GenerateResponse(BaseModel):
    """Success body: one result per registry entry, in registry order."""

    results: list[InferenceResult] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Flat error envelope: {"error": "<message>"}."""

    error: str

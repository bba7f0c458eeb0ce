"""Inbound request schema for the fan-out endpoint."""

from pydantic import BaseModel, Field


class InferenceRequest(BaseModel):
    """Body of a POST /generate request.

    Attributes:
        prompt: Text sent unchanged to every registered model.
    """

    prompt: str = Field(min_length=1, description="Prompt text to fan out")

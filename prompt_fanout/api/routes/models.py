"""Models API route: list the registry the fan-out uses."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from prompt_fanout.api.routes.generate import get_fanout


router = APIRouter(tags=["models"])


class ModelInfo(BaseModel):
    """One registry entry as exposed to clients.

    Attributes:
        id: Model identifier.
        label: Display label.
        provider: Provider tag.
        model_name: Provider-side model id (``modelName`` in JSON).
        supported: Whether the provider has a call routine.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    provider: str
    model_name: str = Field(serialization_alias="modelName")
    supported: bool


class ModelsListResponse(BaseModel):
    """Response for GET /models."""

    data: list[ModelInfo]


@router.get(
    "/models",
    response_model=ModelsListResponse,
    response_model_by_alias=True,
    summary="List registered models",
    description="Registered models in fan-out order.",
)
async def list_models(request: Request) -> ModelsListResponse:
    """List the model registry.

    Returns:
        ModelsListResponse with one entry per registered model.
    """
    fanout = get_fanout(request)
    return ModelsListResponse(
        data=[
            ModelInfo(
                id=m.id,
                label=m.label,
                provider=m.provider,
                model_name=m.model_name,
                supported=fanout.provider_for(m) is not None,
            )
            for m in fanout.models
        ]
    )

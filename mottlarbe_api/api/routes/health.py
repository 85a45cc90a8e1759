"""Health routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from mottlarbe_api import __version__
from mottlarbe_api.core.config import Settings
from mottlarbe_api.models.schemas import HealthResponse

router = APIRouter(tags=["Health"])


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
    )

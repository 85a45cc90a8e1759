"""Request and response schemas."""

from __future__ import annotations

from pydantic import BaseModel

from mottlarbe_api.core.config import Environment
from mottlarbe_api.core.validation import schema_config


class RequestSchema(BaseModel):
    """Base class for every inbound request body.

    Unknown fields are dropped before the handler sees the payload.
    """

    model_config = schema_config()


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: Environment

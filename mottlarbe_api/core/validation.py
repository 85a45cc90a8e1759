"""Global request validation behaviour."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from mottlarbe_api.core.errors import ValidationFailedError, domain_error_response

logger = logging.getLogger(__name__)

# Leading segment FastAPI puts on every error location ("body", "query", ...).
_SOURCE_SEGMENTS = {"body", "query", "path", "header", "cookie"}


class ValidationPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    strip_unknown_fields: bool = True
    stop_on_first_error: bool = True


VALIDATION_POLICY = ValidationPolicy()


def schema_config(policy: ValidationPolicy = VALIDATION_POLICY) -> ConfigDict:
    """Model config for inbound payload schemas under ``policy``."""

    return ConfigDict(extra="ignore" if policy.strip_unknown_fields else "forbid")


def to_validation_failed(
    errors: Sequence[Any],
    policy: ValidationPolicy = VALIDATION_POLICY,
) -> ValidationFailedError:
    """Collapse pydantic/FastAPI error entries into a single domain error."""

    if not errors:
        return ValidationFailedError("Request validation failed")

    first = errors[0]
    location = tuple(first.get("loc", ()))
    field_path = [str(part) for part in location]
    if field_path and field_path[0] in _SOURCE_SEGMENTS:
        field_path = field_path[1:]
    field = ".".join(field_path) or None

    message = first.get("msg", "Invalid value")
    if field:
        message = f"{field}: {message}"

    reported = None
    if not policy.stop_on_first_error:
        reported = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in errors
        ]

    return ValidationFailedError(message, field=field, location=location, errors=reported)


def install_validation(app: FastAPI, policy: ValidationPolicy = VALIDATION_POLICY) -> None:
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = to_validation_failed(exc.errors(), policy)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, error)
        return domain_error_response(error)

    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

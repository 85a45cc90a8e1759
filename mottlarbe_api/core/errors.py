"""Domain errors and HTTP mapping."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for domain-level failures."""

    error_code = "DOMAIN_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_detail(self) -> dict[str, Any]:
        return {
            "code": self.error_code,
            "message": str(self),
        }


class ValidationFailedError(DomainError):
    """Inbound payload rejected before reaching the route handler."""

    error_code = "VALIDATION_FAILED"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        location: tuple[str | int, ...] = (),
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.location = location
        self.errors = errors

    def to_detail(self) -> dict[str, Any]:
        detail = super().to_detail()
        detail["field"] = self.field
        detail["location"] = list(self.location)
        if self.errors is not None:
            detail["errors"] = self.errors
        return detail


def domain_error_response(error: DomainError) -> JSONResponse:
    """Map domain exceptions to a JSON error payload."""

    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.to_detail()},
    )


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    return domain_error_response(exc)


def internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


class UnexpectedErrorMiddleware:
    """Turn unhandled exceptions into a 500 payload.

    Mounted inside the CORS middleware so error responses still carry the
    cross-origin headers.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            logger.exception("Unexpected error on %s %s", scope["method"], scope["path"])
            if response_started:
                raise
            await internal_error_response()(scope, receive, send)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)

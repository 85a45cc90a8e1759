"""CORS policy and its enforcement middleware."""

from __future__ import annotations

import functools

from pydantic import BaseModel, ConfigDict
from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mottlarbe_api.core.config import Settings

ALLOWED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")
ALLOWED_HEADERS: tuple[str, ...] = (
    "Content-Type",
    "Authorization",
    "X-Requested-With",
    "Accept",
    "Origin",
    "Access-Control-Request-Method",
    "Access-Control-Request-Headers",
)
EXPOSED_HEADERS: tuple[str, ...] = ("set-cookie",)


class CorsPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_origins: frozenset[str]
    allow_credentials: bool = True
    allowed_methods: tuple[str, ...] = ALLOWED_METHODS
    allowed_headers: tuple[str, ...] = ALLOWED_HEADERS
    exposed_headers: tuple[str, ...] = EXPOSED_HEADERS
    preflight_continue: bool = False
    options_success_status: int = 204

    def is_allowed_origin(self, origin: str | None) -> bool:
        return origin is not None and origin in self.allowed_origins


def build_cors_policy(settings: Settings) -> CorsPolicy:
    # Browsers never send a trailing slash in Origin.
    return CorsPolicy(allowed_origins=frozenset({settings.frontend_url.rstrip("/")}))


class CORSPolicyMiddleware:
    """Apply a :class:`CorsPolicy` to every HTTP request.

    Permissive headers are only attached for allowed origins; anything else is
    left for the browser to reject. ``OPTIONS`` requests are answered here and
    never reach routing unless the policy asks for preflight continuation.
    """

    def __init__(self, app: ASGIApp, policy: CorsPolicy) -> None:
        self.app = app
        self.policy = policy

        permissive_headers = {
            "Access-Control-Allow-Methods": ", ".join(policy.allowed_methods),
            "Access-Control-Allow-Headers": ", ".join(policy.allowed_headers),
        }
        if policy.allow_credentials:
            permissive_headers["Access-Control-Allow-Credentials"] = "true"
        if policy.exposed_headers:
            permissive_headers["Access-Control-Expose-Headers"] = ", ".join(policy.exposed_headers)
        self.permissive_headers = permissive_headers

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")

        if scope["method"] == "OPTIONS" and not self.policy.preflight_continue:
            response = self.preflight_response(origin)
            await response(scope, receive, send)
            return

        if origin is None:
            await self.app(scope, receive, send)
            return

        send = functools.partial(self.send, send=send, origin=origin)
        await self.app(scope, receive, send)

    def preflight_response(self, origin: str | None) -> Response:
        response = Response(status_code=self.policy.options_success_status)
        self.apply_headers(response.headers, origin)
        return response

    async def send(self, message: Message, send: Send, origin: str) -> None:
        if message["type"] == "http.response.start":
            message.setdefault("headers", [])
            self.apply_headers(MutableHeaders(scope=message), origin)
        await send(message)

    def apply_headers(self, headers: MutableHeaders, origin: str | None) -> None:
        if origin is None:
            return
        headers.add_vary_header("Origin")
        if not self.policy.is_allowed_origin(origin):
            return
        headers["Access-Control-Allow-Origin"] = origin
        headers.update(self.permissive_headers)

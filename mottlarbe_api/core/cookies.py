"""Cookie header parsing."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import unquote

from fastapi import Request
from starlette.datastructures import Headers
from starlette.requests import cookie_parser
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

JSON_COOKIE_PREFIX = "j:"


def parse_cookie_header(raw: str) -> dict[str, Any]:
    """Parse a ``Cookie`` header into a name -> value mapping.

    Each ``name=value`` pair is read on its own. Pairs without a name are
    skipped, so a header made only of such pairs yields an empty mapping.
    """

    if not raw.strip():
        return {}

    cookies: dict[str, Any] = {}
    for name, value in cookie_parser(raw).items():
        if not name:
            logger.debug("Skipping nameless cookie pair in Cookie header")
            continue
        cookies[name] = _decode_value(value)
    return cookies


def _decode_value(value: str) -> Any:
    value = unquote(value)
    if value.startswith(JSON_COOKIE_PREFIX):
        try:
            return json.loads(value[len(JSON_COOKIE_PREFIX):])
        except ValueError:
            return value
    return value


class CookieParserMiddleware:
    """Store parsed cookies on ``request.state.cookies`` for every request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            raw = "; ".join(Headers(scope=scope).getlist("cookie"))
            scope.setdefault("state", {})["cookies"] = parse_cookie_header(raw)
        await self.app(scope, receive, send)


def get_cookies(request: Request) -> dict[str, Any]:
    return getattr(request.state, "cookies", {})

"""Application factory: applies the request policies in a fixed order."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from fastapi import APIRouter, FastAPI
from starlette.middleware import Middleware

from mottlarbe_api import __version__
from mottlarbe_api.api.routes.health import router as health_router
from mottlarbe_api.core.config import Settings, get_settings
from mottlarbe_api.core.cookies import CookieParserMiddleware
from mottlarbe_api.core.cors import CORSPolicyMiddleware, build_cors_policy
from mottlarbe_api.core.docs import DocsMount, build_docs_mount, mount_docs
from mottlarbe_api.core.errors import UnexpectedErrorMiddleware, install_error_handlers
from mottlarbe_api.core.validation import VALIDATION_POLICY, install_validation

logger = logging.getLogger(__name__)

DEFAULT_ROUTERS: tuple[APIRouter, ...] = (health_router,)


@dataclass(frozen=True)
class RouteSet:
    api_prefix: str
    routers: tuple[APIRouter, ...]
    docs: DocsMount | None = None

    @property
    def docs_enabled(self) -> bool:
        return self.docs is not None


def build_route_set(
    settings: Settings,
    routers: Sequence[APIRouter] | None = None,
) -> RouteSet:
    """Decide which routes exist for ``settings`` without building an app."""

    return RouteSet(
        api_prefix=settings.api_prefix,
        routers=tuple(DEFAULT_ROUTERS if routers is None else routers),
        docs=build_docs_mount(settings),
    )


def create_app(
    settings: Settings | None = None,
    *,
    routers: Sequence[APIRouter] | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    route_set = build_route_set(settings, routers)
    cors_policy = build_cors_policy(settings)

    # Middleware runs in list order: cookies are parsed before CORS is applied,
    # and unexpected errors become 500s inside CORS.
    app = FastAPI(
        title="MottLarbe API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        middleware=[
            Middleware(CookieParserMiddleware),
            Middleware(CORSPolicyMiddleware, policy=cors_policy),
            Middleware(UnexpectedErrorMiddleware),
        ],
    )
    app.state.settings = settings

    api_router = APIRouter(prefix=route_set.api_prefix)
    for router in route_set.routers:
        api_router.include_router(router)
    app.include_router(api_router)

    install_error_handlers(app)
    install_validation(app, VALIDATION_POLICY)

    if route_set.docs is not None:
        mount_docs(app, route_set.docs)
    else:
        logger.info("Documentation disabled in %s", settings.environment.value)

    return app

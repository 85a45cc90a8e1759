"""API documentation mounting for non-production environments."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from mottlarbe_api.core.config import Settings

logger = logging.getLogger(__name__)

BEARER_SCHEME_NAME = "bearer"


class BearerAuthScheme(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "http"
    scheme: str = "bearer"
    bearer_format: str = "JWT"
    header: str = "Authorization"
    description: str = 'Provide your JWT access token prefixed with "Bearer"'

    def to_openapi(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "scheme": self.scheme,
            "bearerFormat": self.bearer_format,
            "in": "header",
            "name": self.header,
            "description": self.description,
        }


class DocsMount(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_prefix: str
    mount_path: str
    openapi_path: str
    title: str = "MottLarbe API"
    description: str = "API documentation for the MottLarbe platform"
    version: str = "1.0"
    site_title: str = "MottLarbe API Docs"
    auth_scheme: BearerAuthScheme = Field(default_factory=BearerAuthScheme)
    servers: tuple[dict[str, str], ...] = ()
    persist_authorization: bool = True
    redirect_from_root_api: bool = True


def build_docs_mount(settings: Settings) -> DocsMount | None:
    """Describe the documentation surface, or ``None`` in production."""

    if settings.is_production:
        return None

    prefix = settings.api_prefix
    return DocsMount(
        api_prefix=prefix,
        mount_path=f"{prefix}/docs",
        openapi_path=f"{prefix}/docs-json",
        servers=(
            {
                "url": f"http://localhost:{settings.port}{prefix}",
                "description": "Local environment",
            },
        ),
    )


def build_openapi_manifest(app: FastAPI, mount: DocsMount) -> dict[str, Any]:
    """Generate the OpenAPI document for every route mounted on ``app``.

    Paths are relative to the declared server URL, which already carries the
    API prefix.
    """

    manifest = get_openapi(
        title=mount.title,
        version=mount.version,
        description=mount.description,
        routes=app.routes,
        servers=[dict(server) for server in mount.servers],
    )

    prefix = mount.api_prefix
    paths: dict[str, Any] = {}
    for path, item in manifest.get("paths", {}).items():
        if path == prefix or path.startswith(prefix + "/"):
            path = path[len(prefix):] or "/"
        paths[path] = item
    manifest["paths"] = paths

    components = manifest.setdefault("components", {})
    security_schemes = components.setdefault("securitySchemes", {})
    security_schemes[BEARER_SCHEME_NAME] = mount.auth_scheme.to_openapi()
    return manifest


def mount_docs(app: FastAPI, mount: DocsMount) -> None:
    """Serve the manifest and the Swagger UI described by ``mount``."""

    def openapi() -> dict[str, Any]:
        if app.openapi_schema is None:
            app.openapi_schema = build_openapi_manifest(app, mount)
        return app.openapi_schema

    app.openapi = openapi  # type: ignore[method-assign]

    async def openapi_json() -> JSONResponse:
        return JSONResponse(app.openapi())

    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(
            openapi_url=mount.openapi_path,
            title=mount.site_title,
            swagger_ui_parameters={"persistAuthorization": mount.persist_authorization},
        )

    app.add_api_route(mount.openapi_path, openapi_json, methods=["GET"], include_in_schema=False)
    app.add_api_route(mount.mount_path, swagger_ui, methods=["GET"], include_in_schema=False)

    if mount.redirect_from_root_api:
        register_root_redirect(app, mount.api_prefix, mount.mount_path)


def register_root_redirect(app: Any, path: str, target: str) -> bool:
    """Redirect ``GET path`` to ``target`` when ``app`` can register routes."""

    add_route = getattr(app, "add_api_route", None)
    if not callable(add_route):
        logger.warning(
            "%s does not support direct route registration; skipping %s -> %s redirect",
            type(app).__name__,
            path,
            target,
        )
        return False

    async def redirect_to_docs() -> RedirectResponse:
        return RedirectResponse(url=target, status_code=302)

    add_route(path, redirect_to_docs, methods=["GET"], include_in_schema=False)
    return True

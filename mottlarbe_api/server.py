"""HTTP listener."""

from __future__ import annotations

import logging
import socket

import uvicorn
from fastapi import FastAPI

from mottlarbe_api.core.config import Settings

logger = logging.getLogger(__name__)

STARTUP_FAILURE = 3


def application_url(settings: Settings) -> str:
    return f"http://localhost:{settings.port}{settings.api_prefix}"


class ApplicationServer(uvicorn.Server):
    """uvicorn server that announces the application URL once bound."""

    def __init__(self, config: uvicorn.Config, *, base_url: str) -> None:
        super().__init__(config)
        self.base_url = base_url

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            logger.info("Application is running on: %s", self.base_url)


def build_server(app: FastAPI, settings: Settings) -> ApplicationServer:
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return ApplicationServer(config, base_url=application_url(settings))


def serve(app: FastAPI, settings: Settings) -> None:
    """Block serving ``app``; exit the process if the socket never binds."""

    server = build_server(app, settings)
    server.run()
    if not server.started:
        logger.error("Server failed to start on %s:%s", settings.host, settings.port)
        raise SystemExit(STARTUP_FAILURE)

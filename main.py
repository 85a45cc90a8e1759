"""Convenience runner for local development."""

from __future__ import annotations

from mottlarbe_api.bootstrap import create_app
from mottlarbe_api.core.config import get_settings
from mottlarbe_api.core.log import configure_logging
from mottlarbe_api.server import serve


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    serve(create_app(settings), settings)


if __name__ == "__main__":
    main()

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mottlarbe_api.bootstrap import create_app
from mottlarbe_api.core.config import Environment, Settings, get_settings
from mottlarbe_api.core.cors import build_cors_policy
from mottlarbe_api.server import build_server

ENV_VARS = ("PORT", "FRONTEND_URL", "NODE_ENV", "HOST", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    settings = Settings(_env_file=None)

    assert settings.port == 9555
    assert settings.frontend_url == "http://localhost:3000"
    assert settings.node_env == "development"
    assert settings.environment is Environment.DEVELOPMENT
    assert settings.api_prefix == "/api"


def test_defaults_drive_listener_and_cors_origin() -> None:
    settings = Settings(_env_file=None)

    server = build_server(create_app(settings), settings)
    policy = build_cors_policy(settings)

    assert server.config.port == 9555
    assert policy.allowed_origins == frozenset({"http://localhost:3000"})


def test_reads_environment_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8081")
    monkeypatch.setenv("FRONTEND_URL", "https://app.mottlarbe.test")
    monkeypatch.setenv("NODE_ENV", "production")

    settings = Settings(_env_file=None)

    assert settings.port == 8081
    assert settings.frontend_url == "https://app.mottlarbe.test"
    assert settings.is_production


def test_reads_dotenv_file(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=7000\nNODE_ENV=staging\n", encoding="utf-8")

    settings = Settings(_env_file=env_file)

    assert settings.port == 7000
    assert settings.environment is Environment.OTHER
    assert not settings.is_production


def test_invalid_port_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, PORT="not-a-port")


def test_settings_are_immutable() -> None:
    settings = Settings(_env_file=None)

    with pytest.raises(ValidationError):
        settings.port = 1234


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()

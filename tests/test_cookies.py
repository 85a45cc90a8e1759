from __future__ import annotations

from typing import Any

import pytest
from fastapi import APIRouter, Depends
from fastapi.testclient import TestClient

from mottlarbe_api.bootstrap import create_app
from mottlarbe_api.core.config import Settings
from mottlarbe_api.core.cookies import get_cookies, parse_cookie_header


@pytest.fixture
def client() -> TestClient:
    router = APIRouter()

    @router.get("/cookies")
    def read_cookies(cookies: dict[str, Any] = Depends(get_cookies)) -> dict[str, Any]:
        return cookies

    settings = Settings(_env_file=None, NODE_ENV="development")
    with TestClient(create_app(settings, routers=[router])) as test_client:
        yield test_client


def test_parses_simple_cookies() -> None:
    assert parse_cookie_header("session=abc123; theme=dark") == {
        "session": "abc123",
        "theme": "dark",
    }


def test_decodes_percent_encoding_and_json_values() -> None:
    parsed = parse_cookie_header("name=J%C3%BCrgen; prefs=j%3A%7B%22lang%22%3A%22en%22%7D")

    assert parsed == {"name": "Jürgen", "prefs": {"lang": "en"}}


def test_invalid_json_cookie_keeps_raw_value() -> None:
    assert parse_cookie_header("prefs=j:nope") == {"prefs": "j:nope"}


@pytest.mark.parametrize("raw", ["", "   ", "broken", "=orphan", "; ;", "broken; =orphan"])
def test_malformed_headers_yield_empty_map(raw: str) -> None:
    assert parse_cookie_header(raw) == {}


def test_handler_receives_parsed_cookies(client: TestClient) -> None:
    response = client.get("/api/cookies", headers={"Cookie": "session=abc123"})

    assert response.status_code == 200
    assert response.json() == {"session": "abc123"}


def test_malformed_cookie_header_does_not_fail_request(client: TestClient) -> None:
    response = client.get("/api/cookies", headers={"Cookie": "broken; =orphan"})

    assert response.status_code == 200
    assert response.json() == {}


def test_missing_cookie_header_gives_empty_map(client: TestClient) -> None:
    response = client.get("/api/cookies")

    assert response.status_code == 200
    assert response.json() == {}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("version=2; session=abc", {"version": "2", "session": "abc"}),
        ("expires=soon; session=abc", {"expires": "soon", "session": "abc"}),
        ("session=abc; path=x; theme=dark", {"session": "abc", "path": "x", "theme": "dark"}),
        ("domain=a; secure=1; max-age=5", {"domain": "a", "secure": "1", "max-age": "5"}),
    ],
)
def test_attribute_named_cookies_are_kept(raw: str, expected: dict[str, str]) -> None:
    assert parse_cookie_header(raw) == expected


def test_nameless_pairs_do_not_drop_valid_cookies() -> None:
    assert parse_cookie_header("theme=dark; broken; =orphan") == {"theme": "dark"}


def test_attribute_named_cookies_reach_handler(client: TestClient) -> None:
    response = client.get("/api/cookies", headers={"Cookie": "version=2; session=abc"})

    assert response.status_code == 200
    assert response.json() == {"version": "2", "session": "abc"}

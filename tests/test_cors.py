from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from research_assistant.core.settings import get_settings
from research_assistant.main import create_app

_ALLOWED = "http://localhost:3000"
_DENIED = "https://evil.example.com"


def _preflight(client: TestClient, origin: str):
    return client.options(
        "/api/search",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )


def test_preflight_from_allowed_origin_allows_credentials(client: TestClient) -> None:
    res = _preflight(client, _ALLOWED)
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == _ALLOWED
    assert res.headers["access-control-allow-credentials"] == "true"
    assert "POST" in res.headers["access-control-allow-methods"]


def test_preflight_from_unknown_origin_is_not_allowed(client: TestClient) -> None:
    res = _preflight(client, _DENIED)
    assert res.status_code == 400
    assert "access-control-allow-origin" not in res.headers


def test_simple_request_without_origin_is_served(client: TestClient) -> None:
    res = client.get("/")
    assert res.status_code == 200
    assert "access-control-allow-origin" not in res.headers


def test_allow_list_comes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", '["https://app.example.org"]')
    get_settings.cache_clear()

    with TestClient(create_app()) as c:
        allowed = _preflight(c, "https://app.example.org")
        denied = _preflight(c, _ALLOWED)

    assert allowed.headers["access-control-allow-origin"] == "https://app.example.org"
    assert "access-control-allow-origin" not in denied.headers

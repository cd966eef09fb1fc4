from __future__ import annotations


def test_health_ok(client) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_root_returns_liveness_text(client) -> None:
    res = client.get("/")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    assert res.text == "Research Assistant Backend is running!"


def test_health_does_not_need_api_key(client, monkeypatch) -> None:
    from research_assistant.core.settings import get_settings

    monkeypatch.delenv("OPENROUTER_API_KEY")
    get_settings.cache_clear()

    assert client.get("/health").status_code == 200


def test_unknown_route_uses_error_body(client) -> None:
    res = client.get("/api/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {"error": "Not Found"}


def test_metrics_exposes_upstream_counter(client) -> None:
    res = client.get("/metrics")
    assert res.status_code == 200
    assert "http_requests_total" in res.text
    assert "upstream_completions_total" in res.text

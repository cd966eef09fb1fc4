from __future__ import annotations

import asyncio
import json

import httpx

from research_assistant.core.llm.openrouter_client import (
    CompletionClient,
    CompletionConfig,
    CompletionReply,
    CompletionRequest,
    UpstreamHTTPError,
    UpstreamTransportError,
)

_CONFIG = CompletionConfig(
    api_key="sk-test",
    base_url="https://llm.example.test/api/v1/",
    model="openai/gpt-3.5-turbo",
    timeout_seconds=5.0,
)

_REQUEST = CompletionRequest(
    messages=[{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}],
    temperature=0.3,
    max_tokens=300,
)


def _complete(handler, request: CompletionRequest = _REQUEST):
    client = CompletionClient(config=_CONFIG, transport=httpx.MockTransport(handler))
    return asyncio.run(client.complete(request))


def _ok(content) -> httpx.Response:
    message = {"role": "assistant", "content": content}
    return httpx.Response(200, json={"choices": [{"message": message}]})


def test_sends_one_authenticated_post_with_fixed_parameters() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok("hello")

    result = _complete(handler)

    assert result == CompletionReply(content="hello")
    assert len(seen) == 1
    sent = seen[0]
    assert sent.method == "POST"
    assert str(sent.url) == "https://llm.example.test/api/v1/chat/completions"
    assert sent.headers["authorization"] == "Bearer sk-test"
    body = json.loads(sent.content)
    assert body == {
        "model": "openai/gpt-3.5-turbo",
        "messages": _REQUEST.messages,
        "temperature": 0.3,
        "max_tokens": 300,
    }


def test_includes_response_format_when_requested() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return _ok("{}")

    request = CompletionRequest(
        messages=[{"role": "user", "content": "q"}],
        temperature=0.1,
        max_tokens=1000,
        response_format={"type": "json_object"},
    )
    _complete(handler, request)

    assert seen[0]["response_format"] == {"type": "json_object"}


def test_empty_or_missing_content_is_none() -> None:
    assert _complete(lambda r: _ok("")) == CompletionReply(content=None)
    assert _complete(lambda r: _ok(None)) == CompletionReply(content=None)
    assert _complete(lambda r: httpx.Response(200, json={"choices": []})) == CompletionReply(
        content=None
    )
    assert _complete(lambda r: httpx.Response(200, json={})) == CompletionReply(content=None)


def test_error_status_is_relayed_with_nested_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Rate limit exceeded", "code": 429}})

    assert _complete(handler) == UpstreamHTTPError(
        status_code=429, reason="Too Many Requests", message="Rate limit exceeded"
    )


def test_error_status_prefers_top_level_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "No auth credentials found"})

    result = _complete(handler)
    assert isinstance(result, UpstreamHTTPError)
    assert result.status_code == 401
    assert result.message == "No auth credentials found"


def test_error_status_with_non_json_body_has_no_message() -> None:
    result = _complete(lambda r: httpx.Response(502, text="<html>bad gateway</html>"))
    assert result == UpstreamHTTPError(status_code=502, reason="Bad Gateway", message=None)


def test_non_json_success_body_is_transport_error() -> None:
    result = _complete(lambda r: httpx.Response(200, text="not json"))
    assert isinstance(result, UpstreamTransportError)


def test_network_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _complete(handler)
    assert isinstance(result, UpstreamTransportError)
    assert "connection refused" in result.message


def test_timeout_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    assert _complete(handler) == UpstreamTransportError("Completion request timed out")

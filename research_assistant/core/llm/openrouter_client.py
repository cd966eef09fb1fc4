from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

import httpx


@dataclass(frozen=True)
class CompletionConfig:
    api_key: str
    base_url: str
    model: str
    timeout_seconds: float


@dataclass(frozen=True)
class CompletionRequest:
    messages: list[Any]
    temperature: float
    max_tokens: int
    response_format: dict[str, Any] | None = None


@dataclass(frozen=True)
class CompletionReply:
    """Successful round trip. `content` is None when the model returned no text."""

    content: str | None


@dataclass(frozen=True)
class UpstreamHTTPError:
    """The completion API answered with a non-2xx status."""

    status_code: int
    reason: str
    message: str | None


@dataclass(frozen=True)
class UpstreamTransportError:
    """The round trip did not complete, or a 2xx body was not JSON."""

    message: str


CompletionResult: TypeAlias = CompletionReply | UpstreamHTTPError | UpstreamTransportError


def _reply_content(data: Any) -> str | None:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(content, str) and content:
        return content
    return None


def _error_message(resp: httpx.Response) -> str | None:
    """
    Pull a human-readable message out of an error body.

    OpenRouter nests it as {"error": {"message": ...}}; some proxies put it at
    the top level. Non-JSON bodies yield None.
    """

    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    error = body.get("error")
    if isinstance(error, dict):
        nested = error.get("message")
        if isinstance(nested, str) and nested:
            return nested
    return None


class CompletionClient:
    """
    Minimal client for an OpenAI-compatible chat-completions endpoint.

    Design notes:
    - No logging in this module (prompts and replies carry user text).
    - Exactly one POST per `complete()` call.
    - `transport` exists so tests can plug in `httpx.MockTransport`.
    """

    def __init__(
        self,
        *,
        config: CompletionConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    def _payload(self, request: CompletionRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": request.messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.response_format is not None:
            payload["response_format"] = request.response_format
        return payload

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        url = f"{self._config.base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=self._payload(request))
        except httpx.TimeoutException:
            return UpstreamTransportError("Completion request timed out")
        except httpx.HTTPError as exc:
            return UpstreamTransportError(f"Completion request failed: {exc}")

        if not resp.is_success:
            return UpstreamHTTPError(
                status_code=resp.status_code,
                reason=resp.reason_phrase,
                message=_error_message(resp),
            )

        try:
            data = resp.json()
        except ValueError:
            return UpstreamTransportError("Completion response was not valid JSON")

        return CompletionReply(content=_reply_content(data))

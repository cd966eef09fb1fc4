"""Test doubles for the completion client."""

from __future__ import annotations

from research_assistant.core.llm.openrouter_client import (
    CompletionReply,
    CompletionRequest,
    CompletionResult,
)


class FakeCompletionClient:
    """Records every request and answers with `result` (a reply by default)."""

    def __init__(self, result: CompletionResult | None = None):
        self.result: CompletionResult = result or CompletionReply(content="stub reply")
        self.requests: list[CompletionRequest] = []

    def reply_with(self, content: str | None) -> None:
        self.result = CompletionReply(content=content)

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        self.requests.append(request)
        return self.result

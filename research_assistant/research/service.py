from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal, Protocol

from research_assistant.core.llm.openrouter_client import (
    CompletionReply,
    CompletionRequest,
    CompletionResult,
    UpstreamHTTPError,
    UpstreamTransportError,
)
from research_assistant.core.metrics import record_completion
from research_assistant.research.normalizers import (
    ShapingFailure,
    normalize_populated_fields,
    normalize_search_results,
    normalize_text,
)
from research_assistant.research.prompts import (
    build_chat_request,
    build_extract_request,
    build_insight_request,
    build_populate_form_request,
    build_search_request,
)
from research_assistant.research.schemas import (
    ChatOut,
    ExtractOut,
    InsightOut,
    PopulateFormOut,
    SearchOut,
)

logger = logging.getLogger("research_assistant.upstream")

ResearchRoute = Literal["search", "extract", "insight", "populate_form", "chat"]

# Suffix for "OpenRouter API error<suffix>: <reason>".
_UPSTREAM_ERROR_SUFFIX: dict[ResearchRoute, str] = {
    "search": "",
    "extract": " during extraction",
    "insight": " during insight generation",
    "populate_form": " during form population",
    "chat": " during chat",
}

_TRANSPORT_ERROR: dict[ResearchRoute, str] = {
    "search": "Failed to fetch search results from OpenRouter.",
    "extract": "Failed to generate outline from OpenRouter.",
    "insight": "Failed to generate insight from OpenRouter.",
    "populate_form": "Failed to populate form from OpenRouter.",
    "chat": "Failed to get chat response from OpenRouter.",
}


class LLMClient(Protocol):
    async def complete(self, request: CompletionRequest) -> CompletionResult: ...


@dataclass(frozen=True)
class RouteFailure:
    """A failed route call; the router turns it into an error response."""

    status_code: int
    error: str
    details: str | None = None


class ResearchAssistantService:
    """
    One method per API route: build the prompt, make one completion call,
    shape the reply.

    Methods return the route's output model or a RouteFailure; they do not
    raise for upstream or shaping problems.
    """

    def __init__(self, *, llm_client: LLMClient, request_id: str | None = None):
        self._llm = llm_client
        self._request_id = request_id

    async def _call(
        self, route: ResearchRoute, request: CompletionRequest
    ) -> str | None | RouteFailure:
        result = await self._llm.complete(request)

        if isinstance(result, CompletionReply):
            return result.content

        if isinstance(result, UpstreamHTTPError):
            record_completion(route=route, outcome="upstream_error")
            logger.error(
                "Completion API responded with an error",
                extra={
                    "request_id": self._request_id,
                    "route": route,
                    "upstream_status": result.status_code,
                    "upstream_message": result.message,
                },
            )
            return RouteFailure(
                status_code=result.status_code,
                error=f"OpenRouter API error{_UPSTREAM_ERROR_SUFFIX[route]}: {result.reason}",
                details=result.message or "Unknown error from OpenRouter",
            )

        if isinstance(result, UpstreamTransportError):
            record_completion(route=route, outcome="transport_error")
            logger.error(
                "Completion API call did not complete",
                extra={"request_id": self._request_id, "route": route},
            )
            return RouteFailure(
                status_code=500, error=_TRANSPORT_ERROR[route], details=result.message
            )

        raise TypeError(f"Unexpected completion result: {result!r}")

    def _shaping_failed(
        self, route: ResearchRoute, failure: ShapingFailure, *, empty: bool
    ) -> RouteFailure:
        record_completion(route=route, outcome="empty_reply" if empty else "unparsable_reply")
        logger.error(
            "Completion reply could not be shaped",
            extra={"request_id": self._request_id, "route": route, "status_code": 500},
        )
        return RouteFailure(status_code=500, error=failure.message)

    async def _text(
        self, route: ResearchRoute, request: CompletionRequest, missing_message: str
    ) -> str | RouteFailure:
        content = await self._call(route, request)
        if isinstance(content, RouteFailure):
            return content
        shaped = normalize_text(content=content, missing_message=missing_message)
        if isinstance(shaped, ShapingFailure):
            return self._shaping_failed(route, shaped, empty=True)
        record_completion(route=route, outcome="ok")
        return shaped

    async def search(self, *, query: str) -> SearchOut | RouteFailure:
        content = await self._call("search", build_search_request(query=query))
        if isinstance(content, RouteFailure):
            return content

        results, parsed_ok = normalize_search_results(
            query=query, content=content, year=datetime.now(UTC).year
        )
        if parsed_ok:
            record_completion(route="search", outcome="ok")
        else:
            # Search degrades to a placeholder result instead of failing.
            record_completion(
                route="search", outcome="empty_reply" if content is None else "unparsable_reply"
            )
            logger.warning(
                "Search reply replaced with placeholder",
                extra={"request_id": self._request_id, "route": "search"},
            )
        return SearchOut(results=results)

    async def extract(self, *, text: str) -> ExtractOut | RouteFailure:
        outline = await self._text(
            "extract", build_extract_request(text=text), "AI did not provide outline content."
        )
        if isinstance(outline, RouteFailure):
            return outline
        return ExtractOut(outline=outline)

    async def insight(self, *, text: str) -> InsightOut | RouteFailure:
        insight = await self._text(
            "insight", build_insight_request(text=text), "AI did not provide insight content."
        )
        if isinstance(insight, RouteFailure):
            return insight
        return InsightOut(insight=insight)

    async def populate_form(
        self, *, source_text: str, questions: list[Any]
    ) -> PopulateFormOut | RouteFailure:
        request = build_populate_form_request(source_text=source_text, questions=questions)
        content = await self._call("populate_form", request)
        if isinstance(content, RouteFailure):
            return content

        fields = normalize_populated_fields(questions=questions, content=content)
        if isinstance(fields, ShapingFailure):
            return self._shaping_failed("populate_form", fields, empty=content is None)
        record_completion(route="populate_form", outcome="ok")
        return PopulateFormOut(populated_fields=fields)

    async def chat(self, *, messages: list[Any]) -> ChatOut | RouteFailure:
        reply = await self._text(
            "chat",
            build_chat_request(messages=messages),
            "AI did not provide content for chat response.",
        )
        if isinstance(reply, RouteFailure):
            return reply
        return ChatOut(reply=reply)

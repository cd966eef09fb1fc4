from __future__ import annotations

from typing import TypeVar

from fastapi import APIRouter, Depends, Request, status

from research_assistant.api.schemas import ErrorOut
from research_assistant.core.llm.deps import get_completion_client
from research_assistant.core.llm.openrouter_client import CompletionClient
from research_assistant.core.middleware.http_logging import request_id_of
from research_assistant.domain.exceptions import ApiError
from research_assistant.research.schemas import (
    ChatIn,
    ChatOut,
    ExtractIn,
    ExtractOut,
    InsightIn,
    InsightOut,
    PopulateFormIn,
    PopulateFormOut,
    SearchIn,
    SearchOut,
)
from research_assistant.research.service import ResearchAssistantService, RouteFailure

router = APIRouter(
    prefix="/api",
    tags=["research"],
    responses={
        400: {"model": ErrorOut, "description": "Missing or malformed input."},
        500: {"model": ErrorOut, "description": "Missing API key or unusable model reply."},
    },
)

T = TypeVar("T")


# Bodies default to None so a request without one still gets the field-specific message.
def _require(present: object, message: str) -> None:
    # Empty strings and empty lists count as missing.
    if not present:
        raise ApiError(status.HTTP_400_BAD_REQUEST, message)


def _service(request: Request, llm_client: CompletionClient | None) -> ResearchAssistantService:
    if llm_client is None:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Server configuration error: API Key missing.",
        )
    return ResearchAssistantService(llm_client=llm_client, request_id=request_id_of(request))


def _unwrap(result: T | RouteFailure) -> T:
    if isinstance(result, RouteFailure):
        raise ApiError(result.status_code, result.error, result.details)
    return result


@router.post("/search", response_model=SearchOut)
async def search(
    request: Request,
    payload: SearchIn | None = None,
    llm_client: CompletionClient | None = Depends(get_completion_client),
) -> SearchOut:
    """Return 2-3 model-written result summaries for a query."""

    payload = payload or SearchIn()
    _require(payload.query, "Search query is required.")
    svc = _service(request, llm_client)
    return _unwrap(await svc.search(query=payload.query))


@router.post("/extract", response_model=ExtractOut)
async def extract(
    request: Request,
    payload: ExtractIn | None = None,
    llm_client: CompletionClient | None = Depends(get_completion_client),
) -> ExtractOut:
    """Turn a block of text into a bullet-point outline."""

    payload = payload or ExtractIn()
    _require(payload.text_to_extract, "Text to extract is required.")
    svc = _service(request, llm_client)
    return _unwrap(await svc.extract(text=payload.text_to_extract))


@router.post("/insight", response_model=InsightOut)
async def insight(
    request: Request,
    payload: InsightIn | None = None,
    llm_client: CompletionClient | None = Depends(get_completion_client),
) -> InsightOut:
    """Return the single most significant insight found in a block of text."""

    payload = payload or InsightIn()
    _require(payload.text_for_insight, "Text for insight is required.")
    svc = _service(request, llm_client)
    return _unwrap(await svc.insight(text=payload.text_for_insight))


@router.post("/populate_form", response_model=PopulateFormOut)
async def populate_form(
    request: Request,
    payload: PopulateFormIn | None = None,
    llm_client: CompletionClient | None = Depends(get_completion_client),
) -> PopulateFormOut:
    """
    Answer each question from the source text.

    The response has exactly one entry per requested question.
    """

    payload = payload or PopulateFormIn()
    _require(
        payload.source_text and payload.questions,
        "Source text and a list of questions are required.",
    )
    svc = _service(request, llm_client)
    return _unwrap(
        await svc.populate_form(source_text=payload.source_text, questions=payload.questions)
    )


@router.post("/chat", response_model=ChatOut)
async def chat(
    request: Request,
    payload: ChatIn | None = None,
    llm_client: CompletionClient | None = Depends(get_completion_client),
) -> ChatOut:
    """Continue a conversation; a fixed system turn is prepended server-side."""

    payload = payload or ChatIn()
    _require(payload.messages, "Messages array is required for chat.")
    svc = _service(request, llm_client)
    return _unwrap(await svc.chat(messages=payload.messages))

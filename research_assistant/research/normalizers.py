from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

RAW_PREVIEW_CHARS = 200

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|```\s*$")


@dataclass(frozen=True)
class ShapingFailure:
    """The model reply could not be turned into the shape a route promises."""

    message: str


def strip_code_fence(raw: str) -> str:
    """Remove a leading ```/```json line and a trailing ``` fence, then trim."""

    return _CODE_FENCE_RE.sub("", raw).strip()


def raw_preview(raw: str) -> str:
    return f"{raw[:RAW_PREVIEW_CHARS]}..."


def _empty_search_placeholder(*, query: str, year: int) -> dict[str, Any]:
    return {
        "id": 1,
        "title": f'No Relevant AI Response for "{query}" (Backend Search)',
        "source": f"OpenRouter API, {year}",
        "snippet": "The AI did not provide any content for your search query via the backend.",
    }


def _unparsable_search_placeholder(*, query: str, raw: str, year: int) -> dict[str, Any]:
    return {
        "id": 1,
        "title": f'AI Could Not Parse Results for "{query}" (Backend Error)',
        "source": f"OpenRouter API Parsing Issue, {year}",
        "snippet": (
            "The AI responded, but its output could not be formatted as expected by the "
            f"backend. Raw response (truncated): {raw_preview(raw)}"
        ),
    }


def parse_search_results(raw: str) -> list[dict[str, Any]] | None:
    """
    Parse a model reply into a list of result objects.

    Returns None unless the (fence-stripped) reply is a JSON array whose
    elements are all objects. Items without a truthy `id` get their 1-based
    position.
    """

    try:
        parsed = json.loads(strip_code_fence(raw))
    except ValueError:
        return None
    if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
        return None
    return [{**item, "id": item.get("id") or index + 1} for index, item in enumerate(parsed)]


def normalize_search_results(
    *, query: str, content: str | None, year: int
) -> tuple[list[dict[str, Any]], bool]:
    """
    Shape a search reply. Never fails: a missing or unusable reply becomes a
    single placeholder result.

    Returns (results, parsed_ok).
    """

    if content is None:
        return [_empty_search_placeholder(query=query, year=year)], False

    results = parse_search_results(content)
    if results is None:
        return [_unparsable_search_placeholder(query=query, raw=content, year=year)], False
    return results, True


def normalize_text(*, content: str | None, missing_message: str) -> str | ShapingFailure:
    if content is None:
        return ShapingFailure(missing_message)
    return content


def normalize_populated_fields(
    *, questions: list[Any], content: str | None
) -> dict[str, Any] | ShapingFailure:
    """
    Map every requested question to the model's answer, or "" when it gave none.

    The key set of the result always equals the requested question set; keys
    the model invented are dropped.
    """

    if content is None:
        return ShapingFailure("AI did not provide content for form population.")

    failure = ShapingFailure(
        "AI response parsing failed. Raw AI output (truncated): " + raw_preview(content)
    )
    try:
        answers = json.loads(strip_code_fence(content))
    except ValueError:
        return failure
    if answers is None:
        return failure
    if not isinstance(answers, dict):
        # Valid JSON of another shape answers nothing.
        answers = {}

    keys = [str(q) for q in questions]
    return {key: answers[key] if key in answers else "" for key in keys}

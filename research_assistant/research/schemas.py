from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Request fields are optional at the schema level: the routes check presence
# themselves so a missing field gets its own message instead of a generic 422.


class _CamelIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SearchIn(BaseModel):
    query: str | None = Field(default=None, examples=["effects of sleep on memory"])


class SearchOut(BaseModel):
    results: list[dict[str, Any]] = Field(
        description=(
            "Result summaries, each with at least `id`, `title`, `source` and `snippet`. "
            "Extra fields returned by the model are passed through."
        )
    )


class ExtractIn(_CamelIn):
    text_to_extract: str | None = Field(default=None, alias="textToExtract")


class ExtractOut(BaseModel):
    outline: str


class InsightIn(_CamelIn):
    text_for_insight: str | None = Field(default=None, alias="textForInsight")


class InsightOut(BaseModel):
    insight: str


class PopulateFormIn(_CamelIn):
    source_text: str | None = Field(default=None, alias="sourceText")
    questions: list[Any] | None = None


class PopulateFormOut(BaseModel):
    populated_fields: dict[str, Any] = Field(
        description="One entry per requested question; empty string when unanswered."
    )


class ChatIn(BaseModel):
    # Turns are forwarded verbatim; role/content are not validated.
    messages: list[Any] | None = None


class ChatOut(BaseModel):
    reply: str

from __future__ import annotations

from typing import Any

from research_assistant.core.llm.openrouter_client import CompletionRequest

SEARCH_SYSTEM_PROMPT = (
    "You are an AI research assistant. When asked a query, provide 2-3 concise, "
    'fictional search result-like summaries. Each summary should include a "title", '
    '"source" (e.g., Journal, Institute, Blog, Year), and a brief "snippet" '
    "(2-3 sentences). Present this data as a JSON array of objects. DO NOT include "
    "any conversational text outside the JSON."
)

EXTRACT_SYSTEM_PROMPT = (
    "You are an AI assistant specialized in extracting key information and structuring "
    "it into a concise outline. Format the outline using bullet points and sub-bullet "
    "points. Do NOT include any conversational text, only the outline."
)

INSIGHT_SYSTEM_PROMPT = (
    "You are an AI research assistant. Given a piece of text, identify the most "
    "significant, non-obvious, and actionable insight. Frame it as a concise, "
    "thought-provoking statement or a short paragraph. Do NOT include any "
    "conversational text outside of the insight itself."
)

FORM_SYSTEM_PROMPT = (
    "You are an expert data extractor. Your task is to precisely answer given questions "
    "based ONLY on the provided source text. Respond strictly in the specified JSON "
    "format. If information for a question is not found, use an empty string as the value."
)

CHAT_SYSTEM_PROMPT = (
    "You are a helpful and knowledgeable AI research assistant. Provide concise, "
    "accurate, and relevant information. If asked about something beyond your "
    "knowledge, admit it gracefully. Keep responses helpful and on topic."
)

_FORM_EXAMPLE_JSON = "\n".join(
    [
        "{",
        '  "Question 1": "Answer to Q1",',
        '  "Question 2": "Answer to Q2",',
        '  "Question 3": ""',
        "}",
    ]
)


def _system(content: str) -> dict[str, Any]:
    return {"role": "system", "content": content}


def _user(content: str) -> dict[str, Any]:
    return {"role": "user", "content": content}


def build_search_request(*, query: str) -> CompletionRequest:
    return CompletionRequest(
        messages=[_system(SEARCH_SYSTEM_PROMPT), _user(query)],
        temperature=0.7,
        max_tokens=500,
    )


def build_extract_request(*, text: str) -> CompletionRequest:
    return CompletionRequest(
        messages=[
            _system(EXTRACT_SYSTEM_PROMPT),
            _user(f"Create a concise outline from the following text:\n\n{text}"),
        ],
        temperature=0.3,
        max_tokens=300,
    )


def build_insight_request(*, text: str) -> CompletionRequest:
    return CompletionRequest(
        messages=[
            _system(INSIGHT_SYSTEM_PROMPT),
            _user(f"Generate a key insight from the following text:\n\n{text}"),
        ],
        temperature=0.7,
        max_tokens=150,
    )


def build_form_prompt(*, source_text: str, questions: list[Any]) -> str:
    """
    Build the single user instruction for form population.

    The model is asked for a JSON object keyed by the exact question strings;
    the example block shows an unanswered question as "".
    """

    question_lines = "\n".join(f"- {str(q)}" for q in questions)
    return "\n".join(
        [
            "Based on the following source text, answer each of the following questions "
            "concisely. Provide only the answer for each question, or leave it blank if the "
            "information is not directly present. Format your complete response as a JSON "
            "object where keys are the exact questions and values are the extracted answers. "
            "Ensure the JSON is valid and contains no extra text.",
            "",
            "Source Text:",
            "---",
            source_text,
            "---",
            "",
            "Questions to Answer:",
            question_lines,
            "",
            "Example JSON structure:",
            _FORM_EXAMPLE_JSON,
        ]
    )


def build_populate_form_request(*, source_text: str, questions: list[Any]) -> CompletionRequest:
    return CompletionRequest(
        messages=[
            _system(FORM_SYSTEM_PROMPT),
            _user(build_form_prompt(source_text=source_text, questions=questions)),
        ],
        temperature=0.1,
        max_tokens=1000,
        response_format={"type": "json_object"},
    )


def build_chat_request(*, messages: list[Any]) -> CompletionRequest:
    # The fixed system turn always comes first; caller turns keep their order.
    return CompletionRequest(
        messages=[_system(CHAT_SYSTEM_PROMPT), *messages],
        temperature=0.7,
        max_tokens=500,
    )

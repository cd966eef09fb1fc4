from __future__ import annotations

from research_assistant.core.llm.openrouter_client import CompletionClient, CompletionConfig
from research_assistant.core.settings import get_settings


def get_completion_client() -> CompletionClient | None:
    """
    Dependency provider for CompletionClient.

    Returns None when no API key is configured so routes can validate their
    input first and then answer with a configuration error.
    """

    settings = get_settings()
    if not settings.openrouter_api_key:
        return None

    config = CompletionConfig(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        model=settings.openrouter_model,
        timeout_seconds=float(settings.openrouter_timeout_seconds),
    )
    return CompletionClient(config=config)

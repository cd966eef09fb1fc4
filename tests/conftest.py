from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

# Imported once up front: it configures logging, which must happen before
# caplog installs its handlers.
from research_assistant.core.llm.deps import get_completion_client
from research_assistant.core.settings import get_settings
from research_assistant.main import create_app
from tests.research._fakes import FakeCompletionClient


@pytest.fixture(autouse=True)
def _set_test_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def fake_llm() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def llm_client(fake_llm: FakeCompletionClient):
    """TestClient whose completion calls go to `fake_llm`."""
    app = create_app()
    app.dependency_overrides[get_completion_client] = lambda: fake_llm
    with TestClient(app) as c:
        yield c

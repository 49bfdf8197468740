import pytest

from config import LLMSettings
from tests.fixtures.mock_clients import FakeLLMProvider, InMemoryRedis, MockFDAClient
from tests.fixtures.responses import MOCK_ANSWER_TOKENS, MOCK_TRANSLATION_OUTPUT


@pytest.fixture
def llm_settings():
    """Provider settings as built for one request."""
    return LLMSettings(provider="openai", api_key="sk-test", model="gpt-4o-mini")

@pytest.fixture
def fake_llm(llm_settings):
    """LLM provider answering the translation call and streaming a short answer."""
    return FakeLLMProvider(
        completions=[MOCK_TRANSLATION_OUTPUT],
        answer_tokens=MOCK_ANSWER_TOKENS,
        settings=llm_settings
    )

@pytest.fixture
def mock_fda_client():
    """httpx client stand-in returning a small label search result."""
    return MockFDAClient()

@pytest.fixture
def memory_redis():
    """In-memory key-value store."""
    return InMemoryRedis()

@pytest.fixture
def chat_request():
    """Standard ChatRequest for testing."""
    from models.api_models import ChatRequest
    return ChatRequest(
        messages=[{"role": "user", "content": "What are the warnings associated with Xarelto?"}]
    )

@pytest.fixture
def chat_context(chat_request, llm_settings, fake_llm):
    """Standard ChatContext for testing."""
    from models.chat_models import ChatContext
    return ChatContext(
        request=chat_request,
        user_id="user-1",
        settings=llm_settings,
        llm=fake_llm
    )

@pytest.fixture
def auth_headers():
    """Authentication headers for API requests."""
    return {"X-API-Key": "test-key"}

@pytest.fixture
def provider_settings():
    """Settings handed to the provider factory, one entry per chat request."""
    return []

@pytest.fixture
def configured_app(monkeypatch, fake_llm, mock_fda_client, memory_redis, provider_settings):
    """Application with LLM, openFDA and key-value store replaced by fakes."""
    from fastapi.testclient import TestClient
    from config import Config
    from main import app

    monkeypatch.setattr(Config, "API_KEYS", "user-1:test-key,user-2:other-key")

    def provider_factory(settings):
        provider_settings.append(settings)
        return fake_llm

    monkeypatch.setattr("routes.chat.get_llm_provider", provider_factory)
    monkeypatch.setattr("utils.http_client.HTTPClientManager.get_fda_client", lambda: mock_fda_client)
    monkeypatch.setattr("utils.kv_client.KVClientManager.get_client", lambda: memory_redis)

    with TestClient(app) as client:
        yield client

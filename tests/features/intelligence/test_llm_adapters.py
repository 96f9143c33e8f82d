import json

import httpx
import pytest

from knowledge_extractor.core.common.errors import ProviderError
from knowledge_extractor.core.config.settings import Settings
from knowledge_extractor.features.intelligence.data.openai_adapter import OpenAIResponsesAdapter
from knowledge_extractor.features.intelligence.data.resilient_adapter import ResilientLLMAdapter
from knowledge_extractor.features.intelligence.data.stub_adapter import StubLLMAdapter
from knowledge_extractor.features.intelligence.domain.interfaces import ILLMAdapter
from knowledge_extractor.features.intelligence.domain.models import AnalysisResult
from knowledge_extractor.features.intelligence.service.api import build_llm_adapter

API_URL = "https://llm.test/v1/responses"


def responses_body(text):
    """Shape of a Responses API reply: a reasoning item, then the message."""
    return {
        "output": [
            {"type": "reasoning", "summary": []},
            {"type": "message", "content": [{"type": "output_text", "text": text}]},
        ]
    }


def make_adapter(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return OpenAIResponsesAdapter(api_key="sk-test", api_url=API_URL, client=client)


class CountingLLM(ILLMAdapter):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = 0

    def analyze_text(self, text: str) -> AnalysisResult:
        self.calls += 1
        if self.fail:
            raise ProviderError("request failed: connection refused")
        return AnalysisResult(summary="remote", title="Remote", topics=["ai"], keywords=["go"], confidence=0.8)


# --- STUB ---

def test_stub_returns_fixed_populated_result():
    result = StubLLMAdapter().analyze_text("anything")

    assert result == AnalysisResult(
        summary="mock summary",
        title="mock title",
        topics=["mock", "topic"],
        sentiment="neutral",
        keywords=["keyword"],
        confidence=0.99
    )


# --- REMOTE ---

def test_remote_sends_bearer_credential_and_prompt():
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers["Authorization"]
        seen["url"] = str(request.url)
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json=responses_body('{"summary": "s", "title": "t"}'))

    make_adapter(handler).analyze_text("Go is fast")

    assert seen["auth"] == "Bearer sk-test"
    assert seen["url"] == API_URL
    assert seen["payload"]["model"] == "gpt-5-nano"
    assert seen["payload"]["store"] is False
    assert seen["payload"]["input"].endswith("Go is fast")


def test_remote_parses_json_output():
    output = json.dumps({
        "summary": "Go is a fast language.",
        "title": "Go Speed",
        "topics": ["go", "performance", "languages"],
        "sentiment": "Positive",
        "keywords": ["go", "speed", "compiler"],
        "confidence": 0.87,
    })
    adapter = make_adapter(lambda request: httpx.Response(200, json=responses_body(output)))

    result = adapter.analyze_text("Go is fast")

    assert result.summary == "Go is a fast language."
    assert result.title == "Go Speed"
    assert result.topics == ["go", "performance", "languages"]
    assert result.sentiment == "positive"
    assert result.keywords == ["go", "speed", "compiler"]
    assert result.confidence == 0.87


def test_remote_accepts_json_wrapped_in_prose():
    output = 'Here you go:\n```json\n{"summary": "s", "title": "t", "topics": ["a"]}\n```'
    adapter = make_adapter(lambda request: httpx.Response(200, json=responses_body(output)))

    result = adapter.analyze_text("cats cats dogs")

    assert result.title == "t"
    assert result.topics == ["a"]
    # Missing keywords come from the local extractor
    assert result.keywords == ["cats", "dogs"]


def test_remote_normalizes_out_of_domain_values():
    output = json.dumps({"summary": "s", "title": "t", "sentiment": "ecstatic", "confidence": 7})
    adapter = make_adapter(lambda request: httpx.Response(200, json=responses_body(output)))

    result = adapter.analyze_text("text")

    assert result.sentiment == "neutral"
    assert result.confidence == 1.0


def test_remote_uses_prose_output_as_summary():
    adapter = make_adapter(lambda request: httpx.Response(200, json=responses_body("Just a summary.")))

    result = adapter.analyze_text("go go cloud")

    assert result.summary == "Just a summary."
    assert result.title == "Generated Title"
    assert result.keywords == ["go", "cloud"]
    assert result.confidence == 0.9


def test_remote_surfaces_error_status_and_body():
    adapter = make_adapter(
        lambda request: httpx.Response(401, json={"error": {"message": "Incorrect API key"}})
    )

    with pytest.raises(ProviderError, match="401.*Incorrect API key"):
        adapter.analyze_text("text")


def test_remote_error_with_non_json_body():
    adapter = make_adapter(lambda request: httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(ProviderError, match="502.*Bad Gateway"):
        adapter.analyze_text("text")


@pytest.mark.parametrize("body", [
    {"output": []},
    {"output": [{"type": "reasoning", "summary": []}]},
    {"output": [{"type": "message", "content": []}]},
    {},
])
def test_remote_empty_output_is_an_error(body):
    adapter = make_adapter(lambda request: httpx.Response(200, json=body))

    with pytest.raises(ProviderError, match="empty response"):
        adapter.analyze_text("text")


def test_remote_undecodable_body_is_an_error():
    adapter = make_adapter(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ProviderError):
        adapter.analyze_text("text")


def test_remote_transport_failure_is_an_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError, match="connection refused"):
        make_adapter(handler).analyze_text("text")


# --- RESILIENT ---

def test_resilient_returns_primary_result_when_it_succeeds():
    primary, fallback = CountingLLM(), CountingLLM()

    result = ResilientLLMAdapter(primary, fallback).analyze_text("text")

    assert result.summary == "remote"
    assert (primary.calls, fallback.calls) == (1, 0)


def test_resilient_falls_back_on_primary_failure(caplog):
    primary = CountingLLM(fail=True)

    result = ResilientLLMAdapter(primary, StubLLMAdapter()).analyze_text("text")

    assert result.summary == "mock summary"
    assert "falling back" in caplog.text


def test_resilient_retries_primary_on_every_call():
    primary = CountingLLM(fail=True)
    adapter = ResilientLLMAdapter(primary, StubLLMAdapter())

    for _ in range(3):
        adapter.analyze_text("text")

    assert primary.calls == 3


def test_resilient_propagates_fallback_failure():
    adapter = ResilientLLMAdapter(CountingLLM(fail=True), CountingLLM(fail=True))

    with pytest.raises(ProviderError):
        adapter.analyze_text("text")


def test_resilient_wraps_remote_transport_failure():
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("timed out", request=request)

    adapter = ResilientLLMAdapter(make_adapter(handler), StubLLMAdapter())

    assert adapter.analyze_text("text").title == "mock title"


# --- SELECTION ---

def test_build_llm_adapter_uses_stub_without_credential(monkeypatch):
    monkeypatch.delenv("USE_MOCK_LLM", raising=False)
    settings = Settings()
    settings.OPENAI_API_KEY = ""

    assert isinstance(build_llm_adapter(settings), StubLLMAdapter)


def test_build_llm_adapter_honours_mock_flag(monkeypatch):
    monkeypatch.setenv("USE_MOCK_LLM", "true")
    settings = Settings()
    settings.OPENAI_API_KEY = "sk-test"

    assert isinstance(build_llm_adapter(settings), StubLLMAdapter)


def test_build_llm_adapter_wraps_remote_with_fallback(monkeypatch):
    monkeypatch.setenv("USE_MOCK_LLM", "false")
    settings = Settings()
    settings.OPENAI_API_KEY = "sk-test"

    adapter = build_llm_adapter(settings)

    assert isinstance(adapter, ResilientLLMAdapter)
    assert isinstance(adapter.primary, OpenAIResponsesAdapter)
    assert isinstance(adapter.fallback, StubLLMAdapter)


# --- MALFORMED RESPONSES & CONFIGURATION ---

def test_remote_non_string_output_text_is_an_error():
    body = {"output": [{"type": "message", "content": [{"type": "output_text", "text": {"x": 1}}]}]}
    adapter = make_adapter(lambda request: httpx.Response(200, json=body))

    with pytest.raises(ProviderError, match="empty response"):
        adapter.analyze_text("text")


def test_remote_malformed_url_is_an_error():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    adapter = OpenAIResponsesAdapter(api_key="sk-test", api_url="https://exa mple.com:abc/x", client=client)

    with pytest.raises(ProviderError):
        adapter.analyze_text("text")


def test_resilient_falls_back_on_malformed_remote_output_and_url():
    body = {"output": [{"content": [{"text": {"x": 1}}]}]}
    bad_body = make_adapter(lambda request: httpx.Response(200, json=body))
    bad_url = OpenAIResponsesAdapter(
        api_key="sk-test",
        api_url="https://exa mple.com:abc/x",
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    )

    for primary in (bad_body, bad_url):
        result = ResilientLLMAdapter(primary, StubLLMAdapter()).analyze_text("text")
        assert result.summary == "mock summary"


def test_remote_applies_configured_timeout_to_injected_client():
    seen = {}

    def handler(request: httpx.Request):
        seen["timeout"] = request.extensions["timeout"]
        return httpx.Response(200, json=responses_body('{"summary": "s", "title": "t"}'))

    client = httpx.Client(transport=httpx.MockTransport(handler))
    OpenAIResponsesAdapter(api_key="sk-test", api_url=API_URL, timeout=12.5, client=client).analyze_text("text")

    assert seen["timeout"]["read"] == 12.5
    assert seen["timeout"]["connect"] == 12.5

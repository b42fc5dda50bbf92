"""Tests for the language model adapters."""

import httpx
import pytest
from langchain_core.messages import AIMessage

from src.domain.errors import LanguageModelError
from src.infrastructure.llm.bedrock_adapter import BedrockChatAdapter
from src.infrastructure.llm.gemini_adapter import GeminiLanguageModel


def gemini_with(handler, api_key="key-123") -> GeminiLanguageModel:
    return GeminiLanguageModel(
        api_key=api_key,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestGeminiLanguageModel:
    def test_returns_first_candidate_text(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": "HOLD it"}]}}]},
            )

        assert gemini_with(handler).complete("analyze AAPL") == "HOLD it"
        assert seen[0].url.params["key"] == "key-123"
        assert "gemini-1.5-flash:generateContent" in seen[0].url.path
        assert b"analyze AAPL" in seen[0].content

    def test_malformed_payload_raises(self) -> None:
        model = gemini_with(lambda r: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(LanguageModelError):
            model.complete("prompt")

    def test_http_error_raises(self) -> None:
        model = gemini_with(lambda r: httpx.Response(429, json={"error": "quota"}))
        with pytest.raises(LanguageModelError):
            model.complete("prompt")

    def test_missing_key_raises(self) -> None:
        model = gemini_with(lambda r: httpx.Response(200), api_key=None)
        with pytest.raises(LanguageModelError):
            model.complete("prompt")


class StubRunnable:
    def __init__(self, message) -> None:
        self.message = message
        self.calls = []

    def invoke(self, messages, config=None):
        self.calls.append((messages, config))
        return self.message


class StubObservability:
    def __init__(self) -> None:
        self.tags = []
        self.flushes = 0

    def trace_config(self, tags):
        self.tags.append(list(tags))
        return {"callbacks": ["callback"], "metadata": {"langfuse_tags": list(tags)}}

    def flush(self) -> None:
        self.flushes += 1


class TestBedrockChatAdapter:
    def test_returns_message_content(self) -> None:
        runnable = StubRunnable(AIMessage(content='{"recommendation": "BUY"}'))
        adapter = BedrockChatAdapter(_runnable=runnable)

        assert adapter.complete("prompt") == '{"recommendation": "BUY"}'
        messages, config = runnable.calls[0]
        assert messages[0].content == "prompt"
        assert "callbacks" not in config

    def test_joins_text_blocks(self) -> None:
        runnable = StubRunnable(AIMessage(content=[{"type": "text", "text": "SELL "}, {"type": "text", "text": "now"}]))
        assert BedrockChatAdapter(_runnable=runnable).complete("p") == "SELL now"

    def test_calls_are_traced_with_model_id_and_flushed(self, monkeypatch) -> None:
        monkeypatch.setenv("BEDROCK_MODEL_ID", "test-model")
        tracer = StubObservability()
        runnable = StubRunnable(AIMessage(content="HOLD"))

        BedrockChatAdapter(observability=tracer, _runnable=runnable).complete("p")

        _, config = runnable.calls[0]
        assert config["callbacks"] == ["callback"]
        assert tracer.tags == [["test-model"]]
        assert tracer.flushes == 1


def test_tracing_disabled_without_langfuse_key(monkeypatch) -> None:
    from src.infrastructure.observability.langfuse_adapter import build_observability

    monkeypatch.delenv("LANGFUSE_PUBLIC_KEY", raising=False)
    assert build_observability() is None

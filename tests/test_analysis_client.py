from __future__ import annotations

import types

import pytest

from tablemate.services.analysis_client import (
    AnalysisRequest,
    AnalysisUnavailableError,
    MalformedAnalysisError,
    OpenAIAnalysisClient,
    build_default_client,
    run_analysis,
)
from tests.stubs import FailingAnalysisClient, SlowAnalysisClient, StubAnalysisClient


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        message = types.SimpleNamespace(content=self.content)
        return types.SimpleNamespace(choices=[types.SimpleNamespace(message=message)])


def _client_with(content):
    client = OpenAIAnalysisClient(api_key="sk-test", model="gpt-4o")
    completions = FakeCompletions(content)
    client.client = types.SimpleNamespace(chat=types.SimpleNamespace(completions=completions))
    return client, completions


def test_missing_key_is_unavailable():
    with pytest.raises(AnalysisUnavailableError):
        OpenAIAnalysisClient(api_key="")
    assert build_default_client() is None


@pytest.mark.asyncio
async def test_json_request_with_image():
    client, completions = _client_with('{"sentiment": "positive"}')
    result = await client.analyze(AnalysisRequest(instructions="sys", text="look", image=b"\xff\xd8abc"))
    assert result == {"sentiment": "positive"}
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    user = completions.kwargs["messages"][1]["content"]
    assert user[1]["image_url"]["url"].startswith("data:image/jpeg;base64,")


@pytest.mark.asyncio
async def test_text_request():
    client, completions = _client_with("  Welcome!  ")
    result = await client.analyze(AnalysisRequest(instructions="sys", text="hi", expect_json=False, max_tokens=200))
    assert result == {"text": "Welcome!"}
    assert "response_format" not in completions.kwargs
    assert completions.kwargs["max_tokens"] == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["not json", "[1, 2]"])
async def test_malformed_json(content):
    client, _ = _client_with(content)
    with pytest.raises(MalformedAnalysisError):
        await client.analyze(AnalysisRequest(instructions="sys", text="x"))


@pytest.mark.asyncio
async def test_run_analysis_returns_none_on_failure():
    request = AnalysisRequest(instructions="sys", text="x")
    assert await run_analysis(None, request, "op") is None
    assert await run_analysis(FailingAnalysisClient(), request, "op") is None
    assert await run_analysis(SlowAnalysisClient(delay=5), request, "op", timeout=0.01) is None
    assert await run_analysis(StubAnalysisClient({"a": 1}), request, "op") == {"a": 1}

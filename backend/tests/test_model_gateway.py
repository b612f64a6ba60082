"""Tests for the OpenAI-compatible model gateway."""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

import httpx
import openai
import pytest

from app.core.config import PlannerConfig
from app.core.errors import ModelGatewayError
from app.services.model_gateway import OpenAICompatibleGateway

BASE_URL = "https://dashscope.example/compatible-mode/v1"


class _FakeCompletions:
    def __init__(self, outcome: Any):
        self.outcome = outcome
        self.requests: List[Dict[str, Any]] = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _client(outcome: Any) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=_FakeCompletions(outcome)))


def _completion(content: Any) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _config() -> PlannerConfig:
    return PlannerConfig(api_key="test-key", base_url=BASE_URL, model="qwen-test", top_p=0.8)


def test_complete_sends_json_mode_request() -> None:
    client = _client(_completion('{"goal_anchor": "career growth"}'))
    gateway = OpenAICompatibleGateway(_config(), client=client)

    content = gateway.complete("system text", "user text", 0.9)

    assert content == '{"goal_anchor": "career growth"}'
    request = client.chat.completions.requests[0]
    assert request["model"] == "qwen-test"
    assert request["temperature"] == 0.9
    assert request["top_p"] == 0.8
    assert request["response_format"] == {"type": "json_object"}
    assert request["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]


def test_legacy_text_choice_is_read() -> None:
    completion = SimpleNamespace(choices=[SimpleNamespace(message=None, text="legacy body")])
    gateway = OpenAICompatibleGateway(_config(), client=_client(completion))

    assert gateway.complete("s", "u", 0.5) == "legacy body"


@pytest.mark.parametrize("completion", [_completion(""), _completion(None), SimpleNamespace(choices=[])])
def test_empty_content_raises_empty_content_error(completion) -> None:
    gateway = OpenAICompatibleGateway(_config(), client=_client(completion))

    with pytest.raises(ModelGatewayError) as excinfo:
        gateway.complete("s", "u", 0.5)

    assert excinfo.value.kind == "empty_content"


def test_status_error_maps_to_status_kind() -> None:
    request = httpx.Request("POST", f"{BASE_URL}/chat/completions")
    response = httpx.Response(500, request=request, text="upstream exploded")
    error = openai.InternalServerError("Internal Server Error", response=response, body=None)
    gateway = OpenAICompatibleGateway(_config(), client=_client(error))

    with pytest.raises(ModelGatewayError) as excinfo:
        gateway.complete("s", "u", 0.5)

    assert excinfo.value.kind == "status"
    assert excinfo.value.status_code == 500
    assert "upstream exploded" in str(excinfo.value)


def test_connection_error_maps_to_transport_kind() -> None:
    request = httpx.Request("POST", f"{BASE_URL}/chat/completions")
    error = openai.APIConnectionError(request=request)
    gateway = OpenAICompatibleGateway(_config(), client=_client(error))

    with pytest.raises(ModelGatewayError) as excinfo:
        gateway.complete("s", "u", 0.5)

    assert excinfo.value.kind == "transport"
    assert excinfo.value.status_code is None


def test_default_client_uses_configured_endpoint(monkeypatch) -> None:
    captured: Dict[str, Any] = {}

    def fake_openai(**kwargs):
        captured.update(kwargs)
        return _client(_completion("{}"))

    monkeypatch.setattr(openai, "OpenAI", fake_openai)

    OpenAICompatibleGateway(_config())

    assert captured["base_url"] == BASE_URL
    assert captured["api_key"] == "test-key"
    assert captured["max_retries"] == 0

# tests/test_llm_client.py

from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from skytask.errors import ConfigurationError, UpstreamError
from skytask.llm.client import EMBEDDING_DIM, OpenAILLMClient


class _FakeSDK:
    """Stand-in for the OpenAI SDK object graph used by OpenAILLMClient."""

    def __init__(self, *, completion=None, embedding=None, error: Exception | None = None) -> None:
        self.requests: list[dict] = []

        def create_completion(**kwargs):
            self.requests.append(kwargs)
            if error is not None:
                raise error
            return completion

        def create_embedding(**kwargs):
            self.requests.append(kwargs)
            if error is not None:
                raise error
            return embedding

        self.chat = SimpleNamespace(completions=SimpleNamespace(create=create_completion))
        self.embeddings = SimpleNamespace(create=create_embedding)


def _client(settings, sdk: _FakeSDK) -> OpenAILLMClient:
    client = OpenAILLMClient(settings)
    client._client = sdk  # type: ignore[assignment]
    return client


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_missing_key_is_configuration_error(settings) -> None:
    settings.openai_api_key = "  "
    with pytest.raises(ConfigurationError) as exc:
        OpenAILLMClient(settings)
    assert exc.value.message == "OpenAI API key not configured"


def test_complete_sends_model_and_sampling(settings) -> None:
    sdk = _FakeSDK(completion=_completion("  1. A\n2. B  "))
    llm = _client(settings, sdk)

    assert llm.complete([{"role": "user", "content": "x"}], temperature=0.7, max_tokens=500) == "1. A\n2. B"
    req = sdk.requests[0]
    assert (req["model"], req["temperature"], req["max_tokens"]) == ("gpt-4o-mini", 0.7, 500)


def test_complete_without_content_is_upstream_error(settings) -> None:
    llm = _client(settings, _FakeSDK(completion=_completion(None)))
    with pytest.raises(UpstreamError):
        llm.complete([{"role": "user", "content": "x"}])


def test_complete_api_error_is_upstream_error(settings) -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    err = openai.APIConnectionError(request=request)
    llm = _client(settings, _FakeSDK(error=err))

    with pytest.raises(UpstreamError) as exc:
        llm.complete([{"role": "user", "content": "x"}])
    assert exc.value.message == "Failed to generate subtasks"


def test_embed_returns_vector(settings) -> None:
    vec = [0.01] * EMBEDDING_DIM
    sdk = _FakeSDK(embedding=SimpleNamespace(data=[SimpleNamespace(embedding=vec)]))

    assert _client(settings, sdk).embed("groceries") == vec
    assert sdk.requests[0] == {"model": "text-embedding-3-small", "input": "groceries"}


def test_embed_wrong_dimension_is_upstream_error(settings) -> None:
    sdk = _FakeSDK(embedding=SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])]))
    with pytest.raises(UpstreamError) as exc:
        _client(settings, sdk).embed("groceries")
    assert exc.value.message == "Failed to generate embedding"

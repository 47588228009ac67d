# src/skytask/llm/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..core.ports import ChatMessage
from ..errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

EMBEDDING_DIM = 1536  # text-embedding-3-small


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError))


def describe_llm_error(err: Exception) -> str:
    """Short, log-friendly description of a provider failure."""
    if _is_auth_error(err):
        return "LLM authentication failed (check OPENAI_API_KEY)."
    if _is_rate_limit_error(err):
        return "LLM is rate-limited."
    if _is_connection_error(err):
        return "LLM network/timeout error."
    if isinstance(err, openai.APIStatusError):
        return f"LLM returned HTTP {err.status_code}: {err.message}"
    return str(err).strip() or err.__class__.__name__


class OpenAILLMClient:
    """
    Thin wrapper over the OpenAI SDK used by the server functions.

    IMPORTANT:
    - The API key is server-side only; it is checked when the client is built.
    - Automatic retries are disabled: a failed upstream call is reported once.
    """

    def __init__(self, settings: Any) -> None:
        api_key = getattr(settings, "openai_api_key", None)
        if not api_key or not str(api_key).strip():
            raise ConfigurationError("OpenAI API key not configured")

        self._chat_model = str(getattr(settings, "chat_model", "gpt-4o-mini"))
        self._embedding_model = str(getattr(settings, "embedding_model", "text-embedding-3-small"))
        timeout_s = float(getattr(settings, "http_timeout_seconds", 60.0))

        self._client = OpenAI(
            api_key=str(api_key).strip(),
            base_url=str(getattr(settings, "openai_base_url", "") or "https://api.openai.com/v1"),
            timeout=httpx.Timeout(timeout_s, connect=5.0),
            max_retries=0,
        )

    def complete(
            self,
            messages: list[ChatMessage],
            *,
            temperature: float = 0.7,
            max_tokens: int = 500,
    ) -> str:
        logger.info("LLM: chat completion model=%s messages=%d", self._chat_model, len(messages))
        try:
            resp = self._client.chat.completions.create(
                model=self._chat_model,
                messages=messages,  # type: ignore[arg-type]
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error("OpenAI API error: %s", describe_llm_error(e))
            raise UpstreamError("Failed to generate subtasks", details=describe_llm_error(e)) from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise UpstreamError("Failed to generate subtasks", details="Malformed completion response") from e

        if content is None:
            raise UpstreamError("Failed to generate subtasks", details="Model returned no content")
        return content.strip()

    def embed(self, text: str) -> list[float]:
        logger.info("LLM: embedding model=%s chars=%d", self._embedding_model, len(text))
        try:
            resp = self._client.embeddings.create(model=self._embedding_model, input=text)
        except openai.OpenAIError as e:
            logger.error("OpenAI API error: %s", describe_llm_error(e))
            raise UpstreamError("Failed to generate embedding") from e

        if not resp.data:
            raise UpstreamError("Failed to generate embedding")

        embedding = list(resp.data[0].embedding)
        if len(embedding) != EMBEDDING_DIM:
            raise UpstreamError(
                "Failed to generate embedding",
                details=f"Expected {EMBEDDING_DIM} dimensions, got {len(embedding)}",
            )
        return embedding

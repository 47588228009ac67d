# src/skytask/functions/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import SearchError, SubtaskGenerationError

logger = logging.getLogger(__name__)


def _function_headers(anon_key: str) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if anon_key:
        headers["Authorization"] = f"Bearer {anon_key}"
        headers["apikey"] = anon_key
    return headers


def _error_text(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.text[:200]


class _FunctionClient:
    """POSTs JSON to one server function (hosted or the local Flask app)."""

    name: str = ""

    def __init__(
            self,
            base_url: str,
            anon_key: str = "",
            *,
            timeout: float = 60.0,
            transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/{self.name}"
        self._client = httpx.Client(
            headers=_function_headers(anon_key),
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        resp = self._client.post(self._url, json=body)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected response body from {self.name}")
        return data


class HttpSubtaskGenerator(_FunctionClient):
    name = "generate-subtasks"

    def generate(self, task_title: str) -> list[str]:
        try:
            data = self._post({"taskTitle": task_title})
        except httpx.HTTPStatusError as e:
            logger.warning("Subtask function failed: status=%s error=%s", e.response.status_code, _error_text(e.response))
            raise SubtaskGenerationError(_error_text(e.response)) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Subtask function call failed: %s", e)
            raise SubtaskGenerationError(str(e)) from e

        subtasks = data.get("subtasks") or []
        return [str(s) for s in subtasks if isinstance(s, str)]


class HttpTaskSearchClient(_FunctionClient):
    name = "semantic-search"

    def search(self, query: str, *, user_id: str | None = None) -> list[dict[str, Any]]:
        body: dict[str, Any] = {"query": query}
        if user_id:
            body["userId"] = user_id
        try:
            data = self._post(body)
        except httpx.HTTPStatusError as e:
            logger.warning("Search function failed: status=%s error=%s", e.response.status_code, _error_text(e.response))
            raise SearchError(_error_text(e.response)) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Search function call failed: %s", e)
            raise SearchError(str(e)) from e

        results = data.get("results") or []
        return [r for r in results if isinstance(r, dict)]

# src/skytask/errors.py

from __future__ import annotations

from typing import Any


class FunctionError(Exception):
    """
    Error raised inside a server function handler.

    Serialized by the WSGI app as {"error": message, **extra} with `status`.
    """

    status: int = 500

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class BadRequestError(FunctionError):
    status = 400


class ConfigurationError(FunctionError):
    """A server-held credential or setting is missing."""


class UpstreamError(FunctionError):
    """The LLM provider or the data collaborator failed."""


class SubtaskGenerationError(RuntimeError):
    """Front-end side: the subtask function call did not succeed."""


class SearchError(RuntimeError):
    """Front-end side: the semantic-search function call did not succeed."""

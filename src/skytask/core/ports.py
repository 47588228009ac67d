# src/skytask/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the controllers and server functions.

Controllers depend on Protocols instead of the hosted SDKs.
This keeps the backend and LLM provider swappable and makes testing easier.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from ..tasks.task_models import Subtask, Task, TaskPriority, TaskStatus

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


@dataclass(frozen=True, slots=True)
class AuthUser:
    id: str
    email: str
    name: str | None = None


class AuthProvider(Protocol):
    """Hosted identity provider. Raises on rejected credentials."""
    def sign_up(self, *, email: str, password: str, name: str) -> AuthUser | None: ...
    def sign_in(self, *, email: str, password: str) -> AuthUser: ...
    def sign_out(self) -> None: ...
    def current_user(self) -> AuthUser | None: ...


class TaskRepo(Protocol):
    def list_tasks(self, owner_id: str) -> list[Task]: ...
    def create_task(self, *, title: str, priority: TaskPriority, owner_id: str) -> Task: ...
    def update_status(self, task_id: str, status: TaskStatus) -> Task | None: ...
    def delete_task(self, task_id: str) -> None: ...


class SubtaskRepo(Protocol):
    def list_subtasks(self, owner_id: str) -> list[Subtask]: ...
    def create_subtask(self, *, task_id: str, title: str, owner_id: str) -> Subtask: ...
    def set_completed(self, subtask_id: str, completed: bool) -> None: ...
    def delete_subtask(self, subtask_id: str) -> None: ...


class ProfileRepo(Protocol):
    def get_picture_url(self, user_id: str) -> str | None: ...
    def upsert_picture_url(self, user_id: str, url: str) -> None: ...


class BlobStore(Protocol):
    def upload(self, path: str, data: bytes, *, content_type: str) -> None: ...
    def public_url(self, path: str) -> str: ...


class SubtaskGenerator(Protocol):
    """Front-end side of the subtask-generation function."""
    def generate(self, task_title: str) -> list[str]: ...


class TaskSearchClient(Protocol):
    """Front-end side of the semantic-search function."""
    def search(self, query: str, *, user_id: str | None = None) -> list[dict[str, Any]]: ...


class LLMClient(Protocol):
    """Chat completion + embeddings (OpenAI-compatible)."""
    def complete(
            self,
            messages: list[ChatMessage],
            *,
            temperature: float = 0.7,
            max_tokens: int = 500,
    ) -> str: ...

    def embed(self, text: str) -> list[float]: ...


class SimilarityIndex(Protocol):
    """Stored procedure on the data collaborator that ranks tasks by embedding."""
    def search_similar(
            self,
            embedding: list[float],
            *,
            threshold: float,
            limit: int,
            user_id: str | None = None,
    ) -> list[dict[str, Any]]: ...

# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from skytask.auth.controller import AuthController
from skytask.core.state import AppState, Backend
from skytask.tasks.dashboard import DashboardController

from .fakes import (
    FakeAuth,
    FakeBlobStore,
    FakeProfileRepo,
    FakeSearchClient,
    FakeSubtaskGenerator,
    FakeSubtaskRepo,
    FakeTaskRepo,
)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the functions app.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="skytask-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon",
        supabase_service_role_key="service",
        openai_api_key="sk-test",
        openai_base_url="https://api.openai.com/v1",
        chat_model="gpt-4o-mini",
        embedding_model="text-embedding-3-small",
        functions_base_url="http://functions.test",
        functions_host="127.0.0.1",
        functions_port=8000,
        http_timeout_seconds=5.0,
    )


@pytest.fixture()
def task_repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def subtask_repo() -> FakeSubtaskRepo:
    return FakeSubtaskRepo()


@pytest.fixture()
def generator() -> FakeSubtaskGenerator:
    return FakeSubtaskGenerator(["Buy flour", "Buy sugar", "Mix"])


@pytest.fixture()
def alerts() -> list[str]:
    return []


@pytest.fixture()
def dashboard(task_repo, subtask_repo, generator, alerts) -> DashboardController:
    return DashboardController(task_repo, subtask_repo, generator, alert=alerts.append)


@pytest.fixture()
def state(settings, task_repo, subtask_repo, generator, alerts) -> AppState:
    """AppState wired with in-memory fakes for every collaborator."""
    backend = Backend(
        tasks=task_repo,
        subtasks=subtask_repo,
        profiles=FakeProfileRepo(),
        pictures=FakeBlobStore(),
        generator=generator,
        search=FakeSearchClient([{"title": "Buy milk", "similarity": 0.91}]),
    )
    return AppState(settings=settings, auth=AuthController(FakeAuth()), backend=backend, alert=alerts.append)

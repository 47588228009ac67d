# tests/test_supabase_store.py

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from skytask.errors import ConfigurationError, UpstreamError
from skytask.storage.supabase_store import (
    SupabaseAuth,
    SupabaseBlobStore,
    SupabaseProfileRepo,
    SupabaseSimilarityIndex,
    SupabaseTaskRepo,
    create_backend_client,
)
from skytask.tasks.task_models import TaskPriority, TaskStatus


def _client_returning(data) -> MagicMock:
    """A query-builder stand-in: every chained call returns the same builder."""
    client = MagicMock()
    builder = client.table.return_value
    for name in ("select", "insert", "update", "delete", "upsert", "eq", "order", "maybe_single"):
        getattr(builder, name).return_value = builder
    builder.execute.return_value = SimpleNamespace(data=data)
    return client


ROW = {
    "id": "11111111-1111-1111-1111-111111111111",
    "title": "Buy milk",
    "priority": "high",
    "status": "pending",
    "user_id": "u1",
    "created_at": "2024-05-01T10:00:00.123456+00:00",
    "updated_at": "2024-05-01T10:00:00Z",
}


def test_list_tasks_orders_newest_first() -> None:
    client = _client_returning([ROW])
    repo = SupabaseTaskRepo(client)

    tasks = repo.list_tasks("u1")

    builder = client.table.return_value
    client.table.assert_called_with("tasks")
    builder.eq.assert_called_with("user_id", "u1")
    builder.order.assert_called_with("created_at", desc=True)
    assert tasks[0].title == "Buy milk"
    assert tasks[0].priority == TaskPriority.HIGH
    assert tasks[0].status == TaskStatus.PENDING
    assert tasks[0].created_at is not None and tasks[0].created_at.year == 2024


def test_create_task_inserts_pending_row() -> None:
    client = _client_returning([ROW])
    task = SupabaseTaskRepo(client).create_task(title="Buy milk", priority=TaskPriority.HIGH, owner_id="u1")

    client.table.return_value.insert.assert_called_once_with(
        {"title": "Buy milk", "priority": "high", "status": "pending", "user_id": "u1"}
    )
    assert task.id == ROW["id"]


def test_update_status_sets_timestamp() -> None:
    client = _client_returning([{**ROW, "status": "done"}])
    task = SupabaseTaskRepo(client).update_status(ROW["id"], TaskStatus.DONE)

    payload = client.table.return_value.update.call_args.args[0]
    assert payload["status"] == "done"
    assert "updated_at" in payload
    assert task is not None and task.status == TaskStatus.DONE


def test_unknown_enum_values_from_storage_fall_back() -> None:
    client = _client_returning([{**ROW, "priority": "???", "status": None}])
    (task,) = SupabaseTaskRepo(client).list_tasks("u1")
    assert task.priority == TaskPriority.MEDIUM
    assert task.status == TaskStatus.PENDING


@pytest.mark.parametrize("data", [None, {}, {"profile_picture_url": None}])
def test_profile_without_picture(data) -> None:
    assert SupabaseProfileRepo(_client_returning(data)).get_picture_url("u1") is None


def test_profile_missing_row_as_none_response() -> None:
    client = _client_returning(None)
    client.table.return_value.execute.return_value = None
    assert SupabaseProfileRepo(client).get_picture_url("u1") is None


def test_profile_upsert() -> None:
    client = _client_returning([])
    SupabaseProfileRepo(client).upsert_picture_url("u1", "https://x/y.png")
    client.table.assert_called_with("user_profiles")
    client.table.return_value.upsert.assert_called_once_with({"id": "u1", "profile_picture_url": "https://x/y.png"})


def test_blob_store_uploads_with_content_type() -> None:
    client = MagicMock()
    bucket = client.storage.from_.return_value
    bucket.get_public_url.return_value = "https://cdn/u1/1.png"
    store = SupabaseBlobStore(client)

    store.upload("u1/1.png", b"png", content_type="image/png")

    client.storage.from_.assert_called_with("profile-pictures")
    kwargs = bucket.upload.call_args.kwargs
    assert kwargs["path"] == "u1/1.png"
    assert kwargs["file_options"] == {"content-type": "image/png", "upsert": "true"}
    assert store.public_url("u1/1.png") == "https://cdn/u1/1.png"


def test_similarity_index_calls_procedure() -> None:
    client = MagicMock()
    client.rpc.return_value.execute.return_value = SimpleNamespace(data=[{"id": "t1"}])

    rows = SupabaseSimilarityIndex(client).search_similar([0.1, 0.2], threshold=0.7, limit=2)

    client.rpc.assert_called_once_with(
        "search_tasks_by_similarity",
        {"query_embedding": [0.1, 0.2], "similarity_threshold": 0.7, "match_count": 2, "user_id_filter": None},
    )
    assert rows == [{"id": "t1"}]


def test_similarity_index_failure_is_upstream_error() -> None:
    client = MagicMock()
    client.rpc.return_value.execute.side_effect = RuntimeError("function does not exist")

    with pytest.raises(UpstreamError) as exc:
        SupabaseSimilarityIndex(client).search_similar([0.1], threshold=0.7, limit=2, user_id="u1")
    assert exc.value.message == "Search failed"
    assert exc.value.details == "function does not exist"


def test_auth_sign_up_passes_name_metadata() -> None:
    client = MagicMock()
    client.auth.sign_up.return_value = SimpleNamespace(
        user=SimpleNamespace(id="u1", email="ada@example.com", user_metadata={"name": "Ada"})
    )

    user = SupabaseAuth(client).sign_up(email="ada@example.com", password="secret123", name="Ada")

    client.auth.sign_up.assert_called_once_with(
        {"email": "ada@example.com", "password": "secret123", "options": {"data": {"name": "Ada"}}}
    )
    assert user is not None and (user.id, user.name) == ("u1", "Ada")


def test_create_backend_client_requires_settings() -> None:
    with pytest.raises(ConfigurationError):
        create_backend_client("", "key")
    with pytest.raises(ConfigurationError):
        create_backend_client("https://example.supabase.co", None)

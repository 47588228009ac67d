# src/skytask/storage/supabase_store.py

"""
Adapters from the hosted backend SDK (supabase-py) to the core ports.

One `Client` carries the signed-in session, so table and storage calls made
through these adapters run under the user's row-level-security policies.
The server functions build a separate service-role client.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from supabase import Client, create_client

from ..core.ports import AuthUser
from ..errors import ConfigurationError, UpstreamError
from ..tasks.task_models import Subtask, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"
SUBTASKS_TABLE = "subtasks"
PROFILES_TABLE = "user_profiles"
PROFILE_PICTURES_BUCKET = "profile-pictures"
SIMILARITY_PROCEDURE = "search_tasks_by_similarity"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_backend_client(url: str, key: str | None) -> Client:
    if not url or not url.strip():
        raise ConfigurationError("Backend URL is not set. Set SKYTASK_SUPABASE_URL in your .env.")
    if not key or not key.strip():
        raise ConfigurationError("Backend key is not set. Set SKYTASK_SUPABASE_ANON_KEY in your .env.")
    return create_client(url.strip(), key.strip())


def _user_from_sdk(user: Any) -> AuthUser | None:
    if user is None:
        return None
    meta = getattr(user, "user_metadata", None) or {}
    return AuthUser(
        id=str(user.id),
        email=str(getattr(user, "email", "") or ""),
        name=meta.get("name") if isinstance(meta, dict) else None,
    )


class SupabaseAuth:
    def __init__(self, client: Client) -> None:
        self._client = client

    def sign_up(self, *, email: str, password: str, name: str) -> AuthUser | None:
        res = self._client.auth.sign_up(
            {"email": email, "password": password, "options": {"data": {"name": name}}}
        )
        return _user_from_sdk(res.user)

    def sign_in(self, *, email: str, password: str) -> AuthUser:
        res = self._client.auth.sign_in_with_password({"email": email, "password": password})
        user = _user_from_sdk(res.user)
        if user is None:
            raise RuntimeError("Sign-in returned no user")
        return user

    def sign_out(self) -> None:
        self._client.auth.sign_out()

    def current_user(self) -> AuthUser | None:
        session = self._client.auth.get_session()
        return _user_from_sdk(session.user) if session is not None else None


class SupabaseTaskRepo:
    def __init__(self, client: Client) -> None:
        self._client = client

    def list_tasks(self, owner_id: str) -> list[Task]:
        res = (
            self._client.table(TASKS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [Task.from_row(r) for r in res.data or []]

    def create_task(self, *, title: str, priority: TaskPriority, owner_id: str) -> Task:
        res = (
            self._client.table(TASKS_TABLE)
            .insert(
                {
                    "title": title,
                    "priority": priority.value,
                    "status": TaskStatus.PENDING.value,
                    "user_id": owner_id,
                }
            )
            .execute()
        )
        if not res.data:
            raise RuntimeError("Task insert returned no row")
        return Task.from_row(res.data[0])

    def update_status(self, task_id: str, status: TaskStatus) -> Task | None:
        res = (
            self._client.table(TASKS_TABLE)
            .update({"status": status.value, "updated_at": _now_iso()})
            .eq("id", task_id)
            .execute()
        )
        return Task.from_row(res.data[0]) if res.data else None

    def delete_task(self, task_id: str) -> None:
        self._client.table(TASKS_TABLE).delete().eq("id", task_id).execute()


class SupabaseSubtaskRepo:
    def __init__(self, client: Client) -> None:
        self._client = client

    def list_subtasks(self, owner_id: str) -> list[Subtask]:
        res = (
            self._client.table(SUBTASKS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .order("created_at")
            .execute()
        )
        return [Subtask.from_row(r) for r in res.data or []]

    def create_subtask(self, *, task_id: str, title: str, owner_id: str) -> Subtask:
        res = (
            self._client.table(SUBTASKS_TABLE)
            .insert({"task_id": task_id, "title": title, "completed": False, "user_id": owner_id})
            .execute()
        )
        if not res.data:
            raise RuntimeError("Subtask insert returned no row")
        return Subtask.from_row(res.data[0])

    def set_completed(self, subtask_id: str, completed: bool) -> None:
        (
            self._client.table(SUBTASKS_TABLE)
            .update({"completed": completed, "updated_at": _now_iso()})
            .eq("id", subtask_id)
            .execute()
        )

    def delete_subtask(self, subtask_id: str) -> None:
        self._client.table(SUBTASKS_TABLE).delete().eq("id", subtask_id).execute()


class SupabaseProfileRepo:
    def __init__(self, client: Client) -> None:
        self._client = client

    def get_picture_url(self, user_id: str) -> str | None:
        res = (
            self._client.table(PROFILES_TABLE)
            .select("profile_picture_url")
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
        # Depending on the SDK version a missing row is either None or data=None.
        if res is None or not res.data:
            return None
        return res.data.get("profile_picture_url") or None

    def upsert_picture_url(self, user_id: str, url: str) -> None:
        self._client.table(PROFILES_TABLE).upsert({"id": user_id, "profile_picture_url": url}).execute()


class SupabaseBlobStore:
    def __init__(self, client: Client, bucket: str = PROFILE_PICTURES_BUCKET) -> None:
        self._client = client
        self._bucket = bucket

    def upload(self, path: str, data: bytes, *, content_type: str) -> None:
        self._client.storage.from_(self._bucket).upload(
            path=path,
            file=data,
            file_options={"content-type": content_type, "upsert": "true"},
        )

    def public_url(self, path: str) -> str:
        return str(self._client.storage.from_(self._bucket).get_public_url(path))


class SupabaseSimilarityIndex:
    """Calls the similarity stored procedure with a service-role client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def search_similar(
            self,
            embedding: list[float],
            *,
            threshold: float,
            limit: int,
            user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        try:
            res = self._client.rpc(
                SIMILARITY_PROCEDURE,
                {
                    "query_embedding": embedding,
                    "similarity_threshold": threshold,
                    "match_count": limit,
                    "user_id_filter": user_id or None,
                },
            ).execute()
        except Exception as e:
            logger.error("Search error: %s", e)
            raise UpstreamError("Search failed", details=getattr(e, "message", None) or str(e)) from e
        return list(res.data or [])

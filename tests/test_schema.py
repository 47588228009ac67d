# tests/test_schema.py

from __future__ import annotations

import re
from pathlib import Path

SCHEMA = Path(__file__).resolve().parents[1] / "supabase" / "schema.sql"


def _policies_on_storage_objects(sql: str) -> list[str]:
    return re.findall(r"create policy [^;]*? on storage\.objects[^;]*;", sql, flags=re.IGNORECASE | re.DOTALL)


def test_subtasks_cascade_with_their_task() -> None:
    sql = SCHEMA.read_text(encoding="utf-8")
    assert re.search(r"task_id\s+uuid[^,]*references tasks\s*\(id\)\s+on delete cascade", sql, re.IGNORECASE)


def test_profile_pictures_bucket_allows_owner_insert_and_update() -> None:
    sql = SCHEMA.read_text(encoding="utf-8")
    policies = _policies_on_storage_objects(sql)

    for action in ("insert", "update"):
        matching = [p for p in policies if re.search(rf"\bfor {action}\b", p, re.IGNORECASE)]
        assert matching, f"no storage.objects {action} policy"
        assert all("bucket_id = 'profile-pictures'" in p for p in matching)
        assert all("(storage.foldername(name))[1] = auth.uid()::text" in p for p in matching)

# src/skytask/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status. Any status may follow any other."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


def parse_timestamp(raw: Any) -> datetime | None:
    """PostgREST returns ISO-8601 strings; tests and fakes may pass datetimes."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(slots=True)
class Task:
    id: str
    title: str
    priority: TaskPriority
    status: TaskStatus
    owner_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Task:
        return cls(
            id=str(row["id"]),
            title=str(row.get("title") or ""),
            priority=TaskPriority.from_db(row.get("priority")),
            status=TaskStatus.from_db(row.get("status")),
            owner_id=str(row.get("user_id") or ""),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )


@dataclass(slots=True)
class Subtask:
    id: str
    task_id: str
    title: str
    completed: bool
    owner_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Subtask:
        return cls(
            id=str(row["id"]),
            task_id=str(row.get("task_id") or ""),
            title=str(row.get("title") or ""),
            completed=bool(row.get("completed", False)),
            owner_id=str(row.get("user_id") or ""),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

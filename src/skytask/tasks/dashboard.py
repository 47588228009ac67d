# src/skytask/tasks/dashboard.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from ..core.ports import SubtaskGenerator, SubtaskRepo, TaskRepo
from .task_models import Subtask, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate subtasks. Please try again."

Alert = Callable[[str], None]


class DashboardController:
    """
    Task list, per-task subtasks and AI suggestion buffers for one view.

    Storage failures are logged and leave the in-memory state as it was.
    Only subtask generation reports failures to the user (via `alert`).
    """

    def __init__(
        self,
        tasks: TaskRepo,
        subtasks: SubtaskRepo,
        generator: SubtaskGenerator,
        *,
        alert: Alert,
    ) -> None:
        self._task_repo = tasks
        self._subtask_repo = subtasks
        self._generator = generator
        self._alert = alert

        self.tasks: list[Task] = []
        self.subtasks: dict[str, list[Subtask]] = {}
        self.suggestions: dict[str, list[str]] = {}
        self.expanded: set[str] = set()
        self.loading = False
        self._generating: set[str] = set()

    # ---- lookups ----

    def find_task(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def is_generating(self, task_id: str) -> bool:
        return task_id in self._generating

    # ---- tasks ----

    def list_tasks(self, owner_id: str) -> list[Task]:
        self.loading = True
        try:
            self.tasks = self._task_repo.list_tasks(owner_id)
        except Exception:
            logger.exception("Error loading tasks owner=%s", owner_id)
            self.tasks = []
        finally:
            self.loading = False

        try:
            grouped: dict[str, list[Subtask]] = {}
            for s in self._subtask_repo.list_subtasks(owner_id):
                grouped.setdefault(s.task_id, []).append(s)
            self.subtasks = grouped
        except Exception:
            logger.exception("Error loading subtasks owner=%s", owner_id)
            self.subtasks = {}

        return self.tasks

    def create_task(self, title: str, priority: TaskPriority | str, owner_id: str) -> Task | None:
        title = (title or "").strip()
        if not title:
            return None
        prio = TaskPriority(priority)

        try:
            task = self._task_repo.create_task(title=title, priority=prio, owner_id=owner_id)
        except Exception:
            logger.exception("Error creating task owner=%s", owner_id)
            return None

        self.tasks.insert(0, task)
        logger.debug("Task created id=%s priority=%s", task.id, prio.value)
        return task

    def set_task_status(self, task_id: str, status: TaskStatus | str) -> bool:
        new_status = TaskStatus(status)
        try:
            stored = self._task_repo.update_status(task_id, new_status)
        except Exception:
            logger.exception("Error updating task status id=%s", task_id)
            return False

        updated_at = stored.updated_at if stored is not None else datetime.now(timezone.utc)
        self.tasks = [
            replace(t, status=new_status, updated_at=updated_at) if t.id == task_id else t
            for t in self.tasks
        ]
        return True

    def delete_task(self, task_id: str) -> bool:
        # Subtask rows are left to the storage layer (FK cascade); nothing is deleted here.
        try:
            self._task_repo.delete_task(task_id)
        except Exception:
            logger.exception("Error deleting task id=%s", task_id)
            return False

        self.tasks = [t for t in self.tasks if t.id != task_id]
        self.subtasks.pop(task_id, None)
        self.suggestions.pop(task_id, None)
        self.expanded.discard(task_id)
        return True

    # ---- AI suggestions ----

    def generate_subtasks(self, task_id: str, title: str) -> list[str] | None:
        """
        Fetch suggestions for one task. The busy flag is informational only:
        a second call for the same task is not blocked.
        """
        self._generating.add(task_id)
        try:
            items = self._generator.generate(title)
        except Exception:
            logger.exception("Error generating subtasks task_id=%s", task_id)
            self._alert(GENERATION_FAILED_MESSAGE)
            return None
        finally:
            self._generating.discard(task_id)

        self.suggestions[task_id] = list(items)
        self.expanded.add(task_id)
        return self.suggestions[task_id]

    def save_suggestion(self, task_id: str, title: str) -> Subtask | None:
        subtask = self._insert_subtask(task_id, title)
        if subtask is None:
            return None
        # Equality match: identical suggestion texts are all removed together.
        self.suggestions[task_id] = [s for s in self.suggestions.get(task_id, []) if s != title]
        return subtask

    def discard_suggestion(self, task_id: str, title: str) -> None:
        self.suggestions[task_id] = [s for s in self.suggestions.get(task_id, []) if s != title]

    def toggle_suggestions(self, task_id: str) -> bool:
        if task_id in self.expanded:
            self.expanded.discard(task_id)
            return False
        self.expanded.add(task_id)
        return True

    # ---- subtasks ----

    def add_subtask(self, task_id: str, title: str) -> Subtask | None:
        title = (title or "").strip()
        if not title:
            return None
        return self._insert_subtask(task_id, title)

    def _insert_subtask(self, task_id: str, title: str) -> Subtask | None:
        task = self.find_task(task_id)
        if task is None:
            logger.warning("Subtask for unknown task id=%s ignored", task_id)
            return None

        try:
            subtask = self._subtask_repo.create_subtask(task_id=task_id, title=title, owner_id=task.owner_id)
        except Exception:
            logger.exception("Error saving subtask task_id=%s", task_id)
            return None

        self.subtasks.setdefault(task_id, []).append(subtask)
        return subtask

    def toggle_subtask(self, task_id: str, subtask_id: str, current_completed: bool) -> bool:
        completed = not current_completed
        try:
            self._subtask_repo.set_completed(subtask_id, completed)
        except Exception:
            logger.exception("Error toggling subtask id=%s", subtask_id)
            return False

        self.subtasks[task_id] = [
            replace(s, completed=completed) if s.id == subtask_id else s
            for s in self.subtasks.get(task_id, [])
        ]
        return True

    def delete_subtask(self, task_id: str, subtask_id: str) -> bool:
        try:
            self._subtask_repo.delete_subtask(subtask_id)
        except Exception:
            logger.exception("Error deleting subtask id=%s", subtask_id)
            return False

        self.subtasks[task_id] = [s for s in self.subtasks.get(task_id, []) if s.id != subtask_id]
        return True

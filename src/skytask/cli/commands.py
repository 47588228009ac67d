# src/skytask/cli/commands.py

from __future__ import annotations

import logging
import mimetypes
import shlex
from collections.abc import Callable
from pathlib import Path

from ..core.state import AppState
from ..errors import SearchError
from ..profile.controller import MAX_PICTURE_BYTES, TOO_LARGE_MESSAGE, UploadFile
from ..tasks.dashboard import DashboardController
from ..tasks.task_models import Subtask, Task, TaskPriority, TaskStatus
from .views import render_dashboard, render_form_result, render_landing, render_profile

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console front-end (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like '/command args'. Arguments follow shell quoting,
        so '/add high "Buy milk"' passes the title as one argument.
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."
        return handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _dashboard(state: AppState) -> DashboardController | None:
    return state.open_dashboard()


def _index(raw: str, size: int) -> int | None:
    try:
        i = int(raw)
    except ValueError:
        return None
    return i - 1 if 1 <= i <= size else None


def _task_arg(dash: DashboardController, raw: str) -> Task | None:
    i = _index(raw, len(dash.tasks))
    return dash.tasks[i] if i is not None else None


def _subtask_arg(dash: DashboardController, task: Task, raw: str) -> Subtask | None:
    items = dash.subtasks.get(task.id, [])
    i = _index(raw, len(items))
    return items[i] if i is not None else None


def _suggestion_arg(dash: DashboardController, task: Task, raw: str) -> str | None:
    items = dash.suggestions.get(task.id, [])
    i = _index(raw, len(items))
    return items[i] if i is not None else None


LOGIN_FIRST = "Please log in first (/login <email> <password>)."


# ---- navigation / auth ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_home(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.navigate("landing")
    return render_landing()


def cmd_signup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.navigate("signup")
    if len(args) != 3:
        return 'Usage: /signup "<name>" <email> <password>'

    if emit:
        emit("Creating Account...")
    result = state.auth.sign_up(args[0], args[1], args[2])
    if not result.ok:
        return render_form_result(result) or "Check your email to confirm the account, then /login."

    state.reset_session()
    dash = state.open_dashboard()
    return render_dashboard(dash) if dash else LOGIN_FIRST


def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.navigate("login")
    if len(args) != 2:
        return "Usage: /login <email> <password>"

    result = state.auth.sign_in(args[0], args[1])
    if not result.ok:
        return render_form_result(result)

    state.reset_session()
    dash = state.open_dashboard()
    return render_dashboard(dash) if dash else LOGIN_FIRST


def cmd_logout(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.navigate(state.auth.sign_out())
    state.reset_session()
    return "Logged out.\n\n" + render_landing()


# ---- dashboard ----


def cmd_tasks(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if args and args[0].lower() == "reload" and state.user is not None:
        dash.list_tasks(state.user.id)
    return render_dashboard(dash)


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None or state.user is None:
        return LOGIN_FIRST
    if len(args) < 2:
        return "Usage: /add <low|medium|high> <title>"

    priority = args[0].lower()
    if priority not in {p.value for p in TaskPriority}:
        return "Priority must be one of: low, medium, high."

    dash.create_task(" ".join(args[1:]), priority, state.user.id)
    return render_dashboard(dash)


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 2:
        return "Usage: /status <task#> <pending|in-progress|done>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    status = args[1].lower()
    if status not in {s.value for s in TaskStatus}:
        return "Status must be one of: pending, in-progress, done."

    dash.set_task_status(task.id, status)
    return render_dashboard(dash)


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 1:
        return "Usage: /delete <task#>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    dash.delete_task(task.id)
    return render_dashboard(dash)


def cmd_suggest(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 1:
        return "Usage: /suggest <task#>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    if emit:
        emit(f"Generating subtasks for: {task.title}")
    dash.generate_subtasks(task.id, task.title)
    return render_dashboard(dash)


def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 2:
        return "Usage: /save <task#> <suggestion#>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    suggestion = _suggestion_arg(dash, task, args[1])
    if suggestion is None:
        return f"No suggestion #{args[1]} for task #{args[0]}."

    dash.save_suggestion(task.id, suggestion)
    return render_dashboard(dash)


def cmd_discard(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 2:
        return "Usage: /discard <task#> <suggestion#>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    suggestion = _suggestion_arg(dash, task, args[1])
    if suggestion is None:
        return f"No suggestion #{args[1]} for task #{args[0]}."

    dash.discard_suggestion(task.id, suggestion)
    return render_dashboard(dash)


def cmd_collapse(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 1:
        return "Usage: /collapse <task#>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    dash.toggle_suggestions(task.id)
    return render_dashboard(dash)


def cmd_sub(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) < 2:
        return "Usage: /sub <task#> <title>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    dash.add_subtask(task.id, " ".join(args[1:]))
    return render_dashboard(dash)


def cmd_toggle(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 2:
        return "Usage: /toggle <task#> <subtask#>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    sub = _subtask_arg(dash, task, args[1])
    if sub is None:
        return f"No subtask #{args[1]} for task #{args[0]}."

    dash.toggle_subtask(task.id, sub.id, sub.completed)
    return render_dashboard(dash)


def cmd_subdel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    dash = _dashboard(state)
    if dash is None:
        return LOGIN_FIRST
    if len(args) != 2:
        return "Usage: /subdel <task#> <subtask#>"

    task = _task_arg(dash, args[0])
    if task is None:
        return f"No task #{args[0]}."
    sub = _subtask_arg(dash, task, args[1])
    if sub is None:
        return f"No subtask #{args[1]} for task #{args[0]}."

    dash.delete_subtask(task.id, sub.id)
    return render_dashboard(dash)


def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.user is None:
        state.navigate("login")
        return LOGIN_FIRST
    if not args:
        return "Usage: /search <query>"
    if state.backend.search is None:
        return "Semantic search is not configured."

    query = " ".join(args)
    try:
        rows = state.backend.search.search(query, user_id=state.user.id)
    except SearchError as e:
        return f"Search failed: {e}"

    if not rows:
        return "No similar tasks found."
    lines = [f"Tasks similar to: {query}"]
    for row in rows:
        sim = row.get("similarity")
        score = f" ({float(sim):.2f})" if isinstance(sim, (int, float)) else ""
        lines.append(f"  - {row.get('title', '?')}{score}")
    return "\n".join(lines)


# ---- profile ----


def cmd_profile(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    profile = state.open_profile()
    if profile is None:
        return LOGIN_FIRST
    return render_profile(profile, state.user)


def cmd_avatar(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    profile = state.open_profile()
    if profile is None:
        return LOGIN_FIRST
    if len(args) != 1:
        return "Usage: /avatar <path-to-image>"

    path = Path(args[0]).expanduser()
    if not path.is_file():
        return f"No such file: {path}"

    # Check the size before reading the file into memory.
    if path.stat().st_size > MAX_PICTURE_BYTES:
        profile.error = TOO_LARGE_MESSAGE
        return render_profile(profile, state.user)

    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    file = UploadFile(name=path.name, content_type=content_type, data=path.read_bytes())

    if emit:
        emit("Uploading...")
    profile.upload(file)
    return render_profile(profile, state.user)


registry.register("help", cmd_help, "Show this help")
registry.register("home", cmd_home, "Landing page", aliases=["start"])
registry.register("signup", cmd_signup, 'Create account: /signup "<name>" <email> <password>')
registry.register("login", cmd_login, "Login: /login <email> <password>")
registry.register("logout", cmd_logout, "Logout")
registry.register("tasks", cmd_tasks, "Dashboard (/tasks reload to refetch)", aliases=["dashboard"])
registry.register("add", cmd_add, "New task: /add <low|medium|high> <title>")
registry.register("status", cmd_status, "Set status: /status <task#> <pending|in-progress|done>")
registry.register("delete", cmd_delete, "Delete task: /delete <task#>")
registry.register("suggest", cmd_suggest, "AI subtasks: /suggest <task#>")
registry.register("save", cmd_save, "Save suggestion: /save <task#> <suggestion#>")
registry.register("discard", cmd_discard, "Discard suggestion: /discard <task#> <suggestion#>")
registry.register("collapse", cmd_collapse, "Show/hide AI suggestions: /collapse <task#>")
registry.register("sub", cmd_sub, "Add subtask: /sub <task#> <title>")
registry.register("toggle", cmd_toggle, "Toggle subtask: /toggle <task#> <subtask#>")
registry.register("subdel", cmd_subdel, "Delete subtask: /subdel <task#> <subtask#>")
registry.register("search", cmd_search, "Semantic search over your tasks: /search <query>")
registry.register("profile", cmd_profile, "Show profile")
registry.register("avatar", cmd_avatar, "Upload profile picture: /avatar <path>")

# src/skytask/cli/views.py

"""Plain-text renderings of the front-end screens."""

from __future__ import annotations

from ..auth.controller import FormResult
from ..core.ports import AuthUser
from ..profile.controller import ProfileController
from ..tasks.dashboard import DashboardController


def render_landing(app_name: str = "My Task Manager") -> str:
    return "\n".join(
        [
            f"Welcome to {app_name}",
            "",
            "  /login <email> <password>        Login",
            "  /signup <name> <email> <password> Signup",
            "  /tasks                            Go to Dashboard",
        ]
    )


def render_form_result(result: FormResult) -> str:
    if result.error:
        return f"Error: {result.error}"
    if result.field_errors:
        return "\n".join(f"  {name}: {msg}" for name, msg in result.field_errors.items())
    return ""


def render_dashboard(dashboard: DashboardController) -> str:
    if dashboard.loading:
        return "Loading..."

    lines = ["Your Tasks"]
    if not dashboard.tasks:
        lines.append("  (no tasks yet; add one with /add <low|medium|high> <title>)")
        return "\n".join(lines)

    for i, task in enumerate(dashboard.tasks, start=1):
        busy = " (generating...)" if dashboard.is_generating(task.id) else ""
        lines.append(f"{i}. [{task.priority.value}] {task.title} | {task.status.value}{busy}")

        for k, sub in enumerate(dashboard.subtasks.get(task.id, []), start=1):
            mark = "x" if sub.completed else " "
            lines.append(f"     [{mark}] {k}. {sub.title}")

        if task.id in dashboard.expanded:
            suggestions = dashboard.suggestions.get(task.id, [])
            if suggestions:
                lines.append("     AI suggestions:")
                for k, s in enumerate(suggestions, start=1):
                    lines.append(f"       {k}) {s}")

    return "\n".join(lines)


def render_profile(profile: ProfileController, user: AuthUser | None) -> str:
    lines = ["Profile"]
    lines.append(f"  Picture: {profile.picture_url or '(none)'}")
    if profile.uploading:
        lines.append("  Uploading...")
    if profile.error:
        lines.append(f"  Error: {profile.error}")
    if user is not None:
        lines.append(f"  {user.email}")
    lines.append("  Max file size: 5MB")
    lines.append("  Formats: JPG, PNG, GIF, WebP")
    return "\n".join(lines)

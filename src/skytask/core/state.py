# src/skytask/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..auth.controller import AuthController
from ..profile.controller import ProfileController
from ..tasks.dashboard import DashboardController
from .ports import (
    AuthUser,
    BlobStore,
    ProfileRepo,
    SubtaskGenerator,
    SubtaskRepo,
    TaskRepo,
    TaskSearchClient,
)

VIEWS = ("landing", "login", "signup", "dashboard", "profile")


@dataclass(slots=True)
class Backend:
    """Concrete collaborators wired by the composition root."""

    tasks: TaskRepo
    subtasks: SubtaskRepo
    profiles: ProfileRepo
    pictures: BlobStore
    generator: SubtaskGenerator
    search: TaskSearchClient | None = None


@dataclass
class AppState:
    settings: Any
    auth: AuthController
    backend: Backend
    alert: Callable[[str], None]

    view: str = "landing"
    dashboard: DashboardController | None = None
    profile: ProfileController | None = None

    @property
    def user(self) -> AuthUser | None:
        return self.auth.user

    def navigate(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self.view = view

    def open_dashboard(self) -> DashboardController | None:
        """Build (once per session) and load the dashboard; redirects to login without a user."""
        user = self.user
        if user is None:
            self.navigate("login")
            return None

        if self.dashboard is None:
            self.dashboard = DashboardController(
                self.backend.tasks,
                self.backend.subtasks,
                self.backend.generator,
                alert=lambda message: self.alert(message),
            )
            self.dashboard.list_tasks(user.id)

        self.navigate("dashboard")
        return self.dashboard

    def open_profile(self) -> ProfileController | None:
        user = self.user
        if user is None:
            self.navigate("login")
            return None

        if self.profile is None or self.profile.user_id != user.id:
            self.profile = ProfileController(self.backend.profiles, self.backend.pictures, user_id=user.id)
            self.profile.load()

        self.navigate("profile")
        return self.profile

    def reset_session(self) -> None:
        self.dashboard = None
        self.profile = None

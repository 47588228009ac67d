# src/skytask/auth/controller.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..core.ports import AuthProvider, AuthUser

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

SIGNUP_FAILED_MESSAGE = "An error occurred during signup"
LOGIN_FAILED_MESSAGE = "An error occurred during login"


@dataclass(slots=True)
class FormResult:
    """Outcome of a login/signup form: per-field errors, a form error, or a user."""

    user: AuthUser | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    error: str | None = None
    redirect_to: str | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None and not self.field_errors and self.error is None


def _check_email(email: str, errors: dict[str, str]) -> None:
    if not email:
        errors["email"] = "Email is required"
    elif "@" not in email:
        errors["email"] = "Enter a valid email address"


class AuthController:
    def __init__(self, provider: AuthProvider) -> None:
        self._provider = provider
        self.user: AuthUser | None = None

    def restore(self) -> AuthUser | None:
        """Pick up an existing session (if the provider kept one)."""
        try:
            self.user = self._provider.current_user()
        except Exception:
            logger.exception("Failed to restore session.")
            self.user = None
        return self.user

    def sign_up(self, name: str, email: str, password: str) -> FormResult:
        name = (name or "").strip()
        email = (email or "").strip()

        errors: dict[str, str] = {}
        if not name:
            errors["name"] = "Name is required"
        _check_email(email, errors)
        if not password:
            errors["password"] = "Password is required"
        elif len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        if errors:
            return FormResult(field_errors=errors)

        try:
            user = self._provider.sign_up(email=email, password=password, name=name)
        except Exception as e:
            logger.info("Signup rejected email=%s: %s", email, e)
            return FormResult(error=str(e).strip() or SIGNUP_FAILED_MESSAGE)

        if user is None:
            return FormResult()

        self.user = user
        logger.info("Signed up user=%s", user.id)
        return FormResult(user=user, redirect_to="dashboard")

    def sign_in(self, email: str, password: str) -> FormResult:
        email = (email or "").strip()

        errors: dict[str, str] = {}
        _check_email(email, errors)
        if not password:
            errors["password"] = "Password is required"
        if errors:
            return FormResult(field_errors=errors)

        try:
            user = self._provider.sign_in(email=email, password=password)
        except Exception as e:
            logger.info("Login rejected email=%s: %s", email, e)
            return FormResult(error=str(e).strip() or LOGIN_FAILED_MESSAGE)

        self.user = user
        logger.info("Signed in user=%s", user.id)
        return FormResult(user=user, redirect_to="dashboard")

    def sign_out(self) -> str:
        try:
            self._provider.sign_out()
        except Exception:
            logger.exception("Sign-out failed.")
        self.user = None
        return "landing"

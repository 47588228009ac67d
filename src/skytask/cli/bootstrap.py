# src/skytask/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- builds the hosted backend client (auth + tables + storage share one session),
- wires concrete adapters and function clients into AppState.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..auth.controller import AuthController
from ..config import get_settings
from ..core.state import AppState, Backend
from ..functions.client import HttpSubtaskGenerator, HttpTaskSearchClient
from ..storage.supabase_store import (
    SupabaseAuth,
    SupabaseBlobStore,
    SupabaseProfileRepo,
    SupabaseSubtaskRepo,
    SupabaseTaskRepo,
    create_backend_client,
)

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, alert: Callable[[str], None] | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    client = create_backend_client(settings.supabase_url, settings.supabase_anon_key)

    timeout = float(getattr(settings, "http_timeout_seconds", 60.0))
    backend = Backend(
        tasks=SupabaseTaskRepo(client),
        subtasks=SupabaseSubtaskRepo(client),
        profiles=SupabaseProfileRepo(client),
        pictures=SupabaseBlobStore(client),
        generator=HttpSubtaskGenerator(settings.functions_base_url, settings.supabase_anon_key, timeout=timeout),
        search=HttpTaskSearchClient(settings.functions_base_url, settings.supabase_anon_key, timeout=timeout),
    )

    auth = AuthController(SupabaseAuth(client))
    if auth.restore() is not None:
        logger.info("Restored session user=%s", auth.user.id if auth.user else None)

    return AppState(
        settings=settings,
        auth=auth,
        backend=backend,
        alert=alert or (lambda message: logger.warning("ALERT: %s", message)),
    )

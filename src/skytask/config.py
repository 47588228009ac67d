# src/skytask/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (front-end and server functions).
- No secrets required at import time; missing credentials surface at use time.
- The unprefixed names used by the hosted functions runtime
  (OPENAI_API_KEY, SUPABASE_URL, ...) are accepted as fallbacks.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SKYTASK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Hosted backend (auth, tables, storage) ----
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str | None

    # ---- LLM / OpenAI (server-side only) ----
    openai_api_key: str | None
    openai_base_url: str
    chat_model: str
    embedding_model: str

    # ---- Server functions ----
    functions_base_url: str
    functions_host: str
    functions_port: int
    http_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "skytask") or "skytask"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/skytask"))

        supabase_url = (_first_env(_k("SUPABASE_URL"), "SUPABASE_URL", default="") or "").strip().rstrip("/")
        supabase_anon_key = (_first_env(_k("SUPABASE_ANON_KEY"), "SUPABASE_ANON_KEY", default="") or "").strip()
        supabase_service_role_key = _first_env(
            _k("SUPABASE_SERVICE_ROLE_KEY"), "SUPABASE_SERVICE_ROLE_KEY", default=None
        )

        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _env(_k("OPENAI_BASE_URL"), "https://api.openai.com/v1")
        chat_model = _env(_k("CHAT_MODEL"), "gpt-4o-mini")
        embedding_model = _env(_k("EMBEDDING_MODEL"), "text-embedding-3-small")

        # Hosted functions live under <project>/functions/v1 unless overridden (e.g. local Flask server).
        default_functions_url = f"{supabase_url}/functions/v1" if supabase_url else "http://127.0.0.1:8000"
        functions_base_url = _env(_k("FUNCTIONS_BASE_URL"), default_functions_url).rstrip("/")
        functions_host = _env(_k("FUNCTIONS_HOST"), "127.0.0.1")
        functions_port = _env_int(_k("FUNCTIONS_PORT"), 8000)
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 60.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            supabase_url=supabase_url,
            supabase_anon_key=supabase_anon_key,
            supabase_service_role_key=supabase_service_role_key,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            chat_model=chat_model,
            embedding_model=embedding_model,
            functions_base_url=functions_base_url,
            functions_host=functions_host,
            functions_port=functions_port,
            http_timeout_seconds=http_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS

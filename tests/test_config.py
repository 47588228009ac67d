# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from skytask.config import Settings


def test_from_env_prefers_prefixed_names(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "plain")
    monkeypatch.setenv("SKYTASK_OPENAI_API_KEY", "prefixed")
    monkeypatch.setenv("SKYTASK_SUPABASE_URL", "https://proj.supabase.co/")
    monkeypatch.delenv("SKYTASK_FUNCTIONS_BASE_URL", raising=False)

    s = Settings.from_env()

    assert s.openai_api_key == "prefixed"
    assert s.supabase_url == "https://proj.supabase.co"
    assert s.functions_base_url == "https://proj.supabase.co/functions/v1"


def test_from_env_falls_back_to_plain_names(monkeypatch) -> None:
    monkeypatch.delenv("SKYTASK_OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "plain")
    monkeypatch.setenv("SKYTASK_FUNCTIONS_PORT", "not-a-number")
    monkeypatch.setenv("SKYTASK_DATA_DIR", "/tmp/skytask-data")

    s = Settings.from_env()

    assert s.openai_api_key == "plain"
    assert s.functions_port == 8000
    assert s.data_dir == Path("/tmp/skytask-data")

"""Shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with no stray .env, config file or extractor environment variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FEMA_CONFIG_FILE", str(tmp_path / "missing.toml"))
    for name in (
        "DEBUG",
        "NUM_YEARS_PREVIOUS",
        "CSV_PATH",
        "API_BASE",
        "API_TIMEOUT",
        "PAGE_SIZE",
        "MAX_CONCURRENT_PAGES",
        "RUN_ONCE",
        "EXTRACT_SCHEDULE_CRON",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path

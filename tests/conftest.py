"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Clear cached settings and pipeline env overrides around each test."""
    from src.settings import get_settings

    for var in (
        "FLOATNOTE_MAX_VISIBLE",
        "FLOATNOTE_ARRIVAL_CAP",
        "FLOATNOTE_LEDGER_CAPACITY",
        "FLOATNOTE_TRIM_INTERVAL_SECONDS",
        "FLOATNOTE_LOG_LEVEL",
        "FLOATNOTE_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from vigil.config import reset_config

pytest_plugins = ("pytest_asyncio",)

_VIGIL_ENV_VARS = (
    "VIGIL_TEMPLATE_HOT_RELOAD",
    "VIGIL_REFRESH_INTERVAL",
    "VIGIL_COOLDOWN_PERIOD",
    "VIGIL_DISABLE",
    "VIGIL_LOG_LEVEL",
    "VIGIL_LOG",
    "VIGIL_ENV",
)


@pytest.fixture(autouse=True)
def clean_vigil_state(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from the caller's VIGIL_* variables and the config cache."""
    for var in _VIGIL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()

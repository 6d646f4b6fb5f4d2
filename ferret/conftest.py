"""Pytest configuration shared by every Ferret test module.

Keeps the developer's own FERRET_* environment and ~/.config/ferret config
out of the tests and resets the cached settings around each test.
"""

import os

import pytest

from ferret.shared.settings import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    for key in list(os.environ):
        if key.startswith("FERRET_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("FERRET_CONFIG", str(tmp_path / "missing-config.yaml"))
    monkeypatch.setenv("FERRET_LOG_LEVEL", "CRITICAL")
    monkeypatch.chdir(tmp_path)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

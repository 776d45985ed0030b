"""Pytest helpers for path configuration."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

_ENV_OVERRIDES = (
    "APPIMAN_CONFIG",
    "APPIMAN_STAGING_DIR",
    "APPIMAN_BIN_DIR",
    "APPIMAN_ICON_DIR",
    "APPIMAN_DESKTOP_DIR",
    "APPIMAN_SYMLINK_DIR",
    "APPIMAN_HOME_ROOT",
    "APPIMAN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clear_appiman_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's APPIMAN_* variables from leaking into tests."""

    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)

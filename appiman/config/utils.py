"""Helper utilities for configuration handling."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping


def env_value(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the stripped value of ``name`` or ``None`` when unset or empty."""

    source = os.environ if environ is None else environ
    value = source.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_path_list(name: str, environ: Mapping[str, str] | None = None) -> list[Path] | None:
    """Split an ``os.pathsep``-separated variable into paths.

    Empty segments are dropped; ``None`` is returned when nothing remains so
    callers can keep their configured value.
    """

    raw = env_value(name, environ)
    if raw is None:
        return None
    paths = [Path(part) for part in raw.split(os.pathsep) if part.strip()]
    return paths or None


__all__ = ["env_value", "env_path_list"]

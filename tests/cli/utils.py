"""Shared helpers for CLI tests."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from pathlib import Path

from loguru import logger


@contextmanager
def logger_to_stderr(level: str = "INFO"):
    """Temporarily route Loguru output to stderr for assertion."""

    handler_id = logger.add(sys.stderr, level=level)
    try:
        yield
    finally:
        logger.remove(handler_id)


def write_config(base_dir: Path, *, require_root: bool = False, extra: str = "") -> Path:
    """Write a config whose directories all live under ``base_dir``."""

    dirs = {
        "staging": base_dir / "raw",
        "binaries": base_dir / "bin",
        "icons": base_dir / "icons",
        "entries": base_dir / "applications",
        "symlinks": base_dir / "links",
    }
    home = base_dir / "home"
    home.mkdir(parents=True, exist_ok=True)

    lines = [f"require_root = {'true' if require_root else 'false'}", "", "[directories]"]
    lines += [f'{key} = "{value}"' for key, value in dirs.items()]
    lines.append(f'home_roots = ["{home}"]')
    lines += ["", "[mover]", f"owner_uid = {os.getuid()}", f"owner_gid = {os.getgid()}"]
    lines += ["", "[runtime]", "self_update = false"]
    if extra:
        lines += ["", extra]

    config_file = base_dir / "config.toml"
    config_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return config_file

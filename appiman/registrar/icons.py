"""Icon lookup inside an extracted package tree."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from loguru import logger

from .descriptor import is_inside, iter_tree

ICON_SUFFIXES = (".png", ".svg")
_KEY_SUFFIXES = (".png", ".svg", ".xpm")


def _normalise_key(icon_key: str) -> str:
    key = PurePosixPath(icon_key.strip()).name
    lowered = key.lower()
    for suffix in _KEY_SUFFIXES:
        if lowered.endswith(suffix):
            return key[: -len(suffix)]
    return key


def resolve_icon(root: Path, icon_key: str | None) -> Path | None:
    """Pick the icon file for a package content tree.

    With a key, an exact ``<key>.png``/``<key>.svg`` wins over a
    ``<key>*.svg`` prefix match. Without a key or a match, the first top-level
    ``.png``/``.svg`` is used. Names compare case-insensitively.
    """

    key = _normalise_key(icon_key) if icon_key else ""
    if key:
        lowered = key.lower()
        exact = {f"{lowered}{suffix}" for suffix in ICON_SUFFIXES}
        prefix_match: Path | None = None
        for path in iter_tree(root):
            name = path.name.lower()
            if not is_inside(root, path):
                continue
            if name in exact:
                return path
            if prefix_match is None and name.startswith(lowered) and name.endswith(".svg"):
                prefix_match = path
        if prefix_match is not None:
            return prefix_match
        logger.debug("Icon key {!r} not found under {}", icon_key, root)

    for path in sorted(root.iterdir()):
        if path.suffix.lower() in ICON_SUFFIXES and path.is_file() and is_inside(root, path):
            return path
    return None


__all__ = ["ICON_SUFFIXES", "resolve_icon"]

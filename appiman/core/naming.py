"""Canonical package names derived from file name stems."""

from __future__ import annotations

import re

# Markers are whole tokens: bounded by a non-letter or the string edge.
_MARKER_RE = re.compile(r"(?<![A-Za-z])(?:x86_64|amd64|i386|linux|setup)(?![A-Za-z])", re.IGNORECASE)
# Optional separator, optional token-initial "v", dot-separated digit groups.
_VERSION_RE = re.compile(r"[-_.]?(?:(?<![A-Za-z])[vV])?[0-9]+(?:\.[0-9]+)*")
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")

CANONICAL_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def _canonicalize_once(stem: str) -> str:
    value = _MARKER_RE.sub("", stem)
    value = _VERSION_RE.sub("", value)
    value = _SEPARATOR_RE.sub("-", value)
    return value.strip("-").lower()


def canonicalize(stem: str) -> str:
    """Return the canonical name for a file name stem (extension removed).

    Removes platform/build markers (``x86_64``, ``amd64``, ``i386``,
    ``linux``, ``setup``) and version-like substrings, collapses separators to
    single hyphens, trims them and lowercases the result. An empty string means
    the stem carries no usable identity.

    Removing a token can expose a new one (``lin1ux`` becomes ``linux``), so
    the pass is repeated until the value is stable. Each pass only shrinks the
    string, which keeps the loop finite and the function idempotent.
    """

    current = stem
    while True:
        candidate = _canonicalize_once(current)
        if candidate == current:
            return candidate
        current = candidate


def is_canonical(name: str) -> bool:
    return name == "" or CANONICAL_NAME_RE.fullmatch(name) is not None


def stem_of(filename: str, extension: str) -> str | None:
    """Strip ``extension`` (case-insensitive) from ``filename``.

    Returns ``None`` when the file does not carry the extension.
    """

    if len(filename) <= len(extension) or not filename.lower().endswith(extension.lower()):
        return None
    return filename[: -len(extension)]


def display_name(canonical: str) -> str:
    """Default launcher label: the canonical name with its first letter capitalised."""

    return canonical[:1].upper() + canonical[1:]


__all__ = ["CANONICAL_NAME_RE", "canonicalize", "display_name", "is_canonical", "stem_of"]

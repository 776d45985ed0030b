"""Free-name computation for destinations that may already be taken."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .errors import ConflictResolutionError

MAX_ATTEMPTS = 10_000


def resolve_conflict(
    desired: Path,
    *,
    exists: Callable[[Path], bool] = Path.exists,
    limit: int = MAX_ATTEMPTS,
) -> Path:
    """Return ``desired`` or the first free ``<stem>-N<suffix>`` next to it.

    Only existence checks are performed; nothing is created, so two callers
    racing on the same name can still pick the same result.
    """

    if not exists(desired) and not desired.is_symlink():
        return desired

    stem, suffix = desired.stem, desired.suffix
    for counter in range(1, limit + 1):
        candidate = desired.with_name(f"{stem}-{counter}{suffix}")
        if not exists(candidate) and not candidate.is_symlink():
            return candidate

    raise ConflictResolutionError(f"No free name for {desired} after {limit} attempts")


__all__ = ["MAX_ATTEMPTS", "resolve_conflict"]

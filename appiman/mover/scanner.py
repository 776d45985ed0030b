"""Discovery of package files under user home directories."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from loguru import logger

from appiman.core.errors import DiscoveryError


class Scanner:
    """Lazy, restartable walk over one or more home roots.

    Every iteration walks the roots again. Directories that cannot be listed
    are recorded in :attr:`errors` and skipped; the rest of the tree is still
    visited.
    """

    def __init__(
        self,
        roots: Iterable[Path],
        excludes: Iterable[str | Path] = (),
        *,
        extension: str = ".AppImage",
    ) -> None:
        self.roots = [Path(root) for root in roots]
        self.excludes = [Path(item) for item in excludes]
        self.extension = extension.lower()
        self.errors: list[DiscoveryError] = []

    def __iter__(self) -> Iterator[Path]:
        self.errors = []
        for root in self.roots:
            yield from self._walk_root(root)

    def _walk_root(self, root: Path) -> Iterator[Path]:
        if not root.is_dir():
            self._record(root, "root directory does not exist")
            return

        def _on_error(exc: OSError) -> None:
            self._record(Path(exc.filename or root), exc.strerror or str(exc))

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=False):
            current = Path(dirpath)
            dirnames[:] = [name for name in dirnames if not self._is_excluded(current / name, root)]
            for name in filenames:
                if not name.lower().endswith(self.extension):
                    continue
                candidate = current / name
                if self._is_excluded(candidate, root):
                    continue
                try:
                    if not candidate.is_file() or candidate.is_symlink():
                        continue
                except OSError as exc:
                    self._record(candidate, str(exc))
                    continue
                yield candidate

    def _is_excluded(self, path: Path, root: Path) -> bool:
        relative = path.relative_to(root).parts
        for exclude in self.excludes:
            if exclude.is_absolute():
                if path == exclude or exclude in path.parents:
                    return True
                continue
            prefix = exclude.parts
            # Relative prefixes apply beneath the root and beneath each user home.
            if _starts_with(relative, prefix) or _starts_with(relative[1:], prefix):
                return True
        return False

    def _record(self, path: Path, reason: str) -> None:
        error = DiscoveryError(path, reason)
        logger.warning("Skipping unreadable path during scan: {}", error)
        self.errors.append(error)


def _starts_with(parts: Sequence[str], prefix: Sequence[str]) -> bool:
    return bool(prefix) and tuple(parts[: len(prefix)]) == tuple(prefix)


def scan(
    roots: Iterable[Path],
    excludes: Iterable[str | Path] = (),
    *,
    extension: str = ".AppImage",
) -> Scanner:
    """Return a restartable sequence of package files found under ``roots``."""

    return Scanner(roots, excludes, extension=extension)


__all__ = ["Scanner", "scan"]

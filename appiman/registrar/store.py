"""Repositories over the target tree (binaries, icons, entries, symlinks).

The processor and the cleanup engine only talk to these interfaces, so tests
can swap the filesystem for in-memory fakes.
"""

from __future__ import annotations

import errno
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger

from appiman.config import DirectoriesConfig
from appiman.core.errors import TargetTreeError


@runtime_checkable
class ArtifactStore(Protocol):
    root: Path

    def ensure_ready(self) -> None: ...

    def list(self) -> list[str]: ...

    def exists(self, name: str) -> bool: ...

    def get(self, name: str) -> bytes | None: ...

    def path_for(self, name: str) -> Path: ...

    def put_if_absent(self, name: str, source: Path, *, mode: int | None = None) -> bool: ...

    def write(self, name: str, data: bytes, *, mode: int | None = None) -> None: ...

    def chmod(self, name: str, mode: int) -> None: ...

    def delete(self, name: str) -> bool: ...


@runtime_checkable
class LinkStore(Protocol):
    root: Path

    def ensure_ready(self) -> None: ...

    def list(self) -> list[str]: ...

    def target(self, name: str) -> Path | None: ...

    def link(self, name: str, target: Path) -> None: ...

    def delete(self, name: str) -> bool: ...


def _ensure_writable_dir(root: Path) -> None:
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise TargetTreeError(f"Cannot create target directory {root}: {exc}") from exc
    if not root.is_dir():
        raise TargetTreeError(f"Target path {root} is not a directory")
    if not os.access(root, os.W_OK | os.X_OK):
        raise TargetTreeError(f"Target directory {root} is not writable")


class DirectoryStore:
    """Flat directory of regular files keyed by file name."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def ensure_ready(self) -> None:
        _ensure_writable_dir(self.root)

    def list(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            entry.name
            for entry in os.scandir(self.root)
            if entry.is_file(follow_symlinks=False) and not entry.name.startswith(".appiman-")
        )

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def get(self, name: str) -> bytes | None:
        try:
            return self.path_for(name).read_bytes()
        except FileNotFoundError:
            return None

    def path_for(self, name: str) -> Path:
        if not name or "/" in name or name in {".", ".."}:
            raise ValueError(f"Invalid artifact name: {name!r}")
        return self.root / name

    def put_if_absent(self, name: str, source: Path, *, mode: int | None = None) -> bool:
        """Copy ``source`` in as ``name`` unless an artifact already exists.

        The copy lands in a temp file first and is hard-linked into place, so
        an existing artifact is never replaced, even by a concurrent writer.
        """

        destination = self.path_for(name)
        if destination.exists() or destination.is_symlink():
            return False

        tmp_path = self._temp_copy(source, mode)
        try:
            try:
                os.link(tmp_path, destination)
            except FileExistsError:
                return False
            except OSError as exc:
                if exc.errno not in (errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.EMLINK):
                    raise
                # Filesystem without hard links: fall back to a checked rename.
                if destination.exists():
                    return False
                os.replace(tmp_path, destination)
        finally:
            tmp_path.unlink(missing_ok=True)
        return True

    def write(self, name: str, data: bytes, *, mode: int | None = None) -> None:
        destination = self.path_for(name)
        fd, tmp_name = tempfile.mkstemp(prefix=".appiman-", dir=self.root)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            if mode is not None:
                os.chmod(tmp_path, mode)
            os.replace(tmp_path, destination)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def chmod(self, name: str, mode: int) -> None:
        os.chmod(self.path_for(name), mode)

    def delete(self, name: str) -> bool:
        try:
            self.path_for(name).unlink()
        except FileNotFoundError:
            return False
        return True

    def _temp_copy(self, source: Path, mode: int | None) -> Path:
        fd, tmp_name = tempfile.mkstemp(prefix=".appiman-", dir=self.root)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle, source.open("rb") as src:
                shutil.copyfileobj(src, handle)
            if mode is not None:
                os.chmod(tmp_path, mode)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return tmp_path


class SymlinkDirectory:
    """Directory of command-line symlinks keyed by link name."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def ensure_ready(self) -> None:
        _ensure_writable_dir(self.root)

    def list(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(entry.name for entry in os.scandir(self.root) if entry.is_symlink())

    def target(self, name: str) -> Path | None:
        path = self.root / name
        try:
            raw = Path(os.readlink(path))
        except OSError:
            return None
        return raw if raw.is_absolute() else self.root / raw

    def link(self, name: str, target: Path) -> None:
        """Create or atomically refresh ``name`` so it points at ``target``."""

        path = self.root / name
        if path.exists() and not path.is_symlink():
            raise FileExistsError(f"{path} exists and is not a symlink; refusing to replace it")
        tmp_path = self.root / f".appiman-{name}.{os.getpid()}.tmp"
        tmp_path.unlink(missing_ok=True)
        os.symlink(target, tmp_path)
        try:
            os.replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Linked {} -> {}", path, target)

    def delete(self, name: str) -> bool:
        path = self.root / name
        if not path.is_symlink():
            return False
        path.unlink()
        return True


@dataclass(slots=True)
class TargetTree:
    """The four shared target repositories."""

    binaries: ArtifactStore
    icons: ArtifactStore
    entries: ArtifactStore
    links: LinkStore

    @classmethod
    def from_config(cls, directories: DirectoriesConfig) -> "TargetTree":
        return cls(
            binaries=DirectoryStore(directories.binaries),
            icons=DirectoryStore(directories.icons),
            entries=DirectoryStore(directories.entries),
            links=SymlinkDirectory(directories.symlinks),
        )

    def ensure_ready(self) -> None:
        """Raise :class:`TargetTreeError` unless every directory is usable."""

        for store in (self.binaries, self.icons, self.entries, self.links):
            store.ensure_ready()


__all__ = [
    "ArtifactStore",
    "LinkStore",
    "DirectoryStore",
    "SymlinkDirectory",
    "TargetTree",
]

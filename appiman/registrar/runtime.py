"""The package's own extraction and update capabilities.

appiman never parses the package format itself; it asks the package to unpack
or update itself and only looks at the result.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol

from loguru import logger

from appiman.config import RuntimeConfig
from appiman.core.errors import ExtractionError

CONTENT_ROOT_NAME = "squashfs-root"


class PackageRuntime(Protocol):
    def extract(self, package: Path, scratch: Path) -> Path:
        """Unpack ``package`` inside ``scratch`` and return the content root."""
        ...

    def update(self, package: Path) -> None:
        """Ask ``package`` to update itself; may raise on failure."""
        ...


@contextmanager
def scratch_directory(prefix: str = "appiman-extract-") -> Iterator[Path]:
    """Yield a fresh private directory that is removed on every exit path."""

    path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        if path.exists():
            logger.warning("Scratch directory {} could not be fully removed", path)


class AppImageRuntime:
    """Runs ``--appimage-extract`` / ``--appimage-update`` on the package."""

    def __init__(
        self,
        *,
        extract_timeout: float | None = 300.0,
        update_timeout: float | None = 600.0,
    ) -> None:
        self.extract_timeout = extract_timeout
        self.update_timeout = update_timeout

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> "AppImageRuntime":
        return cls(extract_timeout=config.extract_timeout, update_timeout=config.update_timeout)

    def extract(self, package: Path, scratch: Path) -> Path:
        logger.debug("Extracting {} into {}", package, scratch)
        try:
            result = subprocess.run(
                [str(package), "--appimage-extract"],
                cwd=scratch,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=self.extract_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExtractionError(f"extraction of {package.name} timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise ExtractionError(f"cannot execute {package}: {exc}") from exc

        if result.returncode != 0:
            detail = result.stderr.decode("utf-8", errors="replace").strip().splitlines()
            suffix = f": {detail[-1]}" if detail else ""
            raise ExtractionError(f"extraction exited with status {result.returncode}{suffix}")

        content_root = scratch / CONTENT_ROOT_NAME
        if not content_root.is_dir():
            raise ExtractionError(f"{CONTENT_ROOT_NAME} not found after extracting {package.name}")
        return content_root

    def update(self, package: Path) -> None:
        subprocess.run(
            [str(package), "--appimage-update"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=self.update_timeout,
            check=True,
        )


__all__ = ["AppImageRuntime", "CONTENT_ROOT_NAME", "PackageRuntime", "scratch_directory"]

"""Relocation of discovered packages into the shared staging area."""

from __future__ import annotations

import errno
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from loguru import logger

from appiman.config import AppConfig
from appiman.core.conflict import resolve_conflict
from appiman.core.errors import RelocationError

from .scanner import scan


@dataclass(slots=True)
class MovedFile:
    source: Path
    destination: Path


@dataclass(slots=True)
class MoveReport:
    """Outcome of a relocation batch."""

    moved: list[MovedFile] = field(default_factory=list)
    skipped: list[tuple[Path, str]] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)
    warnings: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.moved)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def merge(self, other: "MoveReport") -> None:
        self.moved.extend(other.moved)
        self.skipped.extend(other.skipped)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "moved": [{"source": str(item.source), "destination": str(item.destination)} for item in self.moved],
            "skipped": [{"path": str(path), "reason": reason} for path, reason in self.skipped],
            "errors": [{"path": str(path), "reason": reason} for path, reason in self.errors],
            "warnings": [{"path": str(path), "reason": reason} for path, reason in self.warnings],
        }


class Mover:
    """Moves package files into ``staging_root`` without ever losing a copy."""

    def __init__(
        self,
        staging_root: Path,
        *,
        owner: tuple[int, int] | None = (0, 0),
        mode: int = 0o755,
        dry_run: bool = False,
    ) -> None:
        self.staging_root = staging_root
        self.owner = owner
        self.mode = mode
        self.dry_run = dry_run
        # Destinations claimed by a dry run; nothing is created on disk for them.
        self._planned: set[Path] = set()

    def move_all(self, sources: Iterable[Path]) -> MoveReport:
        report = MoveReport()
        self._planned.clear()
        if not self.dry_run:
            self.staging_root.mkdir(parents=True, exist_ok=True)

        for source in sources:
            skip_reason = self._skip_reason(source)
            if skip_reason:
                logger.info("Skipping {}: {}", source, skip_reason)
                report.skipped.append((source, skip_reason))
                continue
            try:
                destination = self.move_one(source, report)
            except (RelocationError, OSError) as exc:
                logger.warning("Failed to move {}: {}", source, exc)
                report.errors.append((source, str(exc)))
                continue
            report.moved.append(MovedFile(source=source, destination=destination))

        if report.has_errors:
            logger.error("Relocation finished with {} errors", len(report.errors))
        else:
            logger.info("Relocated {} packages into {}", report.success_count, self.staging_root)
        return report

    def move_one(self, source: Path, report: MoveReport) -> Path:
        """Move one file and return its destination; warnings go to ``report``."""

        destination = resolve_conflict(self.staging_root / source.name, exists=self._taken)

        if self.dry_run:
            self._planned.add(destination)
            logger.info("[Dry Run] Would move {} -> {}", source, destination)
            return destination

        try:
            os.rename(source, destination)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise RelocationError(f"cannot move {source} to {destination}: {exc.strerror or exc}") from exc
            self._copy_then_delete(source, destination, report)
        logger.info("Moved {} -> {}", source, destination)

        self._normalise(destination, report)
        return destination

    def _copy_then_delete(self, source: Path, destination: Path, report: MoveReport) -> None:
        partial = destination.with_name(f".{destination.name}.partial")
        try:
            shutil.copy2(source, partial)
            os.replace(partial, destination)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise RelocationError(f"cross-device copy of {source} failed: {exc}") from exc

        try:
            source.unlink()
        except OSError as exc:
            # Both copies exist; the staged one is complete.
            logger.warning("Copied {} but could not remove the source: {}", source, exc)
            report.warnings.append((source, f"source left in place: {exc}"))

    def _normalise(self, path: Path, report: MoveReport) -> None:
        if self.owner is not None:
            uid, gid = self.owner
            try:
                os.chown(path, uid, gid)
            except OSError as exc:
                logger.warning("Failed to chown {} to {}:{}: {}", path, uid, gid, exc)
                report.warnings.append((path, f"chown failed: {exc}"))
        try:
            os.chmod(path, self.mode)
        except OSError as exc:
            logger.warning("Failed to chmod {}: {}", path, exc)
            report.warnings.append((path, f"chmod failed: {exc}"))

    def _taken(self, path: Path) -> bool:
        return path in self._planned or path.exists()

    def _skip_reason(self, source: Path) -> str | None:
        if source.is_symlink():
            return "source is a symlink"
        if not source.exists():
            return "source no longer exists"
        if not source.is_file():
            return "source is not a regular file"
        if self.staging_root.resolve() in source.resolve().parents:
            return "source is already staged"
        return None


def move(
    source: Path,
    staging_root: Path,
    *,
    owner: tuple[int, int] | None = (0, 0),
    mode: int = 0o755,
    dry_run: bool = False,
) -> MoveReport:
    """Relocate a single source file into ``staging_root``."""

    return Mover(staging_root, owner=owner, mode=mode, dry_run=dry_run).move_all([source])


def ingest(config: AppConfig, *, dry_run: bool = False) -> MoveReport:
    """Scan every configured home root and move the packages found into staging."""

    dirs = config.directories
    excludes: list[str | Path] = [*config.scanner.exclude, dirs.staging]
    scanner = scan(dirs.home_roots, excludes, extension=config.scanner.extension)
    mover = Mover(
        dirs.staging,
        owner=(config.mover.owner_uid, config.mover.owner_gid),
        mode=config.mover.mode,
        dry_run=dry_run,
    )

    logger.info("Ingesting packages from {}", ", ".join(str(root) for root in dirs.home_roots))
    report = mover.move_all(scanner)
    for error in scanner.errors:
        report.skipped.append((error.path, f"unreadable: {error.reason}"))
    return report


__all__ = ["MoveReport", "MovedFile", "Mover", "ingest", "move"]

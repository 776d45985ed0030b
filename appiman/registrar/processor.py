"""Registration of staged packages into the target tree."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from appiman.config import AppConfig
from appiman.core.errors import (
    AppimanError,
    DescriptorParseError,
    EntryWriteError,
    TargetTreeError,
)
from appiman.core.naming import canonicalize, stem_of

from .descriptor import Descriptor, find_descriptor, read_descriptor
from .entry import EntryWriter, MenuEntry
from .icons import resolve_icon
from .runtime import AppImageRuntime, PackageRuntime, scratch_directory
from .store import TargetTree

BINARY_MODE = 0o755
ICON_MODE = 0o644


@dataclass(slots=True)
class ProcessedPackage:
    """Artifacts produced for one canonical name."""

    canonical_name: str
    staged_path: Path
    binary_path: Path
    link_path: Path | None = None
    entry_path: Path | None = None
    icon_path: Path | None = None


@dataclass(slots=True)
class ProcessReport:
    """Outcome of a registration batch."""

    processed: list[ProcessedPackage] = field(default_factory=list)
    skipped: list[tuple[Path, str]] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)
    warnings: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.processed)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def to_dict(self) -> dict[str, Any]:
        def _opt(path: Path | None) -> str | None:
            return str(path) if path is not None else None

        return {
            "processed": [
                {
                    "name": item.canonical_name,
                    "staged": str(item.staged_path),
                    "binary": str(item.binary_path),
                    "link": _opt(item.link_path),
                    "entry": _opt(item.entry_path),
                    "icon": _opt(item.icon_path),
                }
                for item in self.processed
            ],
            "skipped": [{"path": str(path), "reason": reason} for path, reason in self.skipped],
            "failed": [{"path": str(path), "reason": reason} for path, reason in self.failed],
            "warnings": [{"path": str(path), "reason": reason} for path, reason in self.warnings],
        }


class Processor:
    """Turns every staged package into a registered, launchable installation."""

    def __init__(
        self,
        staging_root: Path,
        tree: TargetTree,
        runtime: PackageRuntime,
        *,
        extension: str = ".AppImage",
        self_update: bool = True,
        dry_run: bool = False,
    ) -> None:
        self.staging_root = staging_root
        self.tree = tree
        self.runtime = runtime
        self.extension = extension
        self.self_update = self_update
        self.dry_run = dry_run
        self.writer = EntryWriter(tree.entries, tree.links)

    @classmethod
    def from_config(cls, config: AppConfig, *, dry_run: bool = False) -> "Processor":
        return cls(
            config.directories.staging,
            TargetTree.from_config(config.directories),
            AppImageRuntime.from_config(config.runtime),
            extension=config.scanner.extension,
            self_update=config.runtime.self_update,
            dry_run=dry_run,
        )

    def staged_packages(self) -> Iterator[Path]:
        """Staged files in directory listing order."""

        if not self.staging_root.is_dir():
            logger.warning("Staging directory does not exist: {}", self.staging_root)
            return
        with os.scandir(self.staging_root) as entries:
            for entry in entries:
                if entry.is_file(follow_symlinks=False) and stem_of(entry.name, self.extension):
                    yield Path(entry.path)

    def process_all(self) -> ProcessReport:
        logger.info("Processing staged packages in {}", self.staging_root)
        if not self.dry_run:
            self.tree.ensure_ready()

        report = ProcessReport()
        for staged in self.staged_packages():
            try:
                processed = self.process_one(staged, report)
            except TargetTreeError:
                raise
            except (AppimanError, OSError, subprocess.SubprocessError, ValueError) as exc:
                logger.error("Failed to process {}: {}", staged, exc)
                report.failed.append((staged, str(exc)))
                continue
            if processed is not None:
                logger.info("Registered {}", processed.canonical_name)
                report.processed.append(processed)

        if report.failed:
            logger.error(
                "Registration finished: {} processed, {} skipped, {} failed",
                report.success_count,
                len(report.skipped),
                report.failure_count,
            )
        else:
            logger.info(
                "Registration finished: {} processed, {} skipped",
                report.success_count,
                len(report.skipped),
            )
        return report

    def process_one(self, staged: Path, report: ProcessReport) -> ProcessedPackage | None:
        """Register one staged package; returns ``None`` when it was skipped."""

        stem = stem_of(staged.name, self.extension) or staged.stem
        canonical = canonicalize(stem)
        if not canonical:
            logger.info("Skipping {}: name has no canonical form", staged.name)
            report.skipped.append((staged, "empty canonical name"))
            return None

        binary_name = f"{canonical}{staged.name[len(stem):]}"
        binary_path = self.tree.binaries.path_for(binary_name)
        if self.dry_run:
            logger.info("[Dry Run] Would register {} as {}", staged.name, binary_path)
            return ProcessedPackage(canonical_name=canonical, staged_path=staged, binary_path=binary_path)

        link_path = self._install_binary(staged, binary_name, canonical)

        with scratch_directory() as scratch:
            content_root = self.runtime.extract(binary_path, scratch)
            descriptor = self._load_descriptor(content_root, staged, report).with_defaults(canonical)
            icon_path = self._install_icon(content_root, canonical, descriptor.icon)

        entry = MenuEntry(
            name=descriptor.name or canonical,
            exec_path=binary_path,
            icon_path=icon_path,
            categories=list(descriptor.categories),
            categories_terminated=descriptor.categories_terminated,
        )
        entry_path = self.writer.write_entry(canonical, entry)

        self._self_update(binary_path)
        return ProcessedPackage(
            canonical_name=canonical,
            staged_path=staged,
            binary_path=binary_path,
            link_path=link_path,
            entry_path=entry_path,
            icon_path=icon_path,
        )

    def _install_binary(self, staged: Path, binary_name: str, canonical: str) -> Path:
        binaries = self.tree.binaries
        try:
            if binaries.put_if_absent(binary_name, staged, mode=BINARY_MODE):
                logger.debug("Copied {} -> {}", staged, binaries.path_for(binary_name))
            else:
                logger.debug("Binary {} already registered; keeping existing copy", binary_name)
                binaries.chmod(binary_name, BINARY_MODE)
        except OSError as exc:
            raise EntryWriteError(f"cannot install binary {binary_name}: {exc}") from exc
        return self.writer.link(canonical, binaries.path_for(binary_name))

    def _load_descriptor(self, content_root: Path, staged: Path, report: ProcessReport) -> Descriptor:
        path = find_descriptor(content_root)
        if path is None:
            logger.debug("No descriptor in {}; using defaults", staged.name)
            return Descriptor()
        try:
            return read_descriptor(path)
        except DescriptorParseError as exc:
            logger.warning("Falling back to default metadata for {}: {}", staged.name, exc)
            report.warnings.append((staged, str(exc)))
            return Descriptor()

    def _install_icon(self, content_root: Path, canonical: str, icon_key: str | None) -> Path | None:
        source = resolve_icon(content_root, icon_key)
        if source is None:
            logger.debug("No icon found for {}", canonical)
            return None

        icon_name = f"{canonical}{source.suffix.lower()}"
        try:
            if not self.tree.icons.put_if_absent(icon_name, source, mode=ICON_MODE):
                logger.debug("Icon {} already present", icon_name)
        except OSError as exc:
            raise EntryWriteError(f"cannot install icon {icon_name}: {exc}") from exc
        return self.tree.icons.path_for(icon_name)

    def _self_update(self, binary_path: Path) -> None:
        if not self.self_update:
            return
        try:
            self.runtime.update(binary_path)
        except Exception as exc:  # noqa: BLE001 - self-update is best effort
            logger.debug("Self-update of {} did not succeed: {}", binary_path.name, exc)


def process_all(
    staged_root: Path,
    *,
    tree: TargetTree,
    runtime: PackageRuntime,
    extension: str = ".AppImage",
    self_update: bool = True,
) -> ProcessReport:
    """Register every package found directly under ``staged_root``."""

    processor = Processor(staged_root, tree, runtime, extension=extension, self_update=self_update)
    return processor.process_all()


__all__ = ["ProcessReport", "ProcessedPackage", "Processor", "process_all"]

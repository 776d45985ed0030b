"""Removal of stale registered artifacts."""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from appiman.core.naming import canonicalize, stem_of
from appiman.registrar.entry import ENTRY_SUFFIX
from appiman.registrar.icons import ICON_SUFFIXES
from appiman.registrar.store import ArtifactStore, TargetTree

# Entry file names that still carry platform or version tokens are legacy.
# Approximate by nature: a package genuinely called "linux-tools" matches too.
LEGACY_ENTRY_RE = re.compile(r"(x86_64|amd64|linux|v[0-9])")


@dataclass(slots=True)
class CleanupReport:
    """Names removed per artifact kind, plus deletions that failed."""

    binaries: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    entries: list[str] = field(default_factory=list)
    icons: list[str] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.binaries) + len(self.links) + len(self.entries) + len(self.icons)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "binaries": list(self.binaries),
            "links": list(self.links),
            "entries": list(self.entries),
            "icons": list(self.icons),
            "errors": [{"path": str(path), "reason": reason} for path, reason in self.errors],
        }


class CleanupEngine:
    """Deletes artifacts that no longer match the current naming rule.

    Binaries go first so that links, entries and icons pointing at them are
    caught in the same run; a second run then finds nothing to delete.
    """

    def __init__(self, tree: TargetTree, *, extension: str = ".AppImage", dry_run: bool = False) -> None:
        self.tree = tree
        self.extension = extension
        self.dry_run = dry_run

    def run(self) -> CleanupReport:
        report = CleanupReport()
        logger.info("Cleaning stale artifacts (dry_run={})", self.dry_run)

        self._clean_binaries(report)
        self._clean_links(report)
        self._clean_entries(report)
        self._clean_icons(report)

        if report.has_errors:
            logger.error("Cleanup finished with {} errors ({} removed)", len(report.errors), report.removed_count)
        else:
            logger.info("Cleanup complete: {} artifacts removed", report.removed_count)
        return report

    # ------------------------------------------------------------------
    # Individual passes
    # ------------------------------------------------------------------
    def _clean_binaries(self, report: CleanupReport) -> None:
        for name in self.tree.binaries.list():
            stem = stem_of(name, self.extension)
            if stem is None or canonicalize(stem) == stem:
                continue
            if self._delete(self.tree.binaries, name, "binary", report):
                report.binaries.append(name)

    def _clean_links(self, report: CleanupReport) -> None:
        links = self.tree.links
        for name in links.list():
            target = links.target(name)
            binary = self._binary_name(target)
            if binary is None or self._binary_exists(binary, report):
                continue
            if self.dry_run:
                logger.info("[Dry Run] Would remove dangling symlink {}", name)
                report.links.append(name)
                continue
            try:
                links.delete(name)
            except OSError as exc:
                logger.warning("Failed to remove symlink {}: {}", name, exc)
                report.errors.append((links.root / name, str(exc)))
                continue
            logger.info("Removed dangling symlink {} -> {}", name, target)
            report.links.append(name)

    def _clean_entries(self, report: CleanupReport) -> None:
        entries = self.tree.entries
        for name in entries.list():
            if not name.endswith(ENTRY_SUFFIX):
                continue
            try:
                content = entries.get(name)
            except OSError as exc:
                logger.warning("Failed to read menu entry {}: {}", name, exc)
                report.errors.append((entries.path_for(name), str(exc)))
                continue
            if content is None:
                continue
            binary = self._binary_name(_exec_path(content))
            if binary is None:
                continue
            if self._binary_exists(binary, report) and not LEGACY_ENTRY_RE.search(name):
                continue
            if self._delete(entries, name, "menu entry", report):
                report.entries.append(name)

    def _clean_icons(self, report: CleanupReport) -> None:
        for name in self.tree.icons.list():
            suffix = Path(name).suffix
            if suffix.lower() not in ICON_SUFFIXES:
                continue
            stem = name[: -len(suffix)]
            if canonicalize(stem) == stem:
                continue
            if self._delete(self.tree.icons, name, "icon", report):
                report.icons.append(name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _binary_name(self, target: Path | None) -> str | None:
        """Name of ``target`` inside the binaries directory, or ``None`` if it points elsewhere."""

        if target is None or target.parent != self.tree.binaries.root:
            return None
        return target.name

    def _binary_exists(self, name: str, report: CleanupReport) -> bool:
        # Binaries removed in this run (or marked for removal in a dry run) count as gone.
        return name not in report.binaries and self.tree.binaries.exists(name)

    def _delete(self, store: ArtifactStore, name: str, kind: str, report: CleanupReport) -> bool:
        if self.dry_run:
            logger.info("[Dry Run] Would remove {} {}", kind, name)
            return True
        try:
            store.delete(name)
        except OSError as exc:
            logger.warning("Failed to remove {} {}: {}", kind, name, exc)
            report.errors.append((store.path_for(name), str(exc)))
            return False
        logger.info("Removed {} {}", kind, name)
        return True


def _exec_path(content: bytes) -> Path | None:
    """Program path of the first ``Exec=`` line, without its arguments."""

    text = content.decode("utf-8", errors="replace")
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "Exec":
            try:
                tokens = shlex.split(value)
            except ValueError:
                # Unbalanced quotes.
                tokens = value.split()
            if not tokens:
                return None
            return Path(tokens[0])
    return None


def cleanup(tree: TargetTree, *, extension: str = ".AppImage", dry_run: bool = False) -> CleanupReport:
    """Remove stale artifacts from ``tree``."""

    return CleanupEngine(tree, extension=extension, dry_run=dry_run).run()


__all__ = ["CleanupEngine", "CleanupReport", "LEGACY_ENTRY_RE", "cleanup"]

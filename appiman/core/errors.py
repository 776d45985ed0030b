"""Exception hierarchy shared by the ingestion and registration pipeline."""

from __future__ import annotations

from pathlib import Path


class AppimanError(Exception):
    """Base class for all appiman failures."""


class DiscoveryError(AppimanError):
    """A directory or file could not be read during a scan."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class RelocationError(AppimanError):
    """A package could not be moved into the staging area."""


class ConflictResolutionError(RelocationError):
    """No free destination name was found."""


class ExtractionError(AppimanError):
    """The package's self-extraction failed or produced no content tree."""


class DescriptorParseError(AppimanError):
    """The embedded application descriptor could not be read."""


class EntryWriteError(AppimanError):
    """A target artifact (binary, icon, entry, symlink) could not be written."""


class TargetTreeError(AppimanError):
    """A target directory is missing or not writable; aborts the whole batch."""


__all__ = [
    "AppimanError",
    "DiscoveryError",
    "RelocationError",
    "ConflictResolutionError",
    "ExtractionError",
    "DescriptorParseError",
    "EntryWriteError",
    "TargetTreeError",
]

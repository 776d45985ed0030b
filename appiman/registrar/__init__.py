"""Registration of staged packages: binaries, icons, menu entries and symlinks."""

from .descriptor import Descriptor, find_descriptor, parse_descriptor, read_descriptor
from .entry import EntryWriter, MenuEntry
from .icons import resolve_icon
from .processor import ProcessedPackage, ProcessReport, Processor, process_all
from .runtime import AppImageRuntime, PackageRuntime, scratch_directory
from .store import ArtifactStore, DirectoryStore, LinkStore, SymlinkDirectory, TargetTree

__all__ = [
    "Descriptor",
    "find_descriptor",
    "parse_descriptor",
    "read_descriptor",
    "EntryWriter",
    "MenuEntry",
    "resolve_icon",
    "ProcessedPackage",
    "ProcessReport",
    "Processor",
    "process_all",
    "AppImageRuntime",
    "PackageRuntime",
    "scratch_directory",
    "ArtifactStore",
    "DirectoryStore",
    "LinkStore",
    "SymlinkDirectory",
    "TargetTree",
]

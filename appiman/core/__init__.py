"""Naming, conflict handling and error types shared across appiman."""

from .conflict import resolve_conflict
from .errors import (
    AppimanError,
    ConflictResolutionError,
    DescriptorParseError,
    DiscoveryError,
    EntryWriteError,
    ExtractionError,
    RelocationError,
    TargetTreeError,
)
from .naming import canonicalize, display_name, is_canonical, stem_of

__all__ = [
    "canonicalize",
    "display_name",
    "is_canonical",
    "stem_of",
    "resolve_conflict",
    "AppimanError",
    "ConflictResolutionError",
    "DescriptorParseError",
    "DiscoveryError",
    "EntryWriteError",
    "ExtractionError",
    "RelocationError",
    "TargetTreeError",
]

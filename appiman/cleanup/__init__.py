"""Cleanup of artifacts left behind by older naming rules."""

from .service import LEGACY_ENTRY_RE, CleanupEngine, CleanupReport, cleanup

__all__ = ["CleanupEngine", "CleanupReport", "LEGACY_ENTRY_RE", "cleanup"]

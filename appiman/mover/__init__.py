"""Discovery and relocation of user-downloaded packages."""

from .scanner import Scanner, scan
from .service import MovedFile, MoveReport, Mover, ingest, move

__all__ = ["Scanner", "scan", "Mover", "MoveReport", "MovedFile", "move", "ingest"]

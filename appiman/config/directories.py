"""Directory layout of the staging area and the target tree."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator

from appiman.config.base import BaseConfig


class DirectoriesConfig(BaseConfig):
    """Locations used by ingestion, registration and cleanup."""

    staging: Path = Field(
        Path("/opt/applications/raw"),
        description="Shared staging area receiving relocated packages",
    )
    binaries: Path = Field(
        Path("/opt/applications/bin"),
        description="Directory holding registered package executables",
    )
    icons: Path = Field(
        Path("/opt/applications/icons"),
        description="Directory holding extracted package icons",
    )
    entries: Path = Field(
        Path("/usr/share/applications"),
        description="Directory receiving generated menu entries",
    )
    symlinks: Path = Field(
        Path("/usr/local/bin"),
        description="Public directory for command-line symlinks",
    )
    home_roots: list[Path] = Field(
        default_factory=lambda: [Path("/home")],
        description="Roots scanned for user-downloaded packages",
    )

    @field_validator("home_roots")
    @classmethod
    def _require_home_roots(cls, value: list[Path]) -> list[Path]:
        if not value:
            raise ValueError("At least one home root must be configured.")
        return value


__all__ = ["DirectoriesConfig"]

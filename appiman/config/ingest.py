"""Configuration for package discovery and relocation."""

from __future__ import annotations

from pydantic import Field, field_validator

from appiman.config.base import BaseConfig


class ScannerConfig(BaseConfig):
    """Controls which files the home-directory scan picks up."""

    extension: str = Field(".AppImage", description="Package file extension (matched case-insensitively)")
    exclude: list[str] = Field(
        default_factory=lambda: [".cache", ".local/share"],
        description="Excluded prefixes; relative entries apply beneath every user home",
    )

    @field_validator("extension")
    @classmethod
    def _normalise_extension(cls, value: str) -> str:
        value = value.strip()
        if not value or value == ".":
            raise ValueError("Package extension must not be empty.")
        return value if value.startswith(".") else f".{value}"


class MoverConfig(BaseConfig):
    """Ownership and permissions applied to relocated packages."""

    owner_uid: int = Field(0, ge=0, description="Owner uid applied after relocation")
    owner_gid: int = Field(0, ge=0, description="Owner gid applied after relocation")
    mode: int = Field(0o755, ge=0, le=0o7777, description="Permission bits applied after relocation")


__all__ = ["ScannerConfig", "MoverConfig"]

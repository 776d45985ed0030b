"""Configuration for the package's own extract/update capabilities."""

from __future__ import annotations

from pydantic import Field

from appiman.config.base import BaseConfig


class RuntimeConfig(BaseConfig):
    """How self-extraction and self-update are invoked."""

    extract_timeout: float | None = Field(
        300.0,
        gt=0,
        description="Seconds before a self-extraction run is abandoned (none disables the limit)",
    )
    update_timeout: float | None = Field(
        600.0,
        gt=0,
        description="Seconds before a self-update run is abandoned (none disables the limit)",
    )
    self_update: bool = Field(True, description="Run the package's self-update after registration")


__all__ = ["RuntimeConfig"]

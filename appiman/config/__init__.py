"""Configuration namespace for appiman."""

from __future__ import annotations

from .app import AppConfig, apply_env_overrides, default_config_path, load_app_config
from .base import BaseConfig, load_config
from .directories import DirectoriesConfig
from .ingest import MoverConfig, ScannerConfig
from .log import LoggingConfig
from .runtime import RuntimeConfig

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "load_app_config",
    "apply_env_overrides",
    "default_config_path",
    "DirectoriesConfig",
    "ScannerConfig",
    "MoverConfig",
    "RuntimeConfig",
    "LoggingConfig",
]

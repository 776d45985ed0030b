"""Application-level configuration models."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from loguru import logger
from pydantic import Field

from appiman.config.base import BaseConfig, load_config
from appiman.config.directories import DirectoriesConfig
from appiman.config.ingest import MoverConfig, ScannerConfig
from appiman.config.log import LoggingConfig
from appiman.config.runtime import RuntimeConfig
from appiman.config.utils import env_path_list, env_value

DEFAULT_CONFIG_PATH = Path("/etc/appiman/config.toml")
CONFIG_ENV_VAR = "APPIMAN_CONFIG"

# Environment variable -> directories field
_DIRECTORY_OVERRIDES: dict[str, str] = {
    "APPIMAN_STAGING_DIR": "staging",
    "APPIMAN_BIN_DIR": "binaries",
    "APPIMAN_ICON_DIR": "icons",
    "APPIMAN_DESKTOP_DIR": "entries",
    "APPIMAN_SYMLINK_DIR": "symlinks",
}


class AppConfig(BaseConfig):
    """Top-level runtime configuration for appiman."""

    require_root: bool = Field(True, description="Refuse mutating commands unless running as root")
    directories: DirectoriesConfig = Field(default_factory=DirectoriesConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    mover: MoverConfig = Field(default_factory=MoverConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    configured = env_value(CONFIG_ENV_VAR, environ)
    return Path(configured) if configured else DEFAULT_CONFIG_PATH


def apply_env_overrides(config: AppConfig, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Apply ``APPIMAN_*`` overrides in place and return the config."""

    for var_name, field_name in _DIRECTORY_OVERRIDES.items():
        value = env_value(var_name, environ)
        if value is not None:
            logger.debug("Override directories.{} from {}", field_name, var_name)
            setattr(config.directories, field_name, Path(value))

    home_roots = env_path_list("APPIMAN_HOME_ROOT", environ)
    if home_roots is not None:
        config.directories.home_roots = home_roots

    level = env_value("APPIMAN_LOG_LEVEL", environ)
    if level is not None:
        config.logging.level = level
    return config


def load_app_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load the application config, falling back to defaults when the file is absent."""

    resolved = path or default_config_path(environ)
    if resolved.exists():
        config = load_config(AppConfig, resolved)
    else:
        logger.debug("Configuration file {} not found; using defaults", resolved)
        config = AppConfig()
    return apply_env_overrides(config, environ)


__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "apply_env_overrides",
    "default_config_path",
    "load_app_config",
]

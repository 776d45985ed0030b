from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from appiman.config import AppConfig, BaseConfig, load_app_config, load_config


class ExampleConfig(BaseConfig):
    data_root: Path
    feature_enabled: bool


def test_load_config_success(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text(
        """
        data_root = "./cache"
        feature_enabled = true
        """.strip(),
        encoding="utf-8",
    )

    cfg = load_config(ExampleConfig, sample)

    assert cfg.data_root == Path("./cache")
    assert cfg.feature_enabled is True


def test_load_config_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "missing.toml"
    with pytest.raises(FileNotFoundError):
        load_config(ExampleConfig, missing)


def test_load_config_invalid_toml(tmp_path: Path) -> None:
    broken = tmp_path / "broken.toml"
    broken.write_text("data_root = ", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(ExampleConfig, broken)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text("[directories]\nstaging = \"/srv/raw\"\nbogus = 1\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_config(AppConfig, sample)


def test_app_config_example_file() -> None:
    config_path = Path(__file__).resolve().parents[2] / "config" / "example.toml"
    cfg = load_config(AppConfig, config_path)

    assert cfg.require_root is True
    assert cfg.directories.staging == Path("/opt/applications/raw")
    assert cfg.directories.binaries == Path("/opt/applications/bin")
    assert cfg.directories.entries == Path("/usr/share/applications")
    assert cfg.directories.home_roots == [Path("/home")]
    assert cfg.scanner.extension == ".AppImage"
    assert cfg.scanner.exclude == [".cache", ".local/share"]
    assert cfg.mover.mode == 0o755
    assert cfg.runtime.self_update is True
    assert cfg.logging.level == "INFO"
    assert cfg.logging.file is None


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    cfg = load_app_config(tmp_path / "absent.toml", environ={})

    assert cfg == AppConfig()


def test_environment_overrides(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text("[directories]\nbinaries = \"/srv/bin\"\n", encoding="utf-8")
    environ = {
        "APPIMAN_BIN_DIR": "/data/bin",
        "APPIMAN_SYMLINK_DIR": "/data/links",
        "APPIMAN_HOME_ROOT": "/home:/srv/users",
        "APPIMAN_LOG_LEVEL": "debug",
        "APPIMAN_ICON_DIR": "  ",
    }

    cfg = load_app_config(sample, environ=environ)

    assert cfg.directories.binaries == Path("/data/bin")
    assert cfg.directories.symlinks == Path("/data/links")
    assert cfg.directories.icons == Path("/opt/applications/icons")
    assert cfg.directories.home_roots == [Path("/home"), Path("/srv/users")]
    assert cfg.logging.level == "DEBUG"


def test_config_path_from_environment(tmp_path: Path) -> None:
    sample = tmp_path / "custom.toml"
    sample.write_text("require_root = false\n", encoding="utf-8")

    cfg = load_app_config(environ={"APPIMAN_CONFIG": str(sample)})

    assert cfg.require_root is False


def test_empty_home_roots_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"directories": {"home_roots": []}})


def test_extension_is_normalised() -> None:
    cfg = AppConfig.model_validate({"scanner": {"extension": "AppImage"}})

    assert cfg.scanner.extension == ".AppImage"

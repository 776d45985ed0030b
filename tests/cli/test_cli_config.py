import json

from appiman.cli import main

from tests.cli.utils import logger_to_stderr, write_config


def test_config_check_json_success(capsys, tmp_path):
    config_file = write_config(tmp_path)

    with logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 0

    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert payload["status"] == "ok"
    assert payload["config_path"].endswith("config.toml")


def test_config_check_missing_file(capsys, tmp_path):
    missing_path = tmp_path / "absent.toml"

    with logger_to_stderr():
        exit_code = main(["--config", str(missing_path), "config", "check"])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert "missing_file" in captured.err


def test_config_check_validation_error(capsys, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text("[directories]\nhome_roots = []\n", encoding="utf-8")

    with logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 3
    payload = json.loads(capsys.readouterr().out)
    assert payload["error"]["type"] == "validation_error"
    assert payload["error"]["details"][0]["loc"] == "directories.home_roots"


def test_config_check_warns_about_shared_directories(capsys, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        '[directories]\nbinaries = "/opt/shared"\nicons = "/opt/shared"\n',
        encoding="utf-8",
    )

    with logger_to_stderr():
        exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert "Staging and target directories must be distinct" in payload["warnings"]


def test_config_explain_lists_nested_fields(capsys):
    with logger_to_stderr():
        exit_code = main(["config", "explain", "--format", "json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    names = {field["name"] for field in payload["fields"]}
    assert {"require_root", "directories.staging", "scanner.extension", "logging.level"} <= names

import configparser
import logging
from pathlib import Path

import pytest

from fsutils.config import CONFIG_ENV_VAR, Config
from fsutils.file_tools import FileTools
from fsutils.logging import get_app_logger, get_logger


def test_repository_config_is_loaded():
    config = Config()

    assert config.get("log", "app") == "fsutils"
    assert config.text_encoding() is None
    assert Config() is config


def test_missing_options_use_fallbacks():
    config = Config()

    assert config.get("nope", "nothing", fallback="x") == "x"
    assert config.get("log", "missing", fallback="3") == "3"
    assert config.get("nope", "nothing") is None


def test_config_file_from_environment(tmp_path: Path, monkeypatch):
    ini = tmp_path / "custom.ini"
    ini.write_text("[log]\napp = custom-fs\ndir = custom-log\n\n[fsutils]\nencoding = latin-1\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(ini))
    Config.reset()

    config = Config()

    assert config.source_path == ini
    assert config.get("log", "app") == "custom-fs"
    assert config.get("log", "dir") == "custom-log"
    assert config.text_encoding() == "latin-1"


def test_missing_config_file_falls_back_to_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.ini"))
    Config.reset()

    assert Config().text_encoding() is None
    assert get_app_logger().name == "fsutils"


def test_malformed_config_file_raises(tmp_path: Path, monkeypatch):
    ini = tmp_path / "broken.ini"
    ini.write_text("no section header here\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(ini))
    Config.reset()

    with pytest.raises(configparser.MissingSectionHeaderError):
        Config()


def test_configured_encoding_is_used_for_lines(tmp_path: Path, monkeypatch):
    ini = tmp_path / "latin.ini"
    ini.write_text("[fsutils]\nencoding = latin-1\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(ini))
    Config.reset()
    f = tmp_path / "names.txt"
    f.write_bytes("z\xfcrich\n".encode("latin-1"))

    assert FileTools.ensure_file_has_line(f, "z\xfcrich") is False
    FileTools.ensure_file_has_line(f, "m\xfcnchen")

    assert f.read_bytes() == "z\xfcrich\nm\xfcnchen\n".encode("latin-1")


def test_app_logger_level_from_config(tmp_path: Path, monkeypatch):
    ini = tmp_path / "debug.ini"
    ini.write_text("[log]\napp = fsutils-debug-test\nlevel = debug\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(ini))
    Config.reset()

    logger = get_app_logger()

    assert logger.name == "fsutils-debug-test"
    assert logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_info(tmp_path: Path, monkeypatch):
    ini = tmp_path / "odd.ini"
    ini.write_text("[log]\napp = fsutils-odd-test\nlevel = chatty\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(ini))
    Config.reset()

    assert get_app_logger().level == logging.INFO


def test_dev_environment_logs_to_rotating_file(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "dev")

    logger = get_logger("fsutils-file-test", log_dir=tmp_path / "log")
    logger.info("written to disk")
    for handler in logger.handlers:
        handler.flush()

    log_file = tmp_path / "log" / "fsutils-file-test.log"
    assert "written to disk" in log_file.read_text(encoding="utf-8")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

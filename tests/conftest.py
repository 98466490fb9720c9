# Test runs log to stdout instead of creating log/ files in the working directory.

import os

import pytest

os.environ["APP_ENV"] = "test"

from fsutils.config import CONFIG_ENV_VAR, Config


@pytest.fixture(autouse=True)
def _default_config(monkeypatch):
    # Each test starts from the repository config.ini, whatever a previous test loaded.
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    Config.reset()
    yield
    Config.reset()

# fsutils/config.py

import configparser
import os
import threading

from pathlib import Path

from fsutils.logging import get_stdout_logger

CONFIG_ENV_VAR = "FSUTILS_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / 'config.ini'

class Config:
    _instance = None
    _lock = threading.Lock()
    _bootstrap_logger = get_stdout_logger("fsutils-config-bootstrap")

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super(Config, cls).__new__(cls)
                    instance._load_config()
                    cls._instance = instance
        return cls._instance

    @classmethod
    def reset(cls):
        """Forget the loaded configuration; the next Config() reads the file again."""
        with cls._lock:
            cls._instance = None

    @staticmethod
    def config_file_path() -> Path:
        override = os.environ.get(CONFIG_ENV_VAR)
        return Path(override) if override else DEFAULT_CONFIG_PATH

    def _load_config(self):
        self.config = configparser.ConfigParser()
        self.source_path = self.config_file_path()

        if not self.source_path.exists():
            # The helpers are usable without a config file; every key has a fallback.
            self._bootstrap_logger.warning(f"{self.__class__.__name__} {self.source_path} not found, using defaults.")
            return

        try:
            with open(self.source_path, "r", encoding="utf-8") as f:
                self.config.read_file(f)
        except (OSError, configparser.Error) as e:
            self._bootstrap_logger.error(f"{self.__class__.__name__} Error reading config {self.source_path}: {e}")
            raise

    def get(self, section, option, fallback=None):
        try:
            return self.config.get(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def text_encoding(self):
        """Encoding for text helpers; None selects the platform default."""
        return self.get("fsutils", "encoding", fallback="") or None

# fsutils/logging.py

import logging
import os
import sys

from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

def get_stdout_logger(name="fsutils-stdout", level=logging.INFO):
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger

def get_logger(log_name: str, level=logging.INFO,
               log_dir="log", max_bytes=5 * 1024 * 1024, backup_count=5) -> logging.Logger:
    """
    Create a logger for the file helpers.

    In the dev environment (``APP_ENV`` unset or ``dev``) records go to
    ``{log_dir}/{log_name}.log`` with rotation, anywhere else to stdout.

    :param log_name: Logical name of the logger (also used for file name).
    :param level: Logging level.
    :param log_dir: Directory to store logs.
    :param max_bytes: Maximum size before rotating.
    :param backup_count: Number of backup files to keep.
    """
    logger = logging.getLogger(log_name)
    logger.setLevel(level)

    if not logger.handlers:
        env = os.environ.get("APP_ENV", "dev")

        if env == "dev":
            log_path = Path(log_dir) / f"{log_name}.log"
            log_path.parent.mkdir(parents=True, exist_ok=True)

            handler = RotatingFileHandler(
                log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        else:
            handler = logging.StreamHandler(sys.stdout)

        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger

def get_app_logger() -> logging.Logger:
    """Logger named and placed according to the ``[log]`` section of config.ini."""
    from fsutils.config import Config  # config bootstraps on this module

    config = Config()
    level_name = config.get("log", "level", fallback="INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        get_stdout_logger().warning(f"get_app_logger() Unknown log level {level_name!r}, using INFO")
        level = logging.INFO

    return get_logger(config.get("log", "app", fallback="fsutils"),
                      level=level,
                      log_dir=config.get("log", "dir", fallback="log"))

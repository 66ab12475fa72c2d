from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import LoggingConfig

LOGGER_NAME = "horizonlist"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logging(config: LoggingConfig) -> logging.Logger:
    log_dir = Path(config.directory)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, config.level, logging.INFO))
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    file_handler = RotatingFileHandler(
        log_dir / config.text_filename,
        maxBytes=config.rotate_bytes,
        backupCount=config.backups,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "timber_beam"


def setup_logging(
    log_dir: str = "logs",
    log_name: str = "timber_beam.log",
    level: int = logging.INFO,
) -> logging.Logger:
    """
    File (rotating) + console handlers on the package logger.

    Modules log through logging.getLogger(__name__), so everything under
    timber_beam.* ends up here. Calling it twice does not duplicate handlers.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, log_name)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    fh = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(fmt)

    logger.addHandler(fh)
    logger.addHandler(sh)

    logger.info("Logging initialised. File: %s", log_path)
    return logger

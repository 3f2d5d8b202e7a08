# memopad/utils/logging.py

import logging
import os
from pathlib import Path

from memopad.config.settings import DEFAULT_LOG_DIR

LOG_DIR = Path(os.getenv("MEMOPAD_LOG_DIR", "").strip() or DEFAULT_LOG_DIR)
LOG_FILE = LOG_DIR / "memopad.log"


def get_logger(name: str = "memopad") -> logging.Logger:
    """
    Return a logger that logs both to file and console.
    Avoids adding duplicate handlers on repeated imports.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # avoid duplicate handlers

    logger.setLevel(logging.INFO)

    fmt = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # File handler
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(LOG_FILE, encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    # Console handler (warnings and up, so the CLI output stays readable)
    ch = logging.StreamHandler()
    ch.setLevel(logging.WARNING)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    return logger

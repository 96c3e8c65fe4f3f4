import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional
from deskclock.utils import BASE_DIR

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 1_000_000
LOG_BACKUPS = 3


def log_dir() -> str:
    """DESKCLOCK_LOG_DIR if set, else `<package>/logs`. Created on demand."""
    path = os.environ.get("DESKCLOCK_LOG_DIR") or os.path.join(BASE_DIR, "logs")
    os.makedirs(path, exist_ok=True)
    return path

def console_level() -> int:
    name = os.environ.get("DESKCLOCK_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO

def setup_logger(
    name: str,
    log_file: str = "deskclock.log",
    level: int = logging.DEBUG,
    console: bool = True,
    handler_level: Optional[int] = None,
) -> logging.Logger:
    """
    Configure and return a module-level logger.

    Everything at `level` goes to a size-rotated file in `log_dir()`; the
    console handler only shows DESKCLOCK_LOG_LEVEL and above, since the
    heartbeats run for as long as the clock is up.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir(), log_file),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
        )
        file_handler.setLevel(handler_level or level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(handler_level or console_level())
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    return logger

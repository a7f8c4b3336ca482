"""Logging setup for motion engine entry points.

Usage:
    from motion_engine.utils.logging_config import setup_logging
    setup_logging("DEBUG", log_file="engine.log")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Union


DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ENGINE_LOGGER = "motion_engine"

MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3


def resolve_level(level: Union[int, str]) -> int:
    """Accept ``logging.DEBUG`` or ``"debug"``; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    engine_level: Union[int, str, None] = None,
) -> None:
    """Configure the root logger once per process.

    *engine_level* sets the ``motion_engine`` logger separately, so per-tick
    DEBUG output can be enabled without turning on DEBUG for every library.
    With *log_file*, records also go to a RotatingFileHandler.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    logging.basicConfig(level=resolve_level(level), format=fmt, handlers=handlers)
    if engine_level is not None:
        logging.getLogger(ENGINE_LOGGER).setLevel(resolve_level(engine_level))

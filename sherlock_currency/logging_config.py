from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .infra.settings import SettingsLoader
from .rate_service.config import load_service_config


def configure_logging() -> None:
    """Configure project-wide logging with a rotating file.

    Uses the service config for file path, level and console echo, and
    SettingsLoader for rotation settings. Console output goes to stderr only
    when enabled: the launcher shows everything printed on stdout. Idempotent:
    subsequent calls won't duplicate handlers.
    """
    cfg = load_service_config()
    settings = SettingsLoader()
    level = getattr(logging, cfg.LOG_LEVEL, logging.INFO)

    logger = logging.getLogger("sherlock_currency")
    # Only our own handlers count; test harnesses may attach theirs
    if any(isinstance(h, (RotatingFileHandler, logging.NullHandler)) for h in logger.handlers):
        logger.setLevel(level)
        return

    logger.setLevel(level)
    fmt = logging.Formatter(
        fmt="%(levelname)s %(asctime)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    log_file = Path(cfg.LOG_FILE_PATH)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            log_file,
            maxBytes=int(settings.get("log_rotation_bytes", 1_048_576)),
            backupCount=int(settings.get("log_backup_count", 5)),
            encoding="utf-8",
        )
    except OSError:
        # Read-only home: a conversion must still work without a log file
        handler = logging.NullHandler()
    handler.setFormatter(fmt)
    logger.addHandler(handler)

    if cfg.LOG_CONSOLE:
        stream = logging.StreamHandler()
        stream.setLevel(level)
        stream.setFormatter(fmt)
        logger.addHandler(stream)
    # Keep records away from the root logger's stderr handler
    logger.propagate = False

# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Production logging configuration with file rotation."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from forgetmeknots.app.config import APP_NAME, log_directory


def console_level_from_env(default: int = logging.INFO) -> int:
    """Read ``FMK_LOG_LEVEL`` (name or number); unknown values keep ``default``."""

    raw = os.environ.get("FMK_LOG_LEVEL", "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def setup_production_logging(
    app_name: str = APP_NAME, console_level: int | None = None
) -> Path:
    """
    Configure logging with rotating files and a console handler.

    Creates two log files:
    - forgetmeknots.log: DEBUG+ messages from the package (10 MB per file, 5 rotations)
    - errors.log: ERROR+ messages from everything (5 MB per file, 3 rotations)

    Args:
        app_name: Application name for the log directory
        console_level: Minimum level for console output (default: ``FMK_LOG_LEVEL`` or INFO)

    Returns:
        Path to the log directory
    """
    if console_level is None:
        console_level = console_level_from_env()

    log_dir = log_directory(app_name)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    simple_formatter = logging.Formatter("%(levelname)-8s | %(name)s | %(message)s")

    app_logger = logging.getLogger("forgetmeknots")
    app_logger.setLevel(logging.DEBUG)
    app_logger.handlers.clear()

    app_log_path = log_dir / "forgetmeknots.log"
    app_handler = RotatingFileHandler(
        app_log_path,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    app_handler.setLevel(logging.DEBUG)
    app_handler.setFormatter(detailed_formatter)
    app_logger.addHandler(app_handler)

    error_log_path = log_dir / "errors.log"
    error_handler = RotatingFileHandler(
        error_log_path,
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)
    app_logger.addHandler(console_handler)

    log = logging.getLogger(__name__)
    log.info("=" * 70)
    log.info(f"{app_name} logging initialized")
    log.info(f"Log directory: {log_dir}")
    log.info(f"Platform: {sys.platform}, Python: {sys.version.split()[0]}")
    log.info("=" * 70)

    return log_dir

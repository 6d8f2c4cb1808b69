"""Centralized logging configuration for the exporter.

Console output by default, with an optional rotating log file.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default configuration
DEFAULT_LOG_FILE = "pipeline-exporter.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "pipeline_exporter"


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Set up logging for the exporter.

    Args:
        log_dir: Directory for log files. No file is written when unset.
                 Can be overridden with PIPELINE_EXPORTER_LOG_DIR environment variable.
        log_file: Log file name. Defaults to 'pipeline-exporter.log'.
        max_bytes: Maximum size per log file before rotation. Defaults to 10MB.
        backup_count: Number of backup files to keep. Defaults to 5.
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO.
               Can be overridden with PIPELINE_EXPORTER_LOG_LEVEL environment variable.
        console: Whether to log to console. Defaults to True.

    Returns:
        The root pipeline_exporter logger.
    """
    if log_dir is None:
        log_dir = os.environ.get("PIPELINE_EXPORTER_LOG_DIR")

    if level is None:
        level = os.environ.get("PIPELINE_EXPORTER_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path: Path | None = None
    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / log_file
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.info("Logging initialized (level=%s, file=%s)", level, log_path or "-")

    return logger


def sanitize_for_log(text: str) -> str:
    """Remove sensitive data from log output.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Sanitized text safe for logging.
    """
    patterns = [
        (r"glpat-[a-zA-Z0-9_\-]{20,}", "[GITLAB_TOKEN]"),  # GitLab PAT
        (r"PRIVATE-TOKEN[\"']?\s*[:=]\s*[\"']?[a-zA-Z0-9._\-]+", "PRIVATE-TOKEN: [REDACTED]"),
        (r"Bearer [a-zA-Z0-9._-]+", "Bearer [REDACTED]"),
        (r"private_token=[a-zA-Z0-9._-]+", "private_token=[REDACTED]"),
    ]

    result = text
    for pat, replacement in patterns:
        result = re.sub(pat, replacement, result)

    return result

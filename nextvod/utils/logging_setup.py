"""Logging setup for NextVOD with console and optional rotating file output"""

import logging
import logging.handlers
import sys
from pathlib import Path

_SIZE_UNITS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}


def parse_size(size: str, default: int = 10 * 1024 * 1024) -> int:
    """
    Parse a size string such as "10MB" to bytes.

    Plain integers are taken as bytes; anything unparseable returns ``default``.
    """
    value = size.strip().upper()
    for suffix, factor in _SIZE_UNITS.items():
        if value.endswith(suffix):
            try:
                return int(float(value[: -len(suffix)]) * factor)
            except ValueError:
                return default
    try:
        return int(value)
    except ValueError:
        return default


def setup_logging(
    log_level: str = "INFO",
    log_file_name: str | None = None,
    log_to_console: bool = True,
    log_to_file: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    log_format: str | None = None,
) -> logging.Logger:
    """
    Set up logging for the NextVOD service.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file_name: Path to log file (absolute or relative)
        log_to_console: Whether to log to stdout
        log_to_file: Whether to log to a rotating file
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep
        log_format: Custom log format string

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    log_file_path = None
    if log_to_file:
        log_file_path = Path(log_file_name or "logs/nextvod.log")
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"NextVOD logging initialized - Level: {log_level}")
    if log_file_path is not None:
        root_logger.info(f"Log file: {log_file_path} (max {max_bytes} bytes, {backup_count} backups)")

    return root_logger

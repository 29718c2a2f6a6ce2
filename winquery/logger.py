"""
logger.py - Centralized logging configuration for the winquery package.

Every module obtains its logger through `get_logger(__name__)` instead of
configuring logging on its own. The application entry point (`winquery.main`)
calls `setup_logging()` with values from `config.json`.
"""

import logging
import sys
from pathlib import Path

# --- Global Configuration State ---
_LOGGING_CONFIGURED: bool = False
_DEFAULT_LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DEFAULT_LOG_LEVEL: int = logging.INFO


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    numeric_level = logging.getLevelName(level.upper())
    if isinstance(numeric_level, int):
        return numeric_level
    print(f"Warning: Invalid log level string '{level}'. Defaulting to INFO.", file=sys.stderr)
    return logging.INFO


def setup_logging(
    level: int | str = _DEFAULT_LOG_LEVEL,
    log_file: Path | str | None = None,
    format_string: str | None = None,
    force: bool = False
) -> None:
    """
    Configures logging for the whole winquery application.

    Call once at startup. Later calls are ignored unless `force=True`.

    Args:
        level: Logging level (e.g., logging.INFO, or "INFO", "DEBUG").
        log_file: If provided, logs are also appended to this file.
                  The parent directory is created when missing.
        format_string: Custom log format string. Defaults to a standard format.
        force: If True, reconfigure logging even if already configured.
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED and not force:
        return

    actual_level = _resolve_level(level)
    log_format_to_use = format_string if format_string is not None else _DEFAULT_LOG_FORMAT

    root_logger = logging.getLogger()

    # Drop existing handlers so a forced re-configuration does not duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(log_format_to_use))
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode='a')
            file_handler.setFormatter(logging.Formatter(log_format_to_use))
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"Warning: Failed to set up file logging for '{log_file}': {e}", file=sys.stderr)

    root_logger.setLevel(actual_level)

    # Quiet the backends and the server stack below our own level
    for noisy in ("pywinctl", "pygetwindow", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(max(actual_level, logging.WARNING))

    _LOGGING_CONFIGURED = True
    root_logger.debug(f"Logging configured. Level: {logging.getLevelName(actual_level)}. Format: '{log_format_to_use}'")
    if log_file:
        root_logger.info(f"Logging to file: {Path(log_file).resolve()}")


def get_logger(name: str) -> logging.Logger:
    """
    Retrieves a logger instance for the given module name.

    If `setup_logging` has not run yet, a default setup is applied first so
    that library users get output without any explicit configuration.

    Args:
        name: Logger name, typically `__name__` of the calling module.

    Returns:
        A configured `logging.Logger` instance.

    Example:
        >>> from winquery.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Snapshot refreshed.")
    """
    if not _LOGGING_CONFIGURED:
        setup_logging()

    return logging.getLogger(name)


def log_debug(logger: logging.Logger, msg: str, *args, **kwargs) -> None:
    """Logs a debug message only when DEBUG is enabled for `logger`."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(msg, *args, **kwargs)

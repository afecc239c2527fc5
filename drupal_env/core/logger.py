"""Logging for drupal-env: rich console output plus an optional log file.

Module loggers are children of the "drupal_env" package logger and carry no
level of their own, so --verbose only has to lower the package logger.
"""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()

PACKAGE_LOGGER = "drupal_env"

LOG_DIR = Path.home() / ".drupal-env"
LOG_FILE = LOG_DIR / "drupal-env.log"
FALLBACK_LOG_FILE = Path("/tmp/drupal-env.log")

_file_handler: Optional[logging.FileHandler] = None


def _package_logger() -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.level == logging.NOTSET:
        package_logger.setLevel(logging.INFO)
    return package_logger


def set_log_level(verbose: bool) -> None:
    """Switch every drupal-env logger between INFO and DEBUG."""
    _package_logger().setLevel(logging.DEBUG if verbose else logging.INFO)


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Copy drupal-env log records to a file.

    Args:
        log_file: Path to log file (defaults to ~/.drupal-env/drupal-env.log)
        verbose: Also write debug records, and show them on the console

    Returns:
        The file records are written to. Falls back to /tmp/drupal-env.log
        when the log directory cannot be created.
    """
    global _file_handler

    set_log_level(verbose)
    package_logger = _package_logger()
    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    target_log_file = Path(log_file) if log_file else LOG_FILE
    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = FALLBACK_LOG_FILE

    _file_handler = logging.FileHandler(target_log_file)
    _file_handler.setLevel(logging.DEBUG)
    _file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    package_logger.addHandler(_file_handler)

    package_logger.info(f"drupal-env logging initialized: {target_log_file}")
    return target_log_file


def close_file_logging() -> None:
    """Detach and close the log file handler, if one is attached."""
    global _file_handler

    if _file_handler is None:
        return
    _package_logger().removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None


def get_logger(name: str) -> logging.Logger:
    """Get a module logger that prints through the shared rich console.

    The level is inherited from the package logger; call set_log_level()
    or setup_file_logging() to change it.
    """
    _package_logger()
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger

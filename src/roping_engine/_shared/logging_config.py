# Area: Shared
"""
roping_engine._shared.logging_config — Structured logging setup
===============================================================

Configures dual logging: terminal (colored) + file (JSON).
Provides structured error reporting for failed operations.
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from .logging_formatters import JSONFormatter, TerminalFormatter

if TYPE_CHECKING:
    from ..errors import RopingError

# Package logger
logger = logging.getLogger("roping_engine")


def setup_logging(
    log_file_path: str = "roping_engine.log",
    level: int = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str
        Path to the log file. Defaults to 'roping_engine.log' in current dir.
    level : int
        Logging level. Defaults to INFO.
    """
    pkg_logger = logging.getLogger("roping_engine")
    pkg_logger.setLevel(level)

    # Remove existing handlers
    pkg_logger.handlers.clear()

    # Terminal handler with colors
    terminal_handler = logging.StreamHandler(sys.stderr)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    # File handler with JSON
    try:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        pkg_logger.addHandler(file_handler)
    except OSError as e:
        pkg_logger.warning(f"Could not create log file: {e}")

    # Prevent propagation to root logger
    pkg_logger.propagate = False


def log_operation_error(error: "RopingError") -> None:
    """
    Report a failed operation in the structured format.

    Parameters
    ----------
    error : RopingError
        The error to report.
    """
    # Print to terminal (bypassing logger for exact formatting)
    print(error.format_error_log(), file=sys.stderr)

    # Also log to file via logger
    logger.error(
        f"Operation failed: {error.__class__.__name__}: {error.message}",
        extra={"error_type": error.error_type},
    )

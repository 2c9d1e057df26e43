# Area: Shared
"""
Shared utilities used by the store, the engine and the CLI.

This package contains:
- Logging configuration and formatters
- Structured error reporting
"""

from .logging_config import (
    setup_logging,
    log_operation_error,
)

__all__ = ["setup_logging", "log_operation_error"]

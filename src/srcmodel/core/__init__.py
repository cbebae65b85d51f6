"""Core module exports."""

from srcmodel.core.errors import (
    ConfigError,
    ErrorCode,
    IndexingError,
    SrcModelError,
)
from srcmodel.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from srcmodel.core.progress import spinner, status, task

__all__ = [
    # Errors
    "SrcModelError",
    "ConfigError",
    "ErrorCode",
    "IndexingError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "spinner",
    "status",
    "task",
]

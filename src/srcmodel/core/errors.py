"""srcmodel error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index

Per-file indexing problems are never raised; they are degraded to
diagnostics by the walker and the aggregator. Only run-level failures
(bad root, cancellation, misuse of a finished aggregator) surface here.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Index (3xxx)
    INDEX_ROOT_NOT_FOUND = 3001
    INDEX_ROOT_NOT_DIRECTORY = 3002
    INDEX_CANCELLED = 3003
    INDEX_AGGREGATOR_CLOSED = 3004
    INDEX_UNSUPPORTED_FILE = 3005
    INDEX_ROOT_UNREADABLE = 3006


@dataclass(eq=False)
class SrcModelError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SrcModelError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class IndexingError(SrcModelError):
    """Run-level indexing failures."""

    @classmethod
    def root_not_found(cls, path: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ROOT_NOT_FOUND,
            message=f"Root directory does not exist: {path}",
            details={"path": path},
        )

    @classmethod
    def root_not_directory(cls, path: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ROOT_NOT_DIRECTORY,
            message=f"Root is not a directory: {path}",
            details={"path": path},
        )

    @classmethod
    def cancelled(cls, files_done: int) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_CANCELLED,
            message=f"Indexing cancelled after {files_done} file(s)",
            retryable=True,
            details={"files_done": files_done},
        )

    @classmethod
    def aggregator_closed(cls) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_AGGREGATOR_CLOSED,
            message="Aggregator already finished; the model is read-only",
        )

    @classmethod
    def unsupported_file(cls, path: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_UNSUPPORTED_FILE,
            message=f"No syntax extractor for file: {path}",
            details={"path": path},
        )

    @classmethod
    def root_unreadable(cls, path: str, reason: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ROOT_UNREADABLE,
            message=f"Root directory cannot be read: {path} ({reason})",
            details={"path": path, "reason": reason},
        )

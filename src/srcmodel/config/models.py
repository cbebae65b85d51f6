"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SRCMODEL__SECTION__KEY)
3. Repo YAML (<root>/.srcmodel/config.yaml)
4. Global YAML (~/.config/srcmodel/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SRCMODEL__<SECTION>__<KEY>=<VALUE>

Examples:
    SRCMODEL__LOGGING__LEVEL=DEBUG
    SRCMODEL__INDEXER__MAX_WORKERS=4
    SRCMODEL__INDEXER__ATTACH_MODE=single_pass
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
AttachMode = Literal["two_pass", "single_pass"]
DuplicatePolicyName = Literal["first_wins", "merge_fields"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SRCMODEL__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs one event per file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Source enumeration configuration.

    Env vars:
        SRCMODEL__INDEX__MAX_FILE_SIZE_MB: Skip files larger than this
        SRCMODEL__INDEX__INCLUDE_TEST_FILES: Index *_test.go files
        SRCMODEL__INDEX__STRICT_SYNTAX: Reject files with parse errors
    """

    extensions: list[str] = Field(
        default_factory=lambda: [".go"],
        description="File extensions treated as source files.",
    )
    max_file_size_mb: int = Field(
        default=5,
        description="Skip files larger than this (MB). Generated code can be huge.",
    )
    include_test_files: bool = Field(
        default=True,
        description="Index *_test.go files. Test packages (foo_test) become separate packages.",
    )
    excluded_dirs: list[str] = Field(
        default_factory=list,
        description="Extra directory names to prune during enumeration.",
    )
    included_dirs: list[str] = Field(
        default_factory=list,
        description="Directory names pruned by default that should be traversed (e.g. vendor).",
    )
    strict_syntax: bool = Field(
        default=False,
        description="Treat files whose parse tree contains errors as extraction failures. "
        "Off by default: malformed files are indexed best-effort.",
    )

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            raise ValueError("At least one source extension is required")
        return normalized

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class IndexerConfig(BaseModel):
    """Aggregation configuration.

    Env vars:
        SRCMODEL__INDEXER__MAX_WORKERS: Parallel extraction workers
        SRCMODEL__INDEXER__ATTACH_MODE: two_pass or single_pass
        SRCMODEL__INDEXER__DUPLICATE_POLICY: first_wins or merge_fields
        SRCMODEL__INDEXER__DETECT_RELATIONS: Populate relations/implements
    """

    max_workers: int = Field(
        default=1,
        description="Parallel extraction workers. Merging is always serialized.",
    )
    attach_mode: AttachMode = Field(
        default="two_pass",
        description="two_pass attaches methods after every type is registered. "
        "single_pass reproduces order-dependent attachment: methods merged before "
        "their receiver type are dropped.",
    )
    duplicate_policy: DuplicatePolicyName = Field(
        default="first_wins",
        description="How a second declaration of an already registered type is handled.",
    )
    detect_relations: bool = Field(
        default=True,
        description="Run the relation detector (contains/embeds/implements/depends_on) "
        "after aggregation.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class SrcModelConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)

"""Source file discovery and extraction."""

from srcmodel.index._internal.discovery.walker import (
    ExtractionResult,
    FileWalker,
    WalkStats,
)

__all__ = ["ExtractionResult", "FileWalker", "WalkStats"]

"""Config module exports."""

from srcmodel.config.loader import load_config
from srcmodel.config.models import (
    IndexConfig,
    IndexerConfig,
    LoggingConfig,
    SrcModelConfig,
)

__all__ = [
    "load_config",
    "SrcModelConfig",
    "IndexConfig",
    "IndexerConfig",
    "LoggingConfig",
]

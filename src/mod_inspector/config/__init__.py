"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    AnalysisConfig,
    CacheConfig,
    ErrorsConfig,
    FileLoggingConfig,
    InspectorConfig,
    LoggingConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "InspectorConfig",
    # Sections
    "AnalysisConfig",
    "ErrorsConfig",
    "CacheConfig",
    "LoggingConfig",
    "FileLoggingConfig",
]

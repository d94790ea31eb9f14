"""
Settings package for otbm_codec.

This package provides type-safe, persisted configuration using Qt's
QSettings for cross-platform storage. Codec calls take an immutable
CodecConfig, built from these settings with AppSettings.codec_config().

Usage:
    from otbm_codec.settings import AppSettings

    settings = AppSettings()
    result = settings.validate()
    config = settings.codec_config()
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .codec import CodecSettings
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "CodecSettings",
    "LoggingSettings",
]

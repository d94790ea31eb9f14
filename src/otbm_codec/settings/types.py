"""
Shared types for the otbm_codec settings store.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class ConfigVersion(Enum):
    """Layout version of the stored settings keys.

    Stamped under ``app/version``; SettingsMigrator compares it on startup.
    """
    V1_0 = "1.0"
    CURRENT = V1_0


class ConfigError(Exception):
    """Raised when a codec or logging setting is given an unusable value."""


@dataclass
class ValidationResult:
    """Outcome of AppSettings.validate().

    ``errors`` lists settings that would make codec_config() unusable
    (unknown string encoding, non-positive max depth, unsupported
    identifier). ``warnings`` lists settings that work but are probably
    unintended, such as an empty description separator.
    """
    is_valid: bool
    errors: List[str]
    warnings: List[str]

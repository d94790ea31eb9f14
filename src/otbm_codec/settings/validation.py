"""
Settings validation system for otbm_codec.
"""

import codecs
import logging
from typing import List, TYPE_CHECKING

from ..format.constants import ACCEPTED_IDENTIFIERS
from .logging import VALID_LEVELS
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        codec = self.settings.codec

        try:
            codecs.lookup(codec.string_encoding)
        except LookupError:
            errors.append(f"Unknown string encoding: {codec.string_encoding}")

        if codec.max_depth < 1:
            errors.append(f"Max depth must be positive: {codec.max_depth}")

        if codec.identifier not in ACCEPTED_IDENTIFIERS:
            errors.append(f"Unsupported OTBM identifier: 0x{codec.identifier:08X}")

        if not codec.description_separator:
            warnings.append("Description separator is empty, repeated descriptions will run together")

        level = self.settings.logging.console_log_level
        if level.upper() not in VALID_LEVELS:
            warnings.append(f"Unknown console log level: {level}")

        if errors:
            logger.debug(f"Settings validation found {len(errors)} error(s)")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )

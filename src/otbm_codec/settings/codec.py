"""
Codec-related settings for otbm_codec.
"""

import codecs
from typing import TYPE_CHECKING

from ..format.constants import ACCEPTED_IDENTIFIERS
from ..maps.models import DEFAULT_CONFIG, CodecConfig
from .types import ConfigError

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings


class CodecSettings:
    """Manages persisted defaults for the OTBM codec."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_int(self, key: str, default: int = 0) -> int:
        """Type-safe integer retrieval from settings."""
        value = self.settings.value(key, default)
        try:
            return int(str(value)) if value is not None else default
        except (ValueError, TypeError):
            return default

    @property
    def identifier(self) -> int:
        """Get container identifier written for new documents."""
        return self._get_int("codec/identifier", DEFAULT_CONFIG.identifier)

    @identifier.setter
    def identifier(self, value: int) -> None:
        """Set container identifier written for new documents."""
        if value not in ACCEPTED_IDENTIFIERS:
            raise ConfigError(f"Unsupported OTBM identifier: 0x{value:08X}")
        self.settings.setValue("codec/identifier", value)
        self.settings.sync()

    @property
    def description_separator(self) -> str:
        """Get joiner for repeated description attributes."""
        return self._get_str("codec/description_separator", DEFAULT_CONFIG.description_separator)

    @description_separator.setter
    def description_separator(self, value: str) -> None:
        """Set joiner for repeated description attributes."""
        self.settings.setValue("codec/description_separator", value)
        self.settings.sync()

    @property
    def string_encoding(self) -> str:
        """Get codec used for length-prefixed strings."""
        return self._get_str("codec/string_encoding", DEFAULT_CONFIG.string_encoding)

    @string_encoding.setter
    def string_encoding(self, value: str) -> None:
        """Set codec used for length-prefixed strings."""
        try:
            codecs.lookup(value)
        except LookupError:
            raise ConfigError(f"Unknown string encoding: {value}") from None
        self.settings.setValue("codec/string_encoding", value)
        self.settings.sync()

    @property
    def max_depth(self) -> int:
        """Get deepest node nesting accepted by the codec."""
        return self._get_int("codec/max_depth", DEFAULT_CONFIG.max_depth)

    @max_depth.setter
    def max_depth(self, value: int) -> None:
        """Set deepest node nesting accepted by the codec."""
        if value < 1:
            raise ConfigError(f"Invalid max depth: {value}, must be >= 1")
        self.settings.setValue("codec/max_depth", value)
        self.settings.sync()

    def to_config(self) -> CodecConfig:
        """Snapshot the current values as an immutable CodecConfig."""
        return CodecConfig(
            identifier=self.identifier,
            description_separator=self.description_separator,
            string_encoding=self.string_encoding,
            max_depth=self.max_depth,
        )

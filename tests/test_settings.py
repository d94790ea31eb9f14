"""Tests for persisted settings and logging setup."""

import logging
from pathlib import Path

import pytest

from otbm_codec.format.constants import MAGIC_NULL
from otbm_codec.maps.models import DEFAULT_CONFIG, CodecConfig
from otbm_codec.settings import AppSettings, ConfigError, ConfigVersion
from otbm_codec.utils.logging_config import CSVFormatter, ColoredFormatter, setup_logging


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "otbm_codec.ini"


@pytest.fixture
def settings(settings_file: Path) -> AppSettings:
    return AppSettings(settings_file=settings_file)


class TestSettingsInitialization:
    """Test settings initialization and basic operations."""

    def test_app_settings_init(self, settings: AppSettings) -> None:
        """Test AppSettings can be initialized against an INI file."""
        assert settings.profile == "default"
        assert settings.get_settings_file_path().endswith("otbm_codec.ini")

    def test_app_settings_validation(self, settings: AppSettings) -> None:
        """Test default settings validate cleanly."""
        validation = settings.validate()
        assert validation.is_valid
        assert validation.errors == []
        assert validation.warnings == []

    def test_default_codec_config(self, settings: AppSettings) -> None:
        """Test fresh settings produce the default codec options."""
        assert settings.codec_config() == DEFAULT_CONFIG

    def test_first_run(self, settings_file: Path) -> None:
        """Test first run is reported until marked complete."""
        first = AppSettings(settings_file=settings_file)
        assert first.is_first_run
        assert first.version == ConfigVersion.CURRENT.value
        first.set_first_run_complete()

        second = AppSettings(settings_file=settings_file)
        assert not second.is_first_run

    def test_unknown_version_is_stamped(self, settings_file: Path) -> None:
        """Test an unknown stored version is replaced with the current one."""
        settings = AppSettings(settings_file=settings_file)
        settings.settings.setValue("app/version", "0.9")
        settings.sync()

        migrated = AppSettings(settings_file=settings_file)
        assert migrated.version == ConfigVersion.CURRENT.value
        assert migrated.settings.value("app/migrated_from") == "0.9"

    def test_profiles_are_separate(self, settings_file: Path) -> None:
        """Test values stored under one profile do not leak into another."""
        AppSettings(profile="editor", settings_file=settings_file).codec.max_depth = 8
        assert AppSettings(profile="batch", settings_file=settings_file).codec.max_depth == 64


class TestCodecSettings:
    """Test codec settings persistence and validation."""

    def test_values_persist(self, settings_file: Path) -> None:
        """Test codec values are read back by a new instance."""
        settings = AppSettings(settings_file=settings_file)
        settings.codec.identifier = MAGIC_NULL
        settings.codec.description_separator = "\n"
        settings.codec.string_encoding = "cp1252"
        settings.codec.max_depth = 16

        reloaded = AppSettings(settings_file=settings_file)
        assert reloaded.codec_config() == CodecConfig(
            identifier=MAGIC_NULL,
            description_separator="\n",
            string_encoding="cp1252",
            max_depth=16,
        )

    def test_invalid_encoding(self, settings: AppSettings) -> None:
        """Test an unknown encoding is rejected."""
        with pytest.raises(ConfigError):
            settings.codec.string_encoding = "no-such-codec"
        assert settings.codec.string_encoding == "latin-1"

    def test_invalid_max_depth(self, settings: AppSettings) -> None:
        """Test a non-positive nesting limit is rejected."""
        with pytest.raises(ConfigError):
            settings.codec.max_depth = 0

    def test_invalid_identifier(self, settings: AppSettings) -> None:
        """Test an unknown identifier is rejected."""
        with pytest.raises(ConfigError):
            settings.codec.identifier = 0x12345678

    def test_validation_reports_bad_stored_values(self, settings: AppSettings) -> None:
        """Test values written around the setters are caught by validate()."""
        settings.settings.setValue("codec/string_encoding", "no-such-codec")
        settings.settings.setValue("codec/max_depth", 0)
        settings.settings.setValue("codec/description_separator", "")

        validation = settings.validate()
        assert not validation.is_valid
        assert len(validation.errors) == 2
        assert len(validation.warnings) == 1


class TestLoggingSettings:
    """Test logging settings."""

    def test_defaults(self, settings: AppSettings) -> None:
        """Test logging defaults."""
        assert settings.console_logging
        assert settings.console_log_level == "INFO"
        assert settings.console_use_colors
        assert not settings.file_logging
        assert settings.log_file_path == "logs/otbm_codec.csv"

    def test_invalid_level_is_ignored(self, settings: AppSettings) -> None:
        """Test an unknown level keeps the previous value."""
        settings.console_log_level = "debug"
        settings.console_log_level = "CHATTY"
        assert settings.console_log_level == "DEBUG"

    def test_booleans_persist(self, settings_file: Path) -> None:
        """Test boolean flags survive the INI round trip."""
        settings = AppSettings(settings_file=settings_file)
        settings.console_use_colors = False
        settings.file_logging = True

        reloaded = AppSettings(settings_file=settings_file)
        assert reloaded.console_use_colors is False
        assert reloaded.file_logging is True


class TestUtilsLogging:
    """Test logging configuration."""

    def test_logging_setup_with_settings(
        self, settings: AppSettings, restore_root_logger: None
    ) -> None:
        """Test logging setup installs a console handler."""
        settings.console_log_level = "WARNING"
        setup_logging(settings)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)
        assert logging.getLogger("otbm_codec").level == logging.DEBUG

    def test_file_logging(
        self, settings: AppSettings, tmp_path: Path, restore_root_logger: None
    ) -> None:
        """Test file logging writes CSV lines."""
        log_file = tmp_path / "logs" / "codec.csv"
        settings.console_logging = False
        settings.file_logging = True
        settings.log_file_path = str(log_file)

        setup_logging(settings)
        logging.getLogger("otbm_codec.maps.document").info('Read "thais.otbm"')

        content = log_file.read_text(encoding="utf-8")
        assert '"otbm_codec.utils.logging_config"' in content
        assert '"Read ""thais.otbm"""' in content


class TestFormatters:
    """Test log formatters."""

    def _record(self, level: int, message: str) -> logging.LogRecord:
        return logging.LogRecord("otbm_codec.test", level, __file__, 10, message, None, None)

    def test_colored_formatter(self) -> None:
        """Test only the level name is colored."""
        formatter = ColoredFormatter(fmt="%(levelname)s: %(message)s")
        output = formatter.format(self._record(logging.ERROR, "ERROR again"))
        assert output == "\033[31mERROR\033[0m: ERROR again"

    def test_csv_formatter(self) -> None:
        """Test the CSV line layout."""
        formatter = CSVFormatter()
        output = formatter.format(self._record(logging.INFO, "tile area done"))
        fields = output.split(";")
        assert len(fields) == 6
        assert fields[1] == "INFO    "
        assert fields[3] == '"otbm_codec.test"'
        assert fields[4] == '"10"'
        assert fields[5] == '"tile area done"'

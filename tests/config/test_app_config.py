"""
AppConfig, BackendConfig and IngestionConfig tests - environment loading and validation.
"""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppConfig,
    BackendConfig,
    IngestionConfig,
    debug_config,
    get_config,
    reset_config,
)
from config.defaults import IngestionDefaults
from util_logger import ComponentType, LoggerFactory


class TestDefaults:

    def test_defaults_without_env(self, clean_env):
        config = AppConfig.from_environment()
        assert config.backend.backend_type == "memory"
        assert config.backend.base_url is None
        assert config.ingestion.bracket_window_seconds == IngestionDefaults.BRACKET_WINDOW_SECONDS
        assert config.ingestion.max_batch_files == IngestionDefaults.MAX_BATCH_FILES
        assert config.debug_mode is False


class TestBackendConfig:

    def test_from_environment(self, clean_env):
        clean_env.setenv("WORKFLOW_BACKEND", "HTTP")
        clean_env.setenv("WORKFLOW_API_BASE_URL", "https://orders.example.com/")
        clean_env.setenv("WORKFLOW_API_TOKEN", "secret-token")
        clean_env.setenv("WORKFLOW_API_TIMEOUT_SECONDS", "12")
        config = BackendConfig.from_environment()
        assert config.backend_type == "http"
        assert config.base_url == "https://orders.example.com"
        assert config.timeout_seconds == 12

    def test_token_masked(self):
        config = BackendConfig(api_token="secret-token")
        assert config.debug_dict()["api_token"] == "***MASKED***"
        assert "secret-token" not in repr(config)

    def test_unknown_backend_rejected(self):
        with pytest.raises(PydanticValidationError):
            BackendConfig(backend_type="ftp")

    @pytest.mark.parametrize("timeout", [0, 601])
    def test_timeout_bounds(self, timeout):
        with pytest.raises(PydanticValidationError):
            BackendConfig(timeout_seconds=timeout)


class TestIngestionConfig:

    def test_extensions_from_comma_string(self, clean_env):
        clean_env.setenv("SUPPORTED_EXTENSIONS", "JPG, cr3,.mp4")
        config = IngestionConfig.from_environment()
        assert config.supported_extensions == (".jpg", ".cr3", ".mp4")
        assert config.is_supported("IMG_1.JPG") is True
        assert config.is_supported("IMG_1.png") is False

    def test_window_from_env(self, clean_env):
        clean_env.setenv("BRACKET_WINDOW_SECONDS", "3.5")
        assert IngestionConfig.from_environment().bracket_window_seconds == 3.5

    def test_window_bounds(self):
        with pytest.raises(PydanticValidationError):
            IngestionConfig(bracket_window_seconds=-1)

    def test_bracket_widths_sorted_subset(self):
        assert IngestionConfig(bracket_widths=(5, 3)).bracket_widths == (3, 5)
        with pytest.raises(PydanticValidationError):
            IngestionConfig(bracket_widths=(4,))
        with pytest.raises(PydanticValidationError):
            IngestionConfig(bracket_widths=())

    @pytest.mark.parametrize("name", ["a.cr2", "b.NEF", "c.heic", "d.mov", "e.dng"])
    def test_default_allow_list(self, name):
        assert IngestionConfig().is_supported(name) is True


class TestSingleton:

    def test_get_config_cached(self, clean_env):
        assert get_config() is get_config()

    def test_reset_rereads_environment(self, clean_env):
        clean_env.setenv("MAX_BATCH_FILES", "10")
        reset_config()
        assert get_config().ingestion.max_batch_files == 10

    def test_debug_config_masks_token(self, clean_env):
        clean_env.setenv("WORKFLOW_API_TOKEN", "secret-token")
        reset_config()
        info = debug_config()
        assert info["backend"]["api_token"] == "***MASKED***"

    def test_debug_config_reports_errors(self, clean_env):
        clean_env.setenv("WORKFLOW_BACKEND", "ftp")
        reset_config()
        assert "error" in debug_config()

    def test_verbose_logging_flag(self, clean_env):
        clean_env.setenv("DEBUG_LOGGING", "true")
        assert AppConfig.from_environment().should_log_verbose() is True


class TestLogLevel:

    def test_log_level_normalized(self):
        assert AppConfig(log_level="warning").log_level == "WARNING"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            AppConfig(log_level="LOUD")

    def test_debug_mode_forces_debug(self, clean_env):
        assert AppConfig(log_level="ERROR", debug_mode=True).effective_log_level() == "DEBUG"
        assert AppConfig(log_level="ERROR").effective_log_level() == "ERROR"

    def test_get_config_applies_level_to_loggers(self, clean_env):
        logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "ConfiguredLevel")
        clean_env.setenv("LOG_LEVEL", "WARNING")
        reset_config()
        get_config()
        assert logger.level == logging.WARNING

        reset_config()
        default = LoggerFactory.DEFAULT_CONFIGS[ComponentType.REPOSITORY].log_level.to_python_level()
        assert logger.level == default

    def test_debug_mode_lowers_logger_level(self, clean_env):
        logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "ConfiguredDebug")
        clean_env.setenv("LOG_LEVEL", "ERROR")
        clean_env.setenv("DEBUG_MODE", "true")
        reset_config()
        get_config()
        assert logger.level == logging.DEBUG

"""
Configuration Package - Domain-Specific Configuration Modules

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (composes domain configs)
    ├── backend_config.py        # Job API transport settings
    ├── ingestion_config.py      # Upload allow-list, grouping thresholds
    └── defaults.py              # Default values

Usage:
    # Singleton pattern (preferred)
    from config import get_config
    config = get_config()
    window = config.ingestion.bracket_window_seconds

    # Debug output
    from config import debug_config
    info = debug_config()  # Token masked
"""

from typing import Optional

from util_logger import LoggerFactory

from .backend_config import BackendConfig, BackendType
from .ingestion_config import IngestionConfig
from .app_config import AppConfig


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get global configuration singleton.

    Loading the config also applies its log level to every factory
    logger.

    Returns:
        AppConfig instance loaded from environment
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
        LoggerFactory.configure(_config_instance.effective_log_level())
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None
    LoggerFactory.configure(None)


def debug_config() -> dict:
    """
    Get sanitized configuration for debugging (masks sensitive values).

    Usage:
        info = debug_config()
        print(info['backend']['api_token'])  # Shows "***MASKED***"
    """
    try:
        config = get_config()
        return {
            'backend': config.backend.debug_dict(),
            'ingestion': {
                'supported_extensions': list(config.ingestion.supported_extensions),
                'bracket_window_seconds': config.ingestion.bracket_window_seconds,
                'bracket_widths': list(config.ingestion.bracket_widths),
                'max_batch_files': config.ingestion.max_batch_files,
            },
            'debug_mode': config.debug_mode,
            'environment': config.environment,
            'log_level': config.log_level,
            'effective_log_level': config.effective_log_level(),
        }
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'AppConfig',
    'BackendConfig',
    'BackendType',
    'IngestionConfig',
    'get_config',
    'reset_config',
    'debug_config',
]

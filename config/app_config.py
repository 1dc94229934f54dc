"""
Main Application Configuration.

Composes domain-specific configs into a single AppConfig object.

Exports:
    AppConfig: Main application configuration
"""

import os
from pydantic import BaseModel, Field, field_validator

from util_logger import LogLevel

from .defaults import AppDefaults
from .backend_config import BackendConfig
from .ingestion_config import IngestionConfig


class AppConfig(BaseModel):
    """
    Application configuration - composition of domain configs.

    Each domain config manages its own validation and defaults.
    """

    # ========================================================================
    # Core Application Settings
    # ========================================================================

    debug_mode: bool = Field(
        default=AppDefaults.DEBUG_MODE,
        description="Enable debug mode for verbose diagnostics. "
                    "Set DEBUG_MODE=true in environment to enable.",
        examples=[True, False]
    )

    environment: str = Field(
        default=AppDefaults.ENVIRONMENT,
        description="Environment name (dev, qa, prod)",
        examples=["dev", "qa", "prod"]
    )

    log_level: str = Field(
        default=AppDefaults.LOG_LEVEL,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # ========================================================================
    # Domain Configurations
    # ========================================================================

    backend: BackendConfig = Field(
        default_factory=BackendConfig.from_environment,
        description="Workflow backend transport configuration"
    )

    ingestion: IngestionConfig = Field(
        default_factory=IngestionConfig.from_environment,
        description="Upload allow-list and stack grouping configuration"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in LogLevel.__members__:
            raise ValueError(f"log_level must be one of {list(LogLevel.__members__)}, got '{v}'")
        return level

    def should_log_verbose(self) -> bool:
        """True when DEBUG_MODE or DEBUG_LOGGING is enabled."""
        debug_logging = os.environ.get("DEBUG_LOGGING", "false").lower() == "true"
        return self.debug_mode or debug_logging

    def effective_log_level(self) -> str:
        """Level handed to LoggerFactory.configure(); verbose modes force DEBUG."""
        return LogLevel.DEBUG.value if self.should_log_verbose() else self.log_level

    # ========================================================================
    # Factory Methods
    # ========================================================================

    @classmethod
    def from_environment(cls):
        """Load all configs from environment."""
        return cls(
            debug_mode=os.environ.get("DEBUG_MODE", str(AppDefaults.DEBUG_MODE).lower()).lower() == "true",
            environment=os.environ.get("ENVIRONMENT", AppDefaults.ENVIRONMENT),
            log_level=os.environ.get("LOG_LEVEL", AppDefaults.LOG_LEVEL),
            backend=BackendConfig.from_environment(),
            ingestion=IngestionConfig.from_environment(),
        )

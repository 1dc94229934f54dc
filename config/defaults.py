"""
Configuration Defaults - Single source of truth for all default values.

Organization:
    - BackendDefaults: Workflow backend transport settings
    - IngestionDefaults: Upload allow-list and stack grouping thresholds
    - AppDefaults: Application-level settings

Usage:
    from config.defaults import IngestionDefaults

    # In Pydantic Field definitions:
    bracket_window_seconds: float = Field(default=IngestionDefaults.BRACKET_WINDOW_SECONDS, ...)
"""


# =============================================================================
# BACKEND DEFAULTS
# =============================================================================

class BackendDefaults:
    """
    Workflow backend defaults.

    The HTTP backend has no usable default base URL. Selecting
    WORKFLOW_BACKEND=http without WORKFLOW_API_BASE_URL is a
    configuration error raised by the backend factory.
    """

    BACKEND_TYPE = "memory"  # "http" | "memory"
    BASE_URL = None
    TIMEOUT_SECONDS = 30
    JOBS_PATH = "/api/jobs"
    # Room type the job API assigns to freshly created stacks
    UNASSIGNED_ROOM_TYPE = "unassigned"


# =============================================================================
# INGESTION DEFAULTS
# =============================================================================

class IngestionDefaults:
    """
    Upload allow-list and grouping thresholds.

    Extensions are matched case-insensitively against the file name suffix.
    """

    IMAGE_EXTENSIONS = (
        ".jpg", ".jpeg", ".png", ".heic", ".tif", ".tiff",
    )

    RAW_EXTENSIONS = (
        ".dng", ".cr2", ".cr3", ".nef", ".arw", ".raf",
        ".orf", ".rw2", ".pef", ".srw",
    )

    VIDEO_EXTENSIONS = (
        ".mp4", ".mov", ".m4v",
    )

    SUPPORTED_EXTENSIONS = IMAGE_EXTENSIONS + RAW_EXTENSIONS + VIDEO_EXTENSIONS

    # Max capture-time gap between two frames of the same bracket
    BRACKET_WINDOW_SECONDS = 2.0

    # Bracket widths the editing pipeline knows how to merge
    BRACKET_WIDTHS = (3, 5)

    MAX_BATCH_FILES = 500


# =============================================================================
# APPLICATION DEFAULTS
# =============================================================================

class AppDefaults:
    """Application-level defaults."""

    DEBUG_MODE = False
    ENVIRONMENT = "dev"
    LOG_LEVEL = "INFO"

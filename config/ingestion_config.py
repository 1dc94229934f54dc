"""
Ingestion and Stack Grouping Configuration.

Provides configuration for:
    - Accepted upload file extensions
    - Bracket capture window for the grouping engine
    - Bracket widths and batch size limits

Exports:
    IngestionConfig: Pydantic ingestion configuration model
"""

import os
from typing import Tuple
from pydantic import BaseModel, Field, field_validator

from .defaults import IngestionDefaults


class IngestionConfig(BaseModel):
    """
    Upload and grouping configuration.

    SUPPORTED_EXTENSIONS may be overridden as a comma-separated list
    (e.g. ".jpg,.cr3,.mp4"); a leading dot is added where missing.
    """

    supported_extensions: Tuple[str, ...] = Field(
        default=IngestionDefaults.SUPPORTED_EXTENSIONS,
        description="Lower-case file extensions accepted for upload (RAW, JPEG, PNG, HEIC, TIFF, video)"
    )

    bracket_window_seconds: float = Field(
        default=IngestionDefaults.BRACKET_WINDOW_SECONDS,
        ge=0.0,
        le=60.0,
        description="Max capture-time gap (seconds) between consecutive frames of one bracket"
    )

    bracket_widths: Tuple[int, ...] = Field(
        default=IngestionDefaults.BRACKET_WIDTHS,
        description="Bracket widths recognized by the grouping engine"
    )

    max_batch_files: int = Field(
        default=IngestionDefaults.MAX_BATCH_FILES,
        ge=1,
        description="Maximum number of files accepted in one upload batch"
    )

    @field_validator("supported_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v):
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext.startswith("."):
                ext = f".{ext}"
            normalized.append(ext)
        return tuple(normalized)

    @field_validator("bracket_widths")
    @classmethod
    def validate_bracket_widths(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if not v or any(width not in IngestionDefaults.BRACKET_WIDTHS for width in v):
            raise ValueError(
                f"bracket_widths must be a non-empty subset of {IngestionDefaults.BRACKET_WIDTHS}, got {v}"
            )
        return tuple(sorted(set(v)))

    def is_supported(self, filename: str) -> bool:
        """Check a file name against the extension allow-list."""
        return os.path.splitext(filename)[1].lower() in self.supported_extensions

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        extensions = os.environ.get("SUPPORTED_EXTENSIONS")
        return cls(
            supported_extensions=extensions if extensions else IngestionDefaults.SUPPORTED_EXTENSIONS,
            bracket_window_seconds=float(os.environ.get(
                "BRACKET_WINDOW_SECONDS", str(IngestionDefaults.BRACKET_WINDOW_SECONDS)
            )),
            max_batch_files=int(os.environ.get(
                "MAX_BATCH_FILES", str(IngestionDefaults.MAX_BATCH_FILES)
            )),
        )

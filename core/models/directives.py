# ============================================================================
# EDITING DIRECTIVE MODELS
# ============================================================================
# STATUS: Core - Instructions for the downstream editing team
# PURPOSE: Live directive selections and the frozen snapshot taken at lock time
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EditingDirectives, CompiledDirectives, RETOUCH_FIELDS
# DEPENDENCIES: pydantic, core.models.enums
# ============================================================================
"""
Editing Directive Models.

EditingDirectives is live, mutable state with no retained history: each
single-select category holds exactly one choice and the retouch flags are
independent booleans. CompiledDirectives is the immutable snapshot the
lock gate commits.
"""

from datetime import datetime, timezone
from typing import Dict, List
from pydantic import BaseModel, Field, ConfigDict

from .enums import EditingStyle, WindowStyle, SkyStyle, RetouchFlag


# Retouch flag -> model field
RETOUCH_FIELDS: Dict[RetouchFlag, str] = {
    RetouchFlag.REMOVE_OUTLETS: "remove_outlets",
    RetouchFlag.REMOVE_BINS: "remove_bins",
    RetouchFlag.REDUCE_PERSONAL_ITEMS: "reduce_personal_items",
    RetouchFlag.NEUTRALIZE_TV: "neutralize_tv",
    RetouchFlag.OPTIMIZE_LAWN: "optimize_lawn",
    RetouchFlag.ADD_FIREPLACE: "add_fireplace",
}


class EditingDirectives(BaseModel):
    """
    Current editing choices for a job.
    """

    model_config = ConfigDict(validate_assignment=True)

    # Single-select categories
    editing_style: EditingStyle = Field(default=EditingStyle.A, description="Editing style A-D")
    window_style: WindowStyle = Field(default=WindowStyle.NEUTRAL, description="Window treatment")
    sky_style: SkyStyle = Field(default=SkyStyle.NONE, description="Sky replacement")

    # Independent retouch flags
    remove_outlets: bool = Field(default=False)
    remove_bins: bool = Field(default=False)
    reduce_personal_items: bool = Field(default=False)
    neutralize_tv: bool = Field(default=False)
    optimize_lawn: bool = Field(default=False)
    add_fireplace: bool = Field(default=False)

    notes: str = Field(default="", description="Free-text instructions for the editor")

    # Deliverables
    deliver_alt_texts: bool = Field(default=False, description="Produce alt texts for every image")
    deliver_captions: bool = Field(default=False, description="Produce listing captions")

    def is_retouch_enabled(self, flag: RetouchFlag) -> bool:
        return getattr(self, RETOUCH_FIELDS[flag])

    @property
    def enabled_retouch_flags(self) -> List[RetouchFlag]:
        return [flag for flag in RetouchFlag if self.is_retouch_enabled(flag)]

    def retouch_profile(self) -> Dict[str, bool]:
        """Retouch flags keyed by their wire names."""
        return {flag.value: self.is_retouch_enabled(flag) for flag in RetouchFlag}


class CompiledDirectives(EditingDirectives):
    """
    Immutable directive snapshot taken when the job is locked.
    """

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    compiled_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the snapshot was taken"
    )

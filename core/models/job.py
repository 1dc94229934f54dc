# ============================================================================
# JOB MODEL
# ============================================================================
# STATUS: Core - Job header as returned by Job-fetch
# PURPOSE: Booked photography job with its lock flag and directive defaults
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: JobRecord
# DEPENDENCIES: pydantic, core.models.enums, core.models.panorama
# ============================================================================
"""
Job Model.

JobRecord is read once when a workflow session starts. It seeds the
workflow state (locked flag, current step), the directive compiler
(saved selections) and the panorama graph (saved tour).
"""

from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field, field_validator

from .enums import EditingStyle, WindowStyle, SkyStyle
from .panorama import TourGraph


class JobRecord(BaseModel):
    """
    Booked photography job.

    locked is monotonic: once True it is never reverted through the
    workflow engine.
    """

    job_id: str = Field(..., min_length=1, description="Backend job identifier")
    job_number: Optional[str] = Field(default=None, description="Human-facing order number")
    address: Optional[str] = Field(default=None, description="Property address")
    date: Optional[datetime] = Field(default=None, description="Appointment date")
    customer: Optional[str] = Field(default=None, description="Customer display name")

    locked: bool = Field(default=False, description="Workflow committed for editing")
    current_step: int = Field(default=1, ge=1, le=4, description="Step to resume on")

    # Directive defaults
    editing_style: EditingStyle = Field(default=EditingStyle.A)
    window_style: WindowStyle = Field(default=WindowStyle.NEUTRAL)
    sky_style: SkyStyle = Field(default=SkyStyle.NONE)
    retouch_profile: Dict[str, bool] = Field(default_factory=dict, description="Saved retouch flags by wire name")
    notes: str = Field(default="")
    deliver_alt_texts: bool = Field(default=False)
    deliver_captions: bool = Field(default=False)

    bracket_size: Optional[int] = Field(default=None, description="Photographer's declared bracket width (1, 3 or 5)")
    tour: Optional[TourGraph] = Field(default=None, description="Saved 360° tour, if any")

    @field_validator("bracket_size")
    @classmethod
    def validate_bracket_size(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v not in (1, 3, 5):
            raise ValueError(f"bracket_size must be 1, 3 or 5, got {v}")
        return v

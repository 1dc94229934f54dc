# ============================================================================
# WORKFLOW STATE MODELS
# ============================================================================
# STATUS: Core - Per-job session state shared by every component
# PURPOSE: Current step, lock flag and last validation failure; read-only view
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: WorkflowState, WorkflowView
# DEPENDENCIES: pydantic, core.models
# ============================================================================
"""
Workflow State Models.

One WorkflowState exists per job session. The controller owns it and
hands the same instance to every sub-component.

State machine:
    Unlocked{step 1..4} -> Locked (absorbing)
"""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .asset import Asset
from .directives import EditingDirectives
from .enums import WorkflowStep
from .job import JobRecord
from .panorama import TourGraph
from .results import CostAdvisory
from .stack import Stack


class WorkflowState(BaseModel):
    """
    Mutable session state for one job.
    """

    model_config = ConfigDict(validate_assignment=True)

    job_id: str = Field(..., min_length=1)
    current_step: int = Field(default=WorkflowStep.UPLOAD.value, ge=1, le=4)
    locked: bool = Field(default=False)
    validation_errors: List[str] = Field(
        default_factory=list,
        description="Stack ids that blocked the last lock attempt"
    )

    @property
    def step(self) -> WorkflowStep:
        return WorkflowStep(self.current_step)

    def can_transition_to(self, target_step: int) -> bool:
        """Whether a user-initiated jump to target_step is allowed."""
        # Deferred: core.logic imports core.models
        from core.logic.transitions import can_jump_to_step
        return can_jump_to_step(self.current_step, target_step, self.locked)


class WorkflowView(BaseModel):
    """
    Read-only snapshot of everything the UI renders for one job.
    """

    job: Optional[JobRecord] = None
    current_step: int
    step_label: str
    locked: bool
    validation_errors: List[str] = Field(default_factory=list)
    assets: List[Asset] = Field(default_factory=list)
    stacks: List[Stack] = Field(default_factory=list)
    directives: EditingDirectives
    tour: Optional[TourGraph] = None
    advisories: List[CostAdvisory] = Field(default_factory=list)

    @property
    def unassigned_stack_count(self) -> int:
        return sum(1 for stack in self.stacks if stack.room_type is None)

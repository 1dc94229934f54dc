# ============================================================================
# WORKFLOW CONTROLLER
# ============================================================================
# STATUS: Core - Per-job orchestration of the four workflow steps
# PURPOSE: Owns WorkflowState, wires every component, drives step transitions
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: WorkflowController
# DEPENDENCIES: config, core components, core.errors, core.logic.transitions, exceptions, util_logger
# ============================================================================
"""
Workflow Controller.

One instance per job. The controller owns the job's WorkflowState and
StackCollection and injects the same instances into every component;
nothing is held at module level.

Steps:
    1 Upload              -> IngestionStage
    2 Stapel & Raumtypen  -> RoomAnnotator, PanoramaGraph
    3 Editing-Optionen    -> DirectiveCompiler
    4 Überprüfung         -> LockGate (terminal)

The controller only changes view state (current step, lock delegation);
domain data is changed by the components.

Usage:
    controller = WorkflowController.from_config("job-123")
    controller.load()
    controller.ingestion.submit_batch(files)
    controller.advance_step()
    controller.annotator.set_room_type(stack_id, RoomType.KUECHE)
    controller.lock()

    # UI handlers that want a response dictionary instead of exceptions
    response = controller.execute(controller.lock)
"""

from typing import Any, Callable, Dict, Optional

from config import AppConfig, get_config
from exceptions import BusinessLogicError
from util_logger import LoggerFactory, ComponentType, log_exceptions
from .annotator import PanoramaGraph, RoomAnnotator
from .collection import StackCollection
from .directive_compiler import DirectiveCompiler
from .errors import error_response_for
from .ingestion import IngestionStage
from .lock_gate import LockGate
from .logic.transitions import (
    can_advance,
    can_go_back,
    can_redirect_to_step,
    get_reachable_steps
)
from .models import JobRecord, LockResult, WorkflowState, WorkflowStep, WorkflowView


class WorkflowController:
    """
    Drives one job through Upload -> Stacks -> Editing -> Review -> Locked.
    """

    def __init__(
        self,
        job_id: str,
        job_repo,
        storage,
        stack_repo,
        config: Optional[AppConfig] = None,
    ):
        """
        Args:
            job_id: Job to edit
            job_repo: IJobRepository implementation
            storage: IAssetStorage implementation
            stack_repo: IStackRepository implementation
            config: Application config (defaults to get_config())
        """
        self.config = config or get_config()
        self.job_repo = job_repo
        self.job: Optional[JobRecord] = None

        self.state = WorkflowState(job_id=job_id)
        self.collection = StackCollection()

        self.annotator = RoomAnnotator(self.state, self.collection)
        self.panoramas = PanoramaGraph(self.state, self.collection)
        self.directives = DirectiveCompiler(self.state)
        self.ingestion = IngestionStage(
            self.state,
            self.collection,
            storage,
            stack_repo,
            config=self.config.ingestion,
            annotator=self.annotator,
        )
        self.lock_gate = LockGate(
            self.state,
            self.collection,
            self.directives,
            self.panoramas,
            job_repo,
            redirect=self.redirect_to_step,
        )

        self.logger = LoggerFactory.create_with_context(
            ComponentType.CONTROLLER, "WorkflowController", job_id=job_id
        )

    @classmethod
    def from_config(cls, job_id: str, config: Optional[AppConfig] = None) -> "WorkflowController":
        """Build a controller with backends selected by configuration."""
        from infrastructure.factory import BackendFactory

        config = config or get_config()
        backends = BackendFactory.create_backends(config.backend)
        return cls(
            job_id,
            job_repo=backends['job_repo'],
            storage=backends['storage'],
            stack_repo=backends['stack_repo'],
            config=config,
        )

    # ========================================================================
    # LOADING
    # ========================================================================

    @log_exceptions(ComponentType.CONTROLLER, "WorkflowController")
    def load(self) -> JobRecord:
        """
        Job-fetch, seed every component, then an initial authoritative refresh.

        Raises:
            ResourceNotFoundError: Unknown job
            TransportError: Fetch failed
        """
        job = self.job_repo.get_job(self.state.job_id)
        self.job = job

        self.state.locked = self.state.locked or job.locked
        self.state.current_step = job.current_step
        self.state.validation_errors = []

        self.directives.apply_defaults(job)
        self.panoramas.seed(job.tour)
        self.ingestion.bracket_size = job.bracket_size
        self.ingestion.refresh(initial=True)

        self.logger.info(
            f"Loaded job {job.job_number or job.job_id} "
            f"(step {self.state.current_step}, locked={self.state.locked})"
        )
        return job

    # ========================================================================
    # STEP TRANSITIONS
    # ========================================================================

    def advance_step(self) -> bool:
        """Move forward one step. No-op (False) when locked or on step 4."""
        if not can_advance(self.state.current_step, self.state.locked):
            self.logger.debug(f"advance_step rejected at step {self.state.current_step}")
            return False
        self.state.current_step += 1
        return True

    def go_back(self) -> bool:
        """Move back one step. No-op (False) when locked or on step 1."""
        if not can_go_back(self.state.current_step, self.state.locked):
            return False
        self.state.current_step -= 1
        return True

    def jump_to_step(self, step: int) -> bool:
        """
        Jump to a user-selected step.

        Any earlier step, or the next one, while unlocked. Everything else
        is rejected without a state change.
        """
        step = int(step)
        if not self.state.can_transition_to(step):
            self.logger.debug(f"jump_to_step({step}) rejected at step {self.state.current_step}")
            return False
        self.state.current_step = step
        return True

    def redirect_to_step(self, step: int) -> bool:
        """Internal redirect (lock validation failure -> step 2)."""
        step = int(step)
        if not can_redirect_to_step(step, self.state.locked):
            return False
        self.state.current_step = step
        self.logger.info(f"Redirected to step {step}")
        return True

    def reachable_steps(self):
        return get_reachable_steps(self.state.current_step, self.state.locked)

    # ========================================================================
    # LOCK
    # ========================================================================

    def lock(self) -> LockResult:
        """
        Validate and commit the job. See LockGate.lock().

        Raises:
            ValidationError, CommitRejectedError, TransportError
        """
        return self.lock_gate.lock()

    # ========================================================================
    # UI RESPONSES
    # ========================================================================

    def execute(self, operation: Callable[..., Any], *args, **kwargs) -> Dict[str, Any]:
        """
        Run a workflow operation and wrap the outcome for the UI.

        Expected failures (BusinessLogicError) become the error dictionary
        built by error_response_for(). Contract violations and anything
        else propagate.

        Returns:
            {"success": True, "result": ...} or the error response
        """
        try:
            result = operation(*args, **kwargs)
        except BusinessLogicError as e:
            self.logger.warning(
                f"{getattr(operation, '__name__', 'operation')} failed: {e}",
                extra={'custom_dimensions': {'error_code': e.error_code.value}}
            )
            return error_response_for(e)
        return {"success": True, "result": result}

    # ========================================================================
    # VIEW
    # ========================================================================

    def snapshot(self) -> WorkflowView:
        """Read-only view of everything the UI renders."""
        step = WorkflowStep(self.state.current_step)
        return WorkflowView(
            job=self.job,
            current_step=step.value,
            step_label=step.label,
            locked=self.state.locked,
            validation_errors=list(self.state.validation_errors),
            assets=self.collection.assets,
            stacks=self.collection.stacks,
            directives=self.directives.directives,
            tour=self.panoramas.serialize(),
            advisories=self.directives.advisories(),
        )

    def close(self) -> None:
        """Wait for queued background uploads and release the worker."""
        self.ingestion.shutdown(wait=True)

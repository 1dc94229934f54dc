# ============================================================================
# VALIDATION & LOCK GATE
# ============================================================================
# STATUS: Core - Step 4 of the workflow (terminal)
# PURPOSE: Single validation checkpoint and irreversible commit of the job
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: LockGate
# DEPENDENCIES: core.models, core.errors, exceptions, util_logger
# ============================================================================
"""
Validation & Lock Gate.

lock() runs, in order:
    1. Every stack must carry a room type. Otherwise the lock is
       rejected, the workflow is redirected to step 2, the offending ids
       are stored in WorkflowState.validation_errors and ValidationError
       is raised.
    2. Compile directives, serialize the tour, issue ONE commit carrying
       everything plus locked=true.
    3. On acknowledgement set WorkflowState.locked. Every mutator in the
       workflow is a no-op from then on.

A rejected or failed commit leaves the job unlocked and can be retried.
Calling lock() on a locked job returns the recorded result.
"""

from typing import Callable, List, Optional

from exceptions import CommitRejectedError, ValidationError
from util_logger import LoggerFactory, ComponentType, timed_operation
from .collection import StackCollection
from .errors import ErrorCode
from .models import (
    CommitPayload,
    LockResult,
    Stack,
    StackAnnotation,
    WorkflowState,
    WorkflowStep
)


class LockGate:
    """
    Validates and commits a job exactly once.
    """

    def __init__(
        self,
        state: WorkflowState,
        collection: StackCollection,
        compiler,
        panorama_graph,
        job_repo,
        redirect: Optional[Callable[[int], bool]] = None,
    ):
        """
        Args:
            state: Shared workflow state
            collection: Shared stack collection
            compiler: DirectiveCompiler for the job
            panorama_graph: PanoramaGraph for the job
            job_repo: IJobRepository implementation
            redirect: Callback moving the workflow to a step (controller redirect)
        """
        self.state = state
        self.collection = collection
        self.compiler = compiler
        self.panorama_graph = panorama_graph
        self.job_repo = job_repo
        self._redirect = redirect
        self._result: Optional[LockResult] = None
        self.logger = LoggerFactory.create_with_context(
            ComponentType.VALIDATOR, "LockGate", job_id=state.job_id
        )

    def find_unassigned(self, stacks: Optional[List[Stack]] = None) -> List[str]:
        """Ids of stacks without a room type, in display order."""
        if stacks is None:
            stacks = self.collection.stacks
        return [stack.stack_id for stack in stacks if stack.room_type is None]

    def _redirect_to(self, step: int) -> None:
        if self._redirect is not None:
            self._redirect(step)
        else:
            self.state.current_step = step

    def build_payload(self, stacks: Optional[List[Stack]] = None) -> CommitPayload:
        """Assemble the commit from the stacks, directives and tour."""
        if stacks is None:
            stacks = self.collection.stacks
        annotations = [
            StackAnnotation(
                stack_id=stack.stack_id,
                room_type=stack.room_type,
                comment=stack.comment,
                asset_ids=stack.asset_ids,
                stack_type=stack.stack_type,
            )
            for stack in stacks
        ]
        return CommitPayload(
            directives=self.compiler.compile(),
            tour=self.panorama_graph.serialize(),
            stack_annotations=annotations,
            locked=True,
        )

    def lock(self) -> LockResult:
        """
        Validate and commit the job.

        Returns:
            LockResult (already_locked=True when the job was locked before)

        Raises:
            ValidationError: At least one stack has no room type
            CommitRejectedError: Backend refused the commit
            TransportError: Commit failed on the wire
        """
        if self.state.locked:
            self.logger.debug("lock() on a locked job")
            if self._result is not None:
                return self._result.model_copy(update={'already_locked': True})
            return LockResult(
                job_id=self.state.job_id,
                already_locked=True,
                directives=self.compiler.compile(),
                stack_count=len(self.collection),
            )

        # Validate and commit the same snapshot
        stacks = self.collection.stacks
        offending = self.find_unassigned(stacks)
        if offending:
            total = len(stacks)
            self.state.validation_errors = offending
            self._redirect_to(WorkflowStep.STACKS.value)
            self.logger.warning(
                f"Lock rejected: {len(offending)} of {total} stacks have no room type",
                extra={'custom_dimensions': {'offending_stack_ids': offending}}
            )
            raise ValidationError(
                f"Fehlende Raumtypen: Bitte weisen Sie allen {total} Stapeln einen Raumtyp zu "
                f"({len(offending)} ohne Raumtyp).",
                offending_stack_ids=offending
            )

        self.state.validation_errors = []
        payload = self.build_payload(stacks)

        with timed_operation(self.logger, "commit_job", stack_count=len(payload.stack_annotations)):
            acknowledged = self.job_repo.commit_job(self.state.job_id, payload)

        if not acknowledged:
            raise CommitRejectedError(
                "Backend did not acknowledge the lock commit",
                operation="commit_job",
                error_code=ErrorCode.COMMIT_REJECTED
            )

        self.state.locked = True
        self._result = LockResult(
            job_id=self.state.job_id,
            directives=payload.directives,
            stack_count=len(payload.stack_annotations),
        )
        self.logger.info(f"✅ Job locked with {self._result.stack_count} stacks")
        return self._result

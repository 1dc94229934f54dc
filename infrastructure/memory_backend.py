# ============================================================================
# IN-MEMORY WORKFLOW BACKEND
# ============================================================================
# STATUS: Infrastructure - Local and test backend
# PURPOSE: Thread-safe dict-backed implementation of every backend interface
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: InMemoryWorkflowBackend
# DEPENDENCIES: core.models, core.logic.grouping, exceptions
# ============================================================================
"""
In-Memory Workflow Backend.

Behaves like the job API without a network:
    - upload_batch stores every file as an unsorted asset
    - list_stacks returns server stacks plus unsorted assets
    - commit_job records the payload, sets the job's locked flag and
      persists client-grouped stacks with their annotations

Failures can be injected per operation (fail_next) to exercise the
transport error paths.
"""

import threading
from typing import Dict, List, Optional

from core.errors import ErrorCode
from core.logic.grouping import classify_stack
from core.models import (
    Asset,
    CommitPayload,
    JobRecord,
    Stack,
    StackSnapshot,
    UploadFile,
    UploadReceipt
)
from exceptions import CommitRejectedError, ResourceNotFoundError, TransportError
from util_logger import LoggerFactory, ComponentType
from .interface_repository import IAssetStorage, IJobRepository, IStackRepository


_FAILURE_CODES = {
    'get_job': ErrorCode.FETCH_FAILED,
    'list_stacks': ErrorCode.FETCH_FAILED,
    'upload_batch': ErrorCode.UPLOAD_FAILED,
    'commit_job': ErrorCode.COMMIT_FAILED,
}


class InMemoryWorkflowBackend(IJobRepository, IAssetStorage, IStackRepository):
    """
    Job, storage and stack backend held in process memory.

    Usage:
        backend = InMemoryWorkflowBackend()
        backend.add_job(JobRecord(job_id="job-1"))
        backend.upload_batch("job-1", files)
        snapshot = backend.list_stacks("job-1")
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: Dict[str, JobRecord] = {}
        self._stacks: Dict[str, List[Stack]] = {}
        self._unsorted: Dict[str, List[Asset]] = {}
        self._failures: Dict[str, Exception] = {}
        self._asset_counter = 0
        self.commits: List[CommitPayload] = []
        self.upload_calls = 0
        self.list_calls = 0
        self.logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "InMemoryWorkflowBackend")

    # ========================================================================
    # SEEDING
    # ========================================================================

    def add_job(self, job: JobRecord) -> None:
        with self._lock:
            self._jobs[job.job_id] = job.model_copy(deep=True)
            self._stacks.setdefault(job.job_id, [])
            self._unsorted.setdefault(job.job_id, [])

    def add_assets(self, job_id: str, assets: List[Asset]) -> None:
        """Store assets as unsorted, as if uploaded earlier."""
        with self._lock:
            self._require(job_id)
            self._unsorted[job_id].extend(assets)

    def add_server_stack(self, job_id: str, stack: Stack) -> None:
        """Store a stack the backend already grouped; its assets leave the unsorted pool."""
        with self._lock:
            self._require(job_id)
            owned = set(stack.asset_ids)
            self._unsorted[job_id] = [a for a in self._unsorted[job_id] if a.asset_id not in owned]
            self._stacks[job_id].append(stack.model_copy(deep=True))

    def fail_next(self, operation: str, error: Optional[Exception] = None) -> None:
        """Make the next call of an operation raise (TransportError by default)."""
        if operation not in _FAILURE_CODES:
            raise ValueError(f"Unknown operation '{operation}', expected one of {sorted(_FAILURE_CODES)}")
        if error is None:
            error = TransportError(
                f"{operation} failed (injected)",
                operation=operation,
                error_code=_FAILURE_CODES[operation]
            )
        with self._lock:
            self._failures[operation] = error

    def _raise_injected(self, operation: str) -> None:
        error = self._failures.pop(operation, None)
        if error is not None:
            self.logger.debug(f"Raising injected failure for {operation}")
            raise error

    def _require(self, job_id: str) -> JobRecord:
        job = self._jobs.get(job_id)
        if job is None:
            raise ResourceNotFoundError(f"Job '{job_id}' not found")
        return job

    # ========================================================================
    # IJobRepository
    # ========================================================================

    def get_job(self, job_id: str) -> JobRecord:
        with self._lock:
            self._raise_injected('get_job')
            return self._require(job_id).model_copy(deep=True)

    def commit_job(self, job_id: str, payload: CommitPayload) -> bool:
        with self._lock:
            self._raise_injected('commit_job')
            job = self._require(job_id)
            if job.locked:
                raise CommitRejectedError(
                    f"Job '{job_id}' is already locked",
                    operation="commit_job",
                    error_code=ErrorCode.COMMIT_REJECTED,
                    status_code=409
                )
            new_stacks = self._stacks_to_persist(job_id, payload)
            self.commits.append(payload.model_copy(deep=True))

            directives = payload.directives
            self._jobs[job_id] = job.model_copy(update={
                'locked': payload.locked,
                'current_step': 4,
                'editing_style': directives.editing_style,
                'window_style': directives.window_style,
                'sky_style': directives.sky_style,
                'retouch_profile': directives.retouch_profile(),
                'notes': directives.notes,
                'deliver_alt_texts': directives.deliver_alt_texts,
                'deliver_captions': directives.deliver_captions,
                'tour': payload.tour,
            })

            annotations = {a.stack_id: a for a in payload.stack_annotations}
            for stack in self._stacks[job_id]:
                if stack.stack_id in annotations:
                    stack.room_type = annotations[stack.stack_id].room_type
                    stack.comment = annotations[stack.stack_id].comment

            # Stacks grouped on the client become server stacks
            persisted = set()
            for stack in new_stacks:
                persisted.update(stack.asset_ids)
                self._stacks[job_id].append(stack)
            self._unsorted[job_id] = [a for a in self._unsorted[job_id] if a.asset_id not in persisted]

            self.logger.info(
                f"Committed job {job_id} with {len(annotations)} stack annotations "
                f"({len(new_stacks)} new stacks persisted)"
            )
            return True

    def _stacks_to_persist(self, job_id: str, payload: CommitPayload) -> List[Stack]:
        """
        Build server stacks for annotated stacks the backend does not know yet.

        Only stacks whose every asset is still in the unsorted pool are
        persisted; anything else is logged and left alone.
        """
        known = {stack.stack_id for stack in self._stacks[job_id]}
        unsorted = {asset.asset_id: asset for asset in self._unsorted[job_id]}

        new_stacks = []
        for annotation in payload.stack_annotations:
            if annotation.stack_id in known:
                continue
            ids = annotation.asset_ids
            if not ids or len(set(ids)) != len(ids) or any(a not in unsorted for a in ids):
                self.logger.warning(
                    f"Not persisting stack {annotation.stack_id}: assets not in the unsorted pool"
                )
                continue
            assets = [unsorted.pop(asset_id) for asset_id in ids]
            new_stacks.append(Stack(
                stack_id=annotation.stack_id,
                assets=assets,
                room_type=annotation.room_type,
                stack_type=annotation.stack_type or classify_stack(assets),
                comment=annotation.comment,
            ))
        return new_stacks

    # ========================================================================
    # IAssetStorage
    # ========================================================================

    def upload_batch(self, job_id: str, files: List[UploadFile]) -> UploadReceipt:
        with self._lock:
            self.upload_calls += 1
            self._raise_injected('upload_batch')
            self._require(job_id)

            # All or nothing: build every asset before storing any
            created = []
            for upload in files:
                self._asset_counter += 1
                created.append(Asset(
                    asset_id=f"img-{self._asset_counter:04d}",
                    name=upload.name,
                    size=len(upload.content),
                    media_type=upload.resolved_media_type,
                    captured_at=upload.captured_at,
                    width=upload.width,
                    height=upload.height,
                    is_360=upload.is_360,
                ))
            self._unsorted[job_id].extend(created)
            return UploadReceipt(uploaded_count=len(created))

    # ========================================================================
    # IStackRepository
    # ========================================================================

    def list_stacks(self, job_id: str) -> StackSnapshot:
        with self._lock:
            self.list_calls += 1
            self._raise_injected('list_stacks')
            self._require(job_id)
            return StackSnapshot(
                stacks=[stack.model_copy(deep=True) for stack in self._stacks[job_id]],
                unsorted_assets=list(self._unsorted[job_id]),
            )

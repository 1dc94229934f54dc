# ============================================================================
# INGESTION STAGE
# ============================================================================
# STATUS: Core - Step 1 of the workflow
# PURPOSE: Atomic batch upload followed by an authoritative refetch-and-replace
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: IngestionStage
# DEPENDENCIES: config, core.logic.grouping, core.collection, infrastructure interfaces
# ============================================================================
"""
Ingestion Stage.

Upload flow:
    1. Drop files whose extension is not on the allow-list
    2. Upload the remaining files in ONE request
    3. On acknowledgement, re-fetch the authoritative stacks and replace
       the local collections wholesale (never merge)

Local state only ever changes in step 3. An upload failure, or a refetch
failure after a successful upload, leaves the collections untouched and
raises TransportError; refresh() converges afterwards.

Reconciliation:
    local assets = every asset in the snapshot (stacked and unsorted)
    local stacks = server stacks in server order, followed by the
                   grouping engine's stacks for the unsorted assets
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

from config import IngestionConfig, get_config
from exceptions import (
    BatchTooLargeError,
    ContractViolationError,
    TransportError,
    UnsupportedAssetError
)
from util_logger import LoggerFactory, ComponentType, timed_operation
from .collection import StackCollection
from .logic.grouping import group_assets
from .models import (
    Asset,
    IngestionResult,
    Stack,
    StackSnapshot,
    UploadFile,
    WorkflowState
)


class IngestionStage:
    """
    Uploads batches and keeps the local collections in sync with the backend.

    Usage:
        stage = IngestionStage(state, collection, storage, stack_repo)
        result = stage.submit_batch([UploadFile(name="DSC_0001.CR3", content=data)])
        future = stage.submit_in_background(more_files)
    """

    def __init__(
        self,
        state: WorkflowState,
        collection: StackCollection,
        storage,
        stack_repo,
        config: Optional[IngestionConfig] = None,
        annotator=None,
    ):
        """
        Args:
            state: Shared workflow state
            collection: Shared stack collection
            storage: IAssetStorage implementation
            stack_repo: IStackRepository implementation
            config: Ingestion settings (defaults to get_config().ingestion)
            annotator: Optional RoomAnnotator whose intent is re-applied after refresh
        """
        self.state = state
        self.collection = collection
        self.storage = storage
        self.stack_repo = stack_repo
        self.config = config or get_config().ingestion
        self.annotator = annotator
        self.bracket_size: Optional[int] = None

        self._submit_lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

        self.logger = LoggerFactory.create_with_context(
            ComponentType.SERVICE, "IngestionStage", job_id=state.job_id
        )

    # ========================================================================
    # UPLOAD
    # ========================================================================

    def partition_files(self, files: Iterable[UploadFile]) -> Tuple[List[UploadFile], List[str]]:
        """Split files into (accepted, rejected names) by the extension allow-list."""
        accepted, rejected = [], []
        for upload in files:
            if self.config.is_supported(upload.name):
                accepted.append(upload)
            else:
                rejected.append(upload.name)
        return accepted, rejected

    def submit_batch(self, files: Iterable[UploadFile]) -> Optional[IngestionResult]:
        """
        Upload a batch and refresh the local collections.

        Args:
            files: Files selected by the user

        Returns:
            IngestionResult, or None when the batch is empty or the job is locked

        Raises:
            UnsupportedAssetError: Every file had an unsupported type
            BatchTooLargeError: More supported files than max_batch_files
            TransportError: Upload or refetch failed (local state unchanged)
        """
        if self.state.locked:
            self.logger.debug("Ignoring submit_batch: job is locked")
            return None

        files = list(files or [])
        if not files:
            self.logger.debug("Ignoring empty batch")
            return None

        accepted, rejected = self.partition_files(files)
        if not accepted:
            self.logger.warning(f"Rejected batch: all {len(rejected)} files unsupported")
            raise UnsupportedAssetError(
                f"Nicht unterstützte Dateitypen: {', '.join(rejected)}",
                rejected_files=rejected
            )
        if rejected:
            self.logger.info(f"Skipping {len(rejected)} unsupported files: {rejected}")

        limit = self.config.max_batch_files
        if len(accepted) > limit:
            raise BatchTooLargeError(
                f"Batch has {len(accepted)} files, at most {limit} allowed per upload",
                file_count=len(accepted),
                limit=limit
            )

        with self._submit_lock:
            with timed_operation(self.logger, "upload_batch", file_count=len(accepted)):
                receipt = self.storage.upload_batch(self.state.job_id, accepted)

            try:
                self.refresh()
            except TransportError:
                self.logger.warning(
                    f"Upload of {receipt.uploaded_count} files acknowledged but refetch failed; "
                    "local collections unchanged until refresh()"
                )
                raise

        return IngestionResult(
            uploaded_count=receipt.uploaded_count,
            rejected_files=rejected,
            asset_count=len(self.collection.assets),
            stack_count=len(self.collection),
        )

    def submit_in_background(self, files: Iterable[UploadFile]) -> Future:
        """
        Run submit_batch on a single background worker.

        Batches run to completion in submission order. There is no
        cancellation; errors surface through the returned Future.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ingestion")
        return self._executor.submit(self.submit_batch, list(files or []))

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background worker after queued batches finish."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    # ========================================================================
    # AUTHORITATIVE REFRESH
    # ========================================================================

    def refresh(self, initial: bool = False) -> int:
        """
        Stacks-fetch and wholesale replace of the local collections.

        Once the job is locked the collections are frozen; only the initial
        refresh of load() still reads the committed stacks.

        Args:
            initial: True for the refresh issued by load()

        Returns:
            Number of stacks after the refresh

        Raises:
            TransportError: Fetch failed (local state unchanged)
        """
        if self.state.locked and not initial:
            self.logger.debug("refresh skipped: job is locked")
            return len(self.collection.stacks)

        with timed_operation(self.logger, "list_stacks"):
            snapshot = self.stack_repo.list_stacks(self.state.job_id)

        assets, stacks = self.reconcile(snapshot)
        if self.annotator is not None:
            self.annotator.reapply(stacks)
        version = self.collection.replace(assets, stacks)

        self.logger.info(
            f"Collections replaced: {len(assets)} assets in {len(stacks)} stacks",
            extra={'custom_dimensions': {
                'asset_count': len(assets),
                'stack_count': len(stacks),
                'collection_version': version,
            }}
        )
        return len(stacks)

    def reconcile(self, snapshot: StackSnapshot) -> Tuple[List[Asset], List[Stack]]:
        """
        Build local collections from a Stacks-fetch snapshot.

        Raises:
            ContractViolationError: An asset appears in more than one server stack
        """
        server_stacks = [stack.model_copy(deep=True) for stack in snapshot.stacks]

        owned = set()
        for stack in server_stacks:
            for asset_id in stack.asset_ids:
                if asset_id in owned:
                    raise ContractViolationError(
                        f"Asset '{asset_id}' appears in more than one server stack"
                    )
                owned.add(asset_id)

        unsorted = []
        for asset in snapshot.unsorted_assets:
            if asset.asset_id in owned:
                self.logger.warning(f"Unsorted asset {asset.asset_id} already stacked on the server; skipping")
                continue
            owned.add(asset.asset_id)
            unsorted.append(asset)

        for index, stack in enumerate(server_stacks):
            stack.sequence_index = index

        engine_stacks = group_assets(
            unsorted,
            bracket_window_seconds=self.config.bracket_window_seconds,
            bracket_size=self.bracket_size,
            bracket_widths=self.config.bracket_widths,
            start_index=len(server_stacks),
        )

        assets = [asset for stack in server_stacks for asset in stack.assets] + unsorted
        return assets, server_stacks + engine_stacks

"""
Result Models.

Outcome types returned by the ingestion stage, the directive compiler
and the lock gate, plus the commit payload sent when a job is locked.

Exports:
    UploadReceipt: Storage acknowledgement of an upload batch
    IngestionResult: Outcome of submit_batch
    CostAdvisory: Non-blocking note that a retouch flag costs extra
    StackAnnotation: Room type and comment committed per stack
    CommitPayload: Everything the lock commit carries
    LockResult: Outcome of a successful lock
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field

from .directives import CompiledDirectives
from .enums import RetouchFlag, RoomType, StackType
from .panorama import TourGraph


class UploadReceipt(BaseModel):
    """Storage acknowledgement of an upload batch."""

    uploaded_count: int = Field(..., ge=0)


class IngestionResult(BaseModel):
    """
    Outcome of one submit_batch call.

    rejected_files lists names filtered out by the extension allow-list;
    the remaining files were uploaded in one request.
    """

    uploaded_count: int = Field(default=0, ge=0)
    rejected_files: List[str] = Field(default_factory=list)
    asset_count: int = Field(default=0, ge=0, description="Assets after the refresh")
    stack_count: int = Field(default=0, ge=0, description="Stacks after the refresh")


class CostAdvisory(BaseModel):
    """Non-blocking advisory raised when a retouch flag is enabled."""

    flag: RetouchFlag
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StackAnnotation(BaseModel):
    """
    Room type and comment of one stack at lock time.

    Carries the stack's membership so the backend can persist stacks it
    never grouped itself.
    """

    stack_id: str
    room_type: RoomType
    comment: Optional[str] = None
    asset_ids: List[str] = Field(default_factory=list)
    stack_type: Optional[StackType] = None


class CommitPayload(BaseModel):
    """
    Single atomic commit issued by the lock gate.
    """

    directives: CompiledDirectives
    tour: Optional[TourGraph] = None
    stack_annotations: List[StackAnnotation] = Field(default_factory=list)
    locked: bool = True


class LockResult(BaseModel):
    """Outcome of a lock that reached (or had already reached) the backend."""

    job_id: str
    locked: bool = True
    already_locked: bool = False
    directives: Optional[CompiledDirectives] = None
    stack_count: int = Field(default=0, ge=0)
    committed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

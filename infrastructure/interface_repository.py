"""
Repository Abstract Base Classes - Single Point of Truth.

Enforces exact method signatures across all backend implementations,
preventing parameter name mismatches. All parameter names, return types,
and method signatures are defined here and nowhere else.

Philosophy: "Define once, enforce everywhere"

Exports:
    IJobRepository: Job-fetch and lock commit
    IAssetStorage: Atomic batch upload
    IStackRepository: Authoritative Stacks-fetch
    ParamNames: Canonical wire key constants
"""

from abc import ABC, abstractmethod
from typing import Final, List

from core.models import (
    CommitPayload,
    JobRecord,
    StackSnapshot,
    UploadFile,
    UploadReceipt
)


# ============================================================================
# CANONICAL WIRE KEYS - Single source of truth
# ============================================================================

class ParamNames:
    """
    Wire keys used by the job API.
    Using class attributes as constants keeps the HTTP and in-memory
    backends consistent.
    """

    # Job
    JOB_ID: Final[str] = "id"
    JOB_NUMBER: Final[str] = "jobNumber"
    PROPERTY_ADDRESS: Final[str] = "propertyAddress"
    ADDRESS_FORMATTED: Final[str] = "addressFormatted"
    APPOINTMENT_DATE: Final[str] = "appointmentDate"
    CUSTOMER_NAME: Final[str] = "customerName"
    WORKFLOW_LOCKED: Final[str] = "workflowLocked"
    WORKFLOW_STEP: Final[str] = "workflowStep"
    BRACKET_SIZE: Final[str] = "bracketSize"

    # Directives
    EDITING_STYLE: Final[str] = "editingStyle"
    WINDOW_STYLE: Final[str] = "windowStyle"
    SKY_STYLE: Final[str] = "skyStyle"
    RETOUCH_PROFILE: Final[str] = "retouchProfile"
    CUSTOMER_COMMENT: Final[str] = "customerCommentDe"
    DELIVER_ALTTEXT: Final[str] = "deliverAlttext"
    DELIVER_EXPOSE: Final[str] = "deliverExpose"

    # Tour
    TOUR_360: Final[str] = "tour360"
    PANORAMAS: Final[str] = "panoramas"
    FLOORPLAN: Final[str] = "floorplan"
    START_PANORAMA: Final[str] = "startPanorama"

    # Stacks
    STACKS: Final[str] = "stacks"
    STACK_ANNOTATIONS: Final[str] = "stackAnnotations"
    UNSORTED_IMAGES: Final[str] = "unsortedImages"
    ROOM_TYPE: Final[str] = "roomType"
    FRAME_COUNT: Final[str] = "frameCount"
    IMAGE_IDS: Final[str] = "imageIds"
    COMMENT: Final[str] = "comment"

    # Upload
    FILES: Final[str] = "files"
    UPLOADED_COUNT: Final[str] = "uploadedCount"


# ============================================================================
# ABSTRACT BASE CLASSES - Enforce exact signatures
# ============================================================================

class IJobRepository(ABC):
    """
    Job repository interface with EXACT method signatures.
    All implementations MUST use these exact parameter names.
    """

    @abstractmethod
    def get_job(self, job_id: str) -> JobRecord:
        """
        Job-fetch.

        Raises:
            ResourceNotFoundError: Unknown job
            TransportError: Network or server failure
        """
        pass

    @abstractmethod
    def commit_job(self, job_id: str, payload: CommitPayload) -> bool:
        """
        Single atomic lock commit.

        Raises:
            CommitRejectedError: Backend refused the commit
            TransportError: Network or server failure
        """
        pass


class IAssetStorage(ABC):
    """
    Storage collaborator interface.
    """

    @abstractmethod
    def upload_batch(self, job_id: str, files: List[UploadFile]) -> UploadReceipt:
        """
        Upload every file in one request.

        Raises:
            TransportError: Network or server failure (nothing stored)
        """
        pass


class IStackRepository(ABC):
    """
    Authoritative Stack/Asset source.
    """

    @abstractmethod
    def list_stacks(self, job_id: str) -> StackSnapshot:
        """
        Stacks-fetch.

        Raises:
            TransportError: Network or server failure
        """
        pass

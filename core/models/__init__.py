"""
Core Data Models Package.

Contains pure data structures without business logic.
All business logic is in the core.logic package and the workflow
components under core/.

Exports:
    JobRecord: Job header
    Asset, Stack, StackSnapshot: Uploaded files and their grouping
    EditingDirectives, CompiledDirectives: Editing choices
    Panorama, TourGraph: 360° tour graph
    WorkflowState, WorkflowView: Session state and read-only view
    UploadReceipt, IngestionResult, CostAdvisory, StackAnnotation,
    CommitPayload, LockResult: Result types
    WorkflowStep, StackType, RoomType, EditingStyle, WindowStyle,
    SkyStyle, RetouchFlag, PanoramaCategory, Floor: Enums
"""

# Enums
from .enums import (
    WorkflowStep,
    StackType,
    RoomType,
    EditingStyle,
    WindowStyle,
    SkyStyle,
    RetouchFlag,
    PanoramaCategory,
    Floor
)

# Asset and stack models
from .asset import Asset, UploadFile
from .stack import Stack, StackSnapshot

# Directive models
from .directives import EditingDirectives, CompiledDirectives, RETOUCH_FIELDS

# Tour models
from .panorama import Panorama, TourGraph

# Job model
from .job import JobRecord

# Result models
from .results import (
    UploadReceipt,
    IngestionResult,
    CostAdvisory,
    StackAnnotation,
    CommitPayload,
    LockResult
)

# Session state
from .workflow_state import WorkflowState, WorkflowView

__all__ = [
    # Enums
    'WorkflowStep',
    'StackType',
    'RoomType',
    'EditingStyle',
    'WindowStyle',
    'SkyStyle',
    'RetouchFlag',
    'PanoramaCategory',
    'Floor',

    # Models
    'Asset',
    'UploadFile',
    'Stack',
    'StackSnapshot',
    'EditingDirectives',
    'CompiledDirectives',
    'RETOUCH_FIELDS',
    'Panorama',
    'TourGraph',
    'JobRecord',
    'UploadReceipt',
    'IngestionResult',
    'CostAdvisory',
    'StackAnnotation',
    'CommitPayload',
    'LockResult',
    'WorkflowState',
    'WorkflowView',
]

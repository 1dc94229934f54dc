"""
Core Workflow Components.

Contains the building blocks of the order asset workflow,
separated from backend transport concerns.

Structure:
    models/: Pure data structures (no business logic)
    logic/: Business logic separated from models (transitions, grouping)
    Workflow components

Exports:
    WorkflowController: Per-job step orchestration
    IngestionStage: Upload and authoritative refresh
    RoomAnnotator, PanoramaGraph: Stack and tour annotation
    DirectiveCompiler: Editing directive selection
    LockGate: Validation and irreversible commit
"""

# Lazy imports to avoid circular dependencies
# These are imported on first access via __getattr__
_LAZY_IMPORTS = {
    'WorkflowController': '.workflow_controller',
    'IngestionStage': '.ingestion',
    'RoomAnnotator': '.annotator',
    'PanoramaGraph': '.annotator',
    'DirectiveCompiler': '.directive_compiler',
    'LockGate': '.lock_gate',
}

def __getattr__(name):
    """Lazy import core classes to avoid circular dependencies."""
    if name in _LAZY_IMPORTS:
        from importlib import import_module
        module = import_module(_LAZY_IMPORTS[name], package='core')
        return getattr(module, name)
    raise AttributeError(f"module 'core' has no attribute '{name}'")

__all__ = [
    'WorkflowController',
    'IngestionStage',
    'RoomAnnotator',
    'PanoramaGraph',
    'DirectiveCompiler',
    'LockGate',
]

"""
Infrastructure Package - Lazy Loading Implementation.

Backend implementations are imported on first access so that importing
the package never reads configuration or opens an HTTP session.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .factory import BackendFactory as _BackendFactory
    from .http_backend import HttpWorkflowBackend as _HttpWorkflowBackend
    from .memory_backend import InMemoryWorkflowBackend as _InMemoryWorkflowBackend
    from .interface_repository import (
        IJobRepository as _IJobRepository,
        IAssetStorage as _IAssetStorage,
        IStackRepository as _IStackRepository,
    )


def __getattr__(name: str):
    """
    Lazy import mechanism - only imports when actually accessed.
    """
    if name == "BackendFactory":
        from .factory import BackendFactory
        return BackendFactory

    elif name == "HttpWorkflowBackend":
        from .http_backend import HttpWorkflowBackend
        return HttpWorkflowBackend
    elif name == "InMemoryWorkflowBackend":
        from .memory_backend import InMemoryWorkflowBackend
        return InMemoryWorkflowBackend

    # Interfaces
    elif name == "IJobRepository":
        from .interface_repository import IJobRepository
        return IJobRepository
    elif name == "IAssetStorage":
        from .interface_repository import IAssetStorage
        return IAssetStorage
    elif name == "IStackRepository":
        from .interface_repository import IStackRepository
        return IStackRepository
    elif name == "ParamNames":
        from .interface_repository import ParamNames
        return ParamNames

    else:
        raise AttributeError(f"module 'infrastructure' has no attribute '{name}'")


__all__ = [
    "BackendFactory",
    "HttpWorkflowBackend",
    "InMemoryWorkflowBackend",
    "IJobRepository",
    "IAssetStorage",
    "IStackRepository",
    "ParamNames",
]

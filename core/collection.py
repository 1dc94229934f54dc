# ============================================================================
# STACK COLLECTION
# ============================================================================
# STATUS: Core - Live asset/stack collections for one job session
# PURPOSE: Thread-safe holder replaced wholesale on every authoritative refresh
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: StackCollection
# DEPENDENCIES: core.models, threading
# ============================================================================
"""
Stack Collection.

Holds the local copy of the job's Assets and Stacks. The ingestion stage
replaces both lists in one step; background uploads may do so while the
annotator reads, so every access goes through one lock and readers never
see a half-replaced collection.

Readers get copies. The only in-place edits are room type and comment,
made through update_stack().
"""

import threading
from typing import Any, List, Optional

from .models import Asset, Stack


class StackCollection:
    """
    Thread-safe container for the session's assets and stacks.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._assets: List[Asset] = []
        self._stacks: List[Stack] = []
        self._version = 0

    def replace(self, assets: List[Asset], stacks: List[Stack]) -> int:
        """
        Replace both collections wholesale.

        Returns:
            New collection version (increments on every replace)
        """
        with self._lock:
            self._assets = list(assets)
            self._stacks = list(stacks)
            self._version += 1
            return self._version

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    @property
    def assets(self) -> List[Asset]:
        with self._lock:
            return list(self._assets)

    @property
    def stacks(self) -> List[Stack]:
        with self._lock:
            return [stack.model_copy(deep=True) for stack in self._stacks]

    def get_stack(self, stack_id: str) -> Optional[Stack]:
        with self._lock:
            for stack in self._stacks:
                if stack.stack_id == stack_id:
                    return stack.model_copy(deep=True)
        return None

    def has_stack(self, stack_id: str) -> bool:
        with self._lock:
            return any(stack.stack_id == stack_id for stack in self._stacks)

    def has_asset(self, asset_id: str) -> bool:
        with self._lock:
            return any(asset.asset_id == asset_id for asset in self._assets)

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        with self._lock:
            for asset in self._assets:
                if asset.asset_id == asset_id:
                    return asset
        return None

    def stack_for_asset(self, asset_id: str) -> Optional[Stack]:
        """Stack that owns asset_id, if any."""
        with self._lock:
            for stack in self._stacks:
                if any(asset.asset_id == asset_id for asset in stack.assets):
                    return stack.model_copy(deep=True)
        return None

    def update_stack(self, stack_id: str, **changes: Any) -> Optional[Stack]:
        """
        Apply field changes to one stack in place.

        Returns:
            Copy of the updated stack, or None if stack_id is unknown
        """
        with self._lock:
            for stack in self._stacks:
                if stack.stack_id == stack_id:
                    for field_name, value in changes.items():
                        setattr(stack, field_name, value)
                    return stack.model_copy(deep=True)
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._stacks)
